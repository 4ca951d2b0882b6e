"""Help Scout Dynamic App endpoint — POST / returns {"html": ...}.

The sidebar iframe cannot react to error statuses, so every path here,
failures included, answers 200 with a renderable fragment.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from response_evaluator.adapters.rendering.html_renderer import HtmlRenderer
from response_evaluator.application.use_cases.evaluate_conversation import (
    EvaluateConversationUseCase,
    EvaluationOutcome,
)
from response_evaluator.config import Settings
from response_evaluator.domain.entities.ticket import Ticket
from response_evaluator.domain.value_objects.enums import OutcomeStatus
from response_evaluator.infrastructure.api.dependencies import (
    get_evaluate_conversation_uc,
    get_renderer,
    get_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dynamic-app"])

SIGNATURE_HEADER = "X-HelpScout-Signature"


# ── Response schema ─────────────────────────────────────────────────

class SidebarResponse(BaseModel):
    html: str


# ── Helpers ─────────────────────────────────────────────────────────

def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Check Help Scout's base64 HMAC-SHA1 of the raw body."""
    if not signature:
        return False
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha1).digest()
    expected = base64.b64encode(digest).decode("ascii")
    return hmac.compare_digest(expected, signature.strip())


def _parse_payload(body: bytes) -> dict:
    try:
        payload = json.loads(body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Dynamic App request body is not valid JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


def _payload_tags(payload: dict) -> list:
    tags = payload.get("tags")
    if tags is None and isinstance(payload.get("ticket"), dict):
        tags = payload["ticket"].get("tags")
    return tags if isinstance(tags, list) else []


def _render_outcome(
    outcome: EvaluationOutcome, ticket: Ticket, renderer: HtmlRenderer
) -> str:
    if outcome.status is OutcomeStatus.CHAT_UNAVAILABLE:
        return renderer.render_chat_unavailable()
    if outcome.status is OutcomeStatus.FETCH_FAILED:
        return renderer.render_fetch_failed(ticket)
    if outcome.status is OutcomeStatus.NO_REPLY:
        return renderer.render_no_reply(ticket)
    if outcome.status is OutcomeStatus.PROCESSING:
        return renderer.render_processing(ticket)
    return renderer.render_verdict(
        outcome.verdict,
        product=outcome.product,
        cached=outcome.status is OutcomeStatus.CACHED,
    )


# ── Endpoint ────────────────────────────────────────────────────────

@router.post("/", response_model=SidebarResponse)
async def dynamic_app(
    request: Request,
    use_case: EvaluateConversationUseCase = Depends(get_evaluate_conversation_uc),
    renderer: HtmlRenderer = Depends(get_renderer),
    config: Settings = Depends(get_settings),
):
    """Evaluate the latest team reply on the ticket Help Scout is showing."""
    body = await request.body()

    secret = config.helpscout_signing_secret.strip()
    if secret and not verify_signature(body, request.headers.get(SIGNATURE_HEADER), secret):
        logger.warning("Rejected Dynamic App request with invalid signature")
        return SidebarResponse(html=renderer.render_invalid_signature())

    payload = _parse_payload(body)
    ticket = Ticket.from_payload(payload.get("ticket"), payload.get("customer"))
    if ticket is None:
        logger.info("Dynamic App request without ticket id")
        return SidebarResponse(html=renderer.render_missing_ticket())

    logger.info("Dynamic App request for ticket %s (#%s)", ticket.id, ticket.display_number)

    try:
        outcome = await use_case.execute(ticket, tags=_payload_tags(payload))
        html = _render_outcome(outcome, ticket, renderer)
    except Exception as e:
        logger.exception("Failed to build sidebar for ticket %s", ticket.id)
        html = renderer.render_error(str(e) or e.__class__.__name__)

    return SidebarResponse(html=html)
