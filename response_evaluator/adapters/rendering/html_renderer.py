"""HTML fragments for the Help Scout sidebar.

Help Scout drops the returned markup straight into the Dynamic App panel,
so every fragment is self-contained (inline styles, no <html>/<body>) and
every interpolated value goes through ``html.escape``.
"""

from __future__ import annotations

from html import escape

from response_evaluator.config import CachedResultDetail
from response_evaluator.domain.entities.ticket import Ticket
from response_evaluator.domain.entities.verdict import Verdict
from response_evaluator.domain.value_objects.enums import ProductContext, RubricCategory

TITLE = "📊 Response Evaluator"

CHAT_UNAVAILABLE_MESSAGE = "Response evaluation is not available for chats."
FETCH_FAILED_MESSAGE = "Could not fetch conversation data."
NO_REPLY_MESSAGE = "No team response found to evaluate."
PROCESSING_MESSAGE = "Evaluation in progress. Refresh the sidebar in a few seconds to see the result."
MISSING_TICKET_MESSAGE = "No ticket data received."
INVALID_SIGNATURE_MESSAGE = "Request signature could not be verified."
NO_RECOMMENDATIONS_MESSAGE = "No recommendations. This response looks great!"
CACHED_NOTE = "Cached result for this version of the reply."
REFRESH_FOR_DETAIL_MESSAGE = (
    "This reply was already evaluated. Edit the reply or refresh later to see the full breakdown."
)

COLOR_GOOD = "#10a54a"
COLOR_OK = "#2c5aa0"
COLOR_POOR = "#d63638"

_WRAPPER = (
    '<div class="response-evaluator" style="padding: 16px; font-family: -apple-system, '
    "BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; font-size: 13px; line-height: 1.4; "
    'color: #333;">{body}</div>'
)
_HEADER = (
    '<h3 style="font-size: 14px; font-weight: 600; color: #2c5aa0; margin: 0 0 16px 0;">'
    f"{TITLE}</h3>"
)


def score_color(score: float) -> str:
    if score >= 8:
        return COLOR_GOOD
    if score >= 6:
        return COLOR_OK
    return COLOR_POOR


class HtmlRenderer:
    """Turns verdicts and pipeline states into sidebar fragments."""

    def __init__(self, cached_detail: CachedResultDetail = CachedResultDetail.FULL):
        self._cached_detail = cached_detail

    # ── Verdicts ────────────────────────────────────────────────────

    def render_verdict(
        self,
        verdict: Verdict,
        product: ProductContext = ProductContext.WORDPRESS,
        cached: bool = False,
    ) -> str:
        if verdict.is_error:
            return self._wrap(self._error_panel(verdict.error or "Unknown error"))

        parts = [self._score_badge(verdict.overall_score)]
        if cached and self._cached_detail is CachedResultDetail.SUMMARY:
            parts.append(self._notice(REFRESH_FOR_DETAIL_MESSAGE))
        else:
            parts.extend(self._category_row(verdict, c) for c in RubricCategory)
            parts.append(self._improvements(verdict.key_improvements))
            if cached:
                parts.append(self._notice(CACHED_NOTE))
        parts.append(self._footer(product))
        return self._wrap("".join(parts))

    # ── Fixed states ────────────────────────────────────────────────

    def render_chat_unavailable(self) -> str:
        return self._message(CHAT_UNAVAILABLE_MESSAGE)

    def render_fetch_failed(self, ticket: Ticket) -> str:
        return self._message(FETCH_FAILED_MESSAGE, ticket)

    def render_no_reply(self, ticket: Ticket) -> str:
        return self._message(NO_REPLY_MESSAGE, ticket)

    def render_processing(self, ticket: Ticket) -> str:
        return self._message(PROCESSING_MESSAGE, ticket)

    def render_missing_ticket(self) -> str:
        return self._message(MISSING_TICKET_MESSAGE)

    def render_invalid_signature(self) -> str:
        return self._message(INVALID_SIGNATURE_MESSAGE)

    @staticmethod
    def render_error(message: str) -> str:
        """Minimal fragment that cannot itself fail to render."""
        return (
            '<div style="padding: 20px; font-family: Arial, sans-serif;">'
            f"<h3>{TITLE}</h3>"
            f'<p style="color: {COLOR_POOR};">Error: {escape(str(message))}</p>'
            "</div>"
        )

    # ── Pieces ──────────────────────────────────────────────────────

    @staticmethod
    def _wrap(body: str) -> str:
        return _WRAPPER.format(body=_HEADER + body)

    def _message(self, text: str, ticket: Ticket | None = None) -> str:
        body = f'<p class="status-message" style="margin: 0 0 8px 0;">{escape(text)}</p>'
        if ticket is not None:
            body += (
                '<p style="margin: 0; font-size: 11px; color: #999;">'
                f"Ticket: #{escape(ticket.display_number)}</p>"
            )
        return self._wrap(body)

    @staticmethod
    def _score_badge(score: float) -> str:
        return (
            '<div class="overall-score" style="display: flex; align-items: center; '
            'justify-content: center; margin-bottom: 20px; padding: 16px; '
            'background: #f8f9fa; border-radius: 8px;">'
            '<div class="score-circle" style="display: flex; align-items: center; '
            "justify-content: center; width: 50px; height: 50px; border-radius: 50%; "
            f"background: {score_color(score)}; color: white; font-weight: bold; "
            f'margin-right: 12px; font-size: 16px;">{score:.1f}</div>'
            '<div class="score-label">Overall Score</div>'
            "</div>"
        )

    @staticmethod
    def _category_row(verdict: Verdict, category: RubricCategory) -> str:
        result = verdict.categories[category]
        return (
            '<div class="category" style="margin-bottom: 12px; padding: 10px; '
            'background: #f8f9fa; border-radius: 6px; border-left: 3px solid #2c5aa0;">'
            '<div style="display: flex; justify-content: space-between; margin-bottom: 4px;">'
            f'<span style="font-weight: 600; font-size: 11px;">{escape(category.label)}</span>'
            f'<span class="category-score" style="background: {score_color(result.score)}; '
            'color: white; padding: 2px 6px; border-radius: 10px; font-size: 10px; '
            f'font-weight: bold;">{result.score}/10</span>'
            "</div>"
            '<div class="category-feedback" style="font-size: 10px; color: #666;">'
            f"{escape(result.feedback)}</div>"
            "</div>"
        )

    @staticmethod
    def _improvements(items: list[str]) -> str:
        if items:
            content = (
                '<ul style="margin: 0; padding-left: 16px;">'
                + "".join(
                    f'<li style="font-size: 10px; color: #666; margin-bottom: 4px;">{escape(i)}</li>'
                    for i in items
                )
                + "</ul>"
            )
        else:
            content = (
                '<p class="no-recommendations" style="margin: 0; font-size: 10px; color: #666;">'
                f"{escape(NO_RECOMMENDATIONS_MESSAGE)}</p>"
            )
        return (
            '<div class="improvements" style="margin-top: 16px; padding: 12px; '
            'background: #fff9e6; border-radius: 6px; border-left: 3px solid #f0b90b;">'
            '<h4 style="font-size: 11px; margin: 0 0 8px 0;">🎯 Key Improvements</h4>'
            f"{content}</div>"
        )

    @staticmethod
    def _error_panel(message: str) -> str:
        return (
            '<div class="error-panel" style="color: #d63638; background: #fff2f2; '
            'padding: 12px; border-radius: 4px;">'
            '<h4 style="margin: 0 0 8px 0; font-size: 12px;">Evaluation unavailable</h4>'
            f'<p style="margin: 0; font-size: 11px;">{escape(message)}</p>'
            "</div>"
        )

    @staticmethod
    def _notice(text: str) -> str:
        return (
            '<p class="notice" style="margin: 12px 0 0 0; font-size: 10px; color: #999;">'
            f"{escape(text)}</p>"
        )

    @staticmethod
    def _footer(product: ProductContext) -> str:
        return (
            '<div class="product-type" style="text-align: center; color: #999; font-size: 10px; '
            'padding-top: 12px; border-top: 1px solid #e8e8e8; margin-top: 12px;">'
            f"Detected: {escape(product.label)}</div>"
        )
