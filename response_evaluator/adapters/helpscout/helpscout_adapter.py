"""Help Scout Mailbox API adapter — implements ConversationPort."""

from __future__ import annotations

import logging
import time

import httpx

from response_evaluator.application.ports.conversation_port import ConversationPort
from response_evaluator.config import settings
from response_evaluator.domain.entities.thread import Thread

logger = logging.getLogger(__name__)

# Refresh the OAuth token this many seconds before Help Scout says it expires
TOKEN_EXPIRY_MARGIN = 60.0


class HelpScoutAuthError(Exception):
    """Raised when no usable access token can be obtained."""


class HelpScoutAdapter(ConversationPort):
    """Reads conversation threads with a static token or client credentials."""

    def __init__(
        self,
        access_token: str | None = None,
        app_id: str | None = None,
        app_secret: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_pages: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._static_token = (
            access_token if access_token is not None else settings.helpscout_access_token
        )
        self._app_id = app_id if app_id is not None else settings.helpscout_app_id
        self._app_secret = app_secret if app_secret is not None else settings.helpscout_app_secret
        self._base_url = (base_url or settings.helpscout_base_url).rstrip("/")
        self._timeout = timeout or settings.helpscout_timeout
        self._max_pages = max(1, max_pages or settings.helpscout_max_pages)
        self._transport = transport
        self._oauth_token: str | None = None
        self._oauth_expires_at = 0.0

    async def fetch_threads(self, conversation_id: str) -> list[Thread] | None:
        """Fetch every thread of a conversation.

        Strategy:
        1. Resolve a bearer token (static, cached OAuth, or a fresh exchange)
        2. Page through /conversations/{id}/threads
        3. Normalize each raw thread into a Thread
        """
        if not conversation_id or not str(conversation_id).strip():
            logger.warning("Empty conversation id, nothing to fetch")
            return None

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                token = await self._get_access_token(client)
                raw_threads = await self._fetch_raw_threads(client, token, str(conversation_id))
        except HelpScoutAuthError as e:
            logger.error("Help Scout authentication failed: %s", e)
            return None
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                # Revoked or expired early; next request exchanges again
                self._oauth_token = None
            logger.error(
                "Help Scout API error for conversation %s: %d %s",
                conversation_id, e.response.status_code, e.response.text[:200],
            )
            return None
        except Exception:
            logger.exception("Help Scout request failed for conversation %s", conversation_id)
            return None

        threads = [Thread.from_payload(raw) for raw in raw_threads if isinstance(raw, dict)]
        logger.info("Fetched %d thread(s) for conversation %s", len(threads), conversation_id)
        return threads

    async def _get_access_token(self, client: httpx.AsyncClient) -> str:
        if self._static_token.strip():
            return self._static_token.strip()

        if self._oauth_token and time.monotonic() < self._oauth_expires_at:
            return self._oauth_token

        if not (self._app_id and self._app_secret):
            raise HelpScoutAuthError("no access token and no app id/secret configured")

        logger.info("Requesting Help Scout OAuth token")
        try:
            response = await client.post(
                "/oauth2/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._app_id,
                    "client_secret": self._app_secret,
                },
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise HelpScoutAuthError(
                f"token endpoint returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise HelpScoutAuthError(f"token request failed: {e}") from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise HelpScoutAuthError("token response did not include access_token")

        expires_in = float(payload.get("expires_in") or 0)
        self._oauth_token = token
        self._oauth_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0.0)
        return token

    async def _fetch_raw_threads(
        self, client: httpx.AsyncClient, token: str, conversation_id: str
    ) -> list[dict]:
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        threads: list[dict] = []
        page = 1
        while True:
            response = await client.get(
                f"/conversations/{conversation_id}/threads",
                params={"page": page},
                headers=headers,
            )
            response.raise_for_status()
            data = response.json()

            threads.extend((data.get("_embedded") or {}).get("threads") or [])

            total_pages = int((data.get("page") or {}).get("totalPages") or 1)
            if page >= total_pages or page >= self._max_pages:
                if total_pages > self._max_pages:
                    logger.warning(
                        "Conversation %s has %d thread pages, read the first %d",
                        conversation_id, total_pages, self._max_pages,
                    )
                return threads
            page += 1
