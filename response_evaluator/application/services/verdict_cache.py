"""VerdictCache — in-process memoization of evaluations.

One instance is built at application startup and shared by every request.
Besides finished verdicts it tracks which keys have a model call in flight,
so a second request for the same reply waits for the first instead of
issuing another call.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from response_evaluator.domain.entities.verdict import Verdict

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=30)
KEY_HASH_LENGTH = 16


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    verdict: Verdict
    created_at: datetime


class VerdictCache:
    """Verdicts keyed by ticket id + reply content hash."""

    def __init__(
        self,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._retention = retention
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: set[str] = set()

    @staticmethod
    def make_key(ticket_id: str, reply_text: str) -> str:
        """Key changes whenever the evaluated text changes, whatever its timestamp."""
        digest = hashlib.sha256(reply_text.strip().encode("utf-8")).hexdigest()
        return f"{ticket_id}:{digest[:KEY_HASH_LENGTH]}"

    # ── Verdicts ────────────────────────────────────────────────────

    def get(self, key: str) -> Verdict | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            return None
        return entry.verdict

    def set(self, key: str, verdict: Verdict) -> None:
        self._entries[key] = CacheEntry(verdict=verdict, created_at=self._clock())

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._in_flight.clear()

    def evict_expired(self) -> int:
        """Drop entries older than the retention window; return how many."""
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info("Evicted %d expired verdict(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at > self._retention

    # ── In-flight markers ───────────────────────────────────────────

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    def mark_in_flight(self, key: str) -> None:
        self._in_flight.add(key)

    def clear_in_flight(self, key: str) -> None:
        self._in_flight.discard(key)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)
