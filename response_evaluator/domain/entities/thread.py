"""Thread entity — one message, reply or note inside a conversation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from response_evaluator.domain.value_objects.enums import AuthorKind, ThreadType

TEAM_MARKERS = {"user", "team"}
CUSTOMER_MARKERS = {"customer"}
SYSTEM_MARKERS = {"system"}


def classify_author(created_by: object) -> AuthorKind:
    """Normalize Help Scout's ``createdBy`` field.

    The field shows up either as a bare string ("user") or as an object
    with a ``type`` key ({"type": "user", "first": ...}); both are read
    the same way.
    """
    if isinstance(created_by, dict):
        marker = created_by.get("type")
    else:
        marker = created_by
    if not isinstance(marker, str):
        return AuthorKind.UNKNOWN

    marker = marker.strip().lower()
    if marker in TEAM_MARKERS:
        return AuthorKind.TEAM
    if marker in CUSTOMER_MARKERS:
        return AuthorKind.CUSTOMER
    if marker in SYSTEM_MARKERS:
        return AuthorKind.SYSTEM
    return AuthorKind.UNKNOWN


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp ("2024-05-01T10:00:00Z") into an aware datetime."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _author_name(created_by: object) -> str | None:
    if not isinstance(created_by, dict):
        return None
    name = " ".join(
        p.strip() for p in (created_by.get("first"), created_by.get("last"))
        if isinstance(p, str) and p.strip()
    )
    return name or None


@dataclass(frozen=True)
class Thread:
    id: str | None
    type: ThreadType
    author: AuthorKind
    body: str
    created_at: datetime | None = None
    author_name: str | None = None

    @classmethod
    def from_payload(cls, raw: dict) -> Thread:
        """Build a Thread from one entry of ``_embedded.threads``."""
        raw_type = str(raw.get("type") or "").strip().lower()
        try:
            thread_type = ThreadType(raw_type)
        except ValueError:
            thread_type = ThreadType.OTHER

        created_by = raw.get("createdBy")
        author = classify_author(created_by)
        # Line items ("Assigned to ...", status changes) are written by Help Scout itself
        if thread_type is ThreadType.LINEITEM:
            author = AuthorKind.SYSTEM

        return cls(
            id=str(raw["id"]) if raw.get("id") is not None else None,
            type=thread_type,
            author=author,
            body=raw.get("body") or "",
            created_at=parse_timestamp(raw.get("createdAt")),
            author_name=_author_name(created_by),
        )

    def is_team_message(self) -> bool:
        return (
            self.type in (ThreadType.MESSAGE, ThreadType.REPLY)
            and self.author is AuthorKind.TEAM
        )


@dataclass(frozen=True)
class SelectedReply:
    """The team reply picked for evaluation; lives for one request only."""

    text: str
    created_at: datetime | None
    author_name: str | None
    source_thread_id: str | None
