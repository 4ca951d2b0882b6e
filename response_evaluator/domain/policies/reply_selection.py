"""ReplySelectionPolicy — pick the latest team reply to evaluate."""

from __future__ import annotations

from datetime import datetime, timezone

from response_evaluator.domain.entities.thread import SelectedReply, Thread
from response_evaluator.domain.policies.html_text import html_to_text

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def newest_first(threads: list[Thread]) -> list[Thread]:
    """Stable sort by creation time, newest first.

    Threads without a timestamp sort as the oldest. Equal timestamps keep
    their original relative order.
    """
    return sorted(threads, key=lambda t: t.created_at or _OLDEST, reverse=True)


def select_latest_reply(threads: list[Thread]) -> SelectedReply | None:
    """Return the most recent team-authored message with a non-empty body.

    1. Sort threads newest first.
    2. Walk the list; the first team message/reply whose cleaned body is
       non-empty wins.
    3. None if nothing qualifies.
    """
    for thread in newest_first(threads):
        if not thread.is_team_message():
            continue
        text = html_to_text(thread.body)
        if not text:
            continue
        return SelectedReply(
            text=text,
            created_at=thread.created_at,
            author_name=thread.author_name,
            source_thread_id=thread.id,
        )
    return None
