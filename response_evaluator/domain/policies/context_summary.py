"""ContextSummaryPolicy — short transcript of the latest threads for the model."""

from __future__ import annotations

from response_evaluator.domain.entities.thread import Thread
from response_evaluator.domain.policies.html_text import html_to_text, truncate
from response_evaluator.domain.policies.reply_selection import newest_first
from response_evaluator.domain.value_objects.enums import AuthorKind

MIN_CONTEXT_THREADS = 3
MAX_CONTEXT_THREADS = 5
DEFAULT_MAX_CHARS = 500
DEFAULT_MIN_CHARS = 10

AUTHOR_LABELS: dict[AuthorKind, str] = {
    AuthorKind.CUSTOMER: "CUSTOMER",
    AuthorKind.TEAM: "TEAM",
    AuthorKind.SYSTEM: "SYSTEM",
    AuthorKind.UNKNOWN: "SYSTEM",
}


def clamp_limit(limit: int) -> int:
    return max(MIN_CONTEXT_THREADS, min(MAX_CONTEXT_THREADS, limit))


def summarize_context(
    threads: list[Thread],
    limit: int = MAX_CONTEXT_THREADS,
    max_chars: int = DEFAULT_MAX_CHARS,
    min_chars: int = DEFAULT_MIN_CHARS,
) -> str:
    """Build a chronological excerpt of the *limit* most recent threads.

    Each line is "[LABEL] text" with HTML stripped and whitespace collapsed,
    truncated to *max_chars*. Lines shorter than *min_chars* after cleaning
    are dropped. Returns "" when nothing qualifies.
    """
    recent = newest_first(threads)[: clamp_limit(limit)]

    lines = []
    for thread in reversed(recent):
        text = html_to_text(thread.body)
        if len(text) < min_chars:
            continue
        lines.append(f"[{AUTHOR_LABELS[thread.author]}] {truncate(text, max_chars)}")
    return "\n".join(lines)
