"""Tests for ReplySelectionPolicy."""

import itertools
from datetime import datetime, timedelta, timezone

from response_evaluator.domain.entities.thread import Thread
from response_evaluator.domain.policies.reply_selection import newest_first, select_latest_reply
from response_evaluator.domain.value_objects.enums import AuthorKind, ThreadType

BASE = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def _thread(
    tid: str, minutes: int | None, author=AuthorKind.TEAM,
    ttype=ThreadType.MESSAGE, body: str | None = None,
) -> Thread:
    return Thread(
        id=tid, type=ttype, author=author,
        body=body if body is not None else f"<p>Body of {tid}</p>",
        created_at=BASE + timedelta(minutes=minutes) if minutes is not None else None,
    )


def test_picks_latest_team_message():
    threads = [
        _thread("c1", 0, author=AuthorKind.CUSTOMER, ttype=ThreadType.CUSTOMER),
        _thread("t1", 5),
        _thread("t2", 10),
    ]
    reply = select_latest_reply(threads)
    assert reply.source_thread_id == "t2"
    assert reply.text == "Body of t2"


def test_reply_type_counts_as_team_message():
    reply = select_latest_reply([_thread("r1", 1, ttype=ThreadType.REPLY)])
    assert reply.source_thread_id == "r1"


def test_result_independent_of_input_order():
    threads = [
        _thread("c1", 0, author=AuthorKind.CUSTOMER, ttype=ThreadType.CUSTOMER),
        _thread("t1", 5),
        _thread("n1", 20, ttype=ThreadType.NOTE),
        _thread("t2", 10),
        _thread("c2", 15, author=AuthorKind.CUSTOMER, ttype=ThreadType.CUSTOMER),
    ]
    for perm in itertools.permutations(threads):
        assert select_latest_reply(list(perm)).source_thread_id == "t2"


def test_skips_notes_customers_and_system():
    threads = [
        _thread("t1", 0),
        _thread("n1", 5, ttype=ThreadType.NOTE),
        _thread("c1", 6, author=AuthorKind.CUSTOMER),
        _thread("s1", 7, author=AuthorKind.SYSTEM, ttype=ThreadType.LINEITEM),
    ]
    assert select_latest_reply(threads).source_thread_id == "t1"


def test_skips_empty_bodies():
    threads = [
        _thread("t1", 0),
        _thread("t2", 5, body="   "),
        _thread("t3", 6, body="<p> </p><br>"),
    ]
    assert select_latest_reply(threads).source_thread_id == "t1"


def test_none_when_no_team_reply():
    threads = [_thread("c1", 0, author=AuthorKind.CUSTOMER, ttype=ThreadType.CUSTOMER)]
    assert select_latest_reply(threads) is None
    assert select_latest_reply([]) is None


def test_equal_timestamps_keep_original_order():
    first = _thread("a", 5)
    second = _thread("b", 5)
    assert select_latest_reply([first, second]).source_thread_id == "a"
    assert select_latest_reply([second, first]).source_thread_id == "b"


def test_missing_timestamp_sorts_oldest():
    threads = [_thread("undated", None), _thread("dated", 1)]
    assert [t.id for t in newest_first(threads)] == ["dated", "undated"]


def test_reply_text_is_plain():
    t = _thread("t1", 0, body="<p>Thanks &amp; welcome!</p><p>Best regards</p>")
    assert select_latest_reply([t]).text == "Thanks & welcome! Best regards"
