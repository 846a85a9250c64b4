from __future__ import annotations

import pytest

from core import ItemPhase, SessionStatus
from models import Classification, MemeReference
from orchestrator.session import AcquisitionSession, shortfall_message


def _meme(name: str) -> MemeReference:
    return MemeReference(url=f"https://i.redd.it/{name}.png")


def test_budget_is_multiple_of_target() -> None:
    session = AcquisitionSession(4, attempt_multiplier=2)
    assert session.max_attempts == 8
    assert session.status == SessionStatus.IDLE
    assert session.session_id.startswith("session_")


def test_record_attempt_stops_at_budget() -> None:
    session = AcquisitionSession(1, attempt_multiplier=2)
    session.record_attempt()
    session.record_attempt()
    assert not session.needs_more()
    with pytest.raises(RuntimeError):
        session.record_attempt()


def test_accept_rejects_duplicates_and_overflow() -> None:
    session = AcquisitionSession(2)
    session.accept(_meme("a"))
    assert session.has_seen("https://i.redd.it/a.png")

    with pytest.raises(ValueError):
        session.accept(_meme("a"))

    session.accept(_meme("b"))
    with pytest.raises(RuntimeError):
        session.accept(_meme("c"))
    assert session.found_count == 2


def test_item_updates_replace_in_place_and_keep_order() -> None:
    session = AcquisitionSession(3)
    first = session.accept(_meme("a"))
    second = session.accept(_meme("b"))

    session.mark_scoring(second.id)
    session.mark_scored(second.id, [Classification(label="Funny", score=0.6)])
    session.mark_unscored(first.id, "model offline")

    items = session.snapshot().items
    assert [item.id for item in items] == [first.id, second.id]
    assert items[0].phase == ItemPhase.UNSCORED
    assert items[0].error == "model offline"
    assert items[1].phase == ItemPhase.SCORED
    assert items[1].top_score.label == "Funny"
    assert first.id != second.id


def test_snapshot_is_detached_from_session() -> None:
    session = AcquisitionSession(2)
    item = session.accept(_meme("a"))
    before = session.snapshot()

    session.mark_scored(item.id, [Classification(label="Funny", score=0.6)])

    assert before.items[0].phase == ItemPhase.PENDING
    assert session.snapshot().items[0].phase == ItemPhase.SCORED


def test_complete_settles_success_or_shortfall() -> None:
    done = AcquisitionSession(1)
    done.begin()
    done.record_attempt()
    done.accept(_meme("a"))
    done.complete()
    assert done.status == SessionStatus.COMPLETED
    assert done.failure_message is None

    short = AcquisitionSession(2)
    short.begin()
    for _ in range(4):
        short.record_attempt()
    short.accept(_meme("a"))
    short.complete()
    assert short.status == SessionStatus.COMPLETED_WITH_SHORTFALL
    assert short.failure_message == shortfall_message(1, 4) == "Only found 1 unique memes after 4 attempts."


def test_fail_records_message() -> None:
    session = AcquisitionSession(1)
    session.fail("boom")
    state = session.snapshot()
    assert state.status == SessionStatus.FAILED
    assert state.failure_message == "boom"
    assert state.finished_at is not None
