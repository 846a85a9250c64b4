from __future__ import annotations

from rich.console import Console

from core import ClassifiedItem, ItemPhase, SessionState, SessionStatus
from models import Classification, MemeReference
from outputs.console import ConsoleSessionView, render_session


def _state() -> SessionState:
    scored = ClassifiedItem(
        id="meme-1-1",
        identity_key="https://i.redd.it/a.png",
        payload_ref=MemeReference(url="https://i.redd.it/a.png", title="Monday again"),
    ).with_scores([Classification(label="Sarcastic", score=0.41), Classification(label="Funny", score=0.9)])
    failed = ClassifiedItem(
        id="meme-1-2",
        identity_key="https://i.redd.it/b.png",
        payload_ref=MemeReference(url="https://i.redd.it/b.png"),
        phase=ItemPhase.UNSCORED,
        error="model offline",
    )
    return SessionState(
        session_id="session_x",
        target_count=3,
        max_attempts=6,
        attempts_made=6,
        seen_count=2,
        items=[scored, failed],
        status=SessionStatus.COMPLETED_WITH_SHORTFALL,
        failure_message="Only found 2 unique memes after 6 attempts.",
    )


def _render_text(renderable) -> str:
    console = Console(record=True, width=160)
    console.print(renderable)
    return console.export_text()


def test_render_session_shows_progress_and_scores() -> None:
    text = _render_text(render_session(_state()))

    assert "completed with shortfall" in text
    assert "found 2/3" in text
    assert "scored 1" in text
    assert "attempts 6/6" in text
    assert "Only found 2 unique memes after 6 attempts." in text
    assert "2 Memes Analyzed" in text
    assert "Monday again" in text
    assert "Funny 90%" in text
    assert "Sarcastic 41%" in text
    assert "model offline" in text


def test_render_session_without_items_has_no_table() -> None:
    state = SessionState(session_id="s", target_count=2, max_attempts=4, status=SessionStatus.RUNNING)
    text = _render_text(render_session(state))

    assert "running" in text
    assert "scored 0" in text
    assert "Memes Analyzed" not in text


def test_console_view_tracks_last_state() -> None:
    console = Console(record=True, width=120)
    state = _state()
    with ConsoleSessionView(console=console) as view:
        view.update(state)
    assert view.last_state == state
