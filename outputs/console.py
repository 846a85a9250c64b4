"""Rich console rendering for session snapshots."""

from __future__ import annotations

from typing import Optional

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core import ClassifiedItem, ItemPhase, SessionState, SessionStatus


_STATUS_STYLE = {
    SessionStatus.IDLE: "dim",
    SessionStatus.RUNNING: "bold cyan",
    SessionStatus.COMPLETED: "bold green",
    SessionStatus.COMPLETED_WITH_SHORTFALL: "bold yellow",
    SessionStatus.FAILED: "bold red",
}

_PHASE_LABEL = {
    ItemPhase.PENDING: "[dim]pending[/dim]",
    ItemPhase.SCORING: "[cyan]analyzing...[/cyan]",
    ItemPhase.SCORED: "[green]scored[/green]",
    ItemPhase.UNSCORED: "[red]unscored[/red]",
}


def _truncate(text: Optional[str], limit: int = 48) -> str:
    value = str(text or "").strip()
    return value if len(value) <= limit else value[: limit - 3] + "..."


def format_status_line(state: SessionState) -> Text:
    style = _STATUS_STYLE.get(state.status, "white")
    line = Text.assemble(
        (state.status.value.replace("_", " "), style),
        f"  found {state.found_count}/{state.target_count}",
        f"  scored {state.scored_count}",
        f"  attempts {state.attempts_made}/{state.max_attempts}",
    )
    if state.failure_message:
        color = "red" if state.status == SessionStatus.FAILED else "yellow"
        line.append(f"\n{state.failure_message}", style=color)
    return line


def _classifications(item: ClassifiedItem) -> str:
    if item.phase == ItemPhase.UNSCORED:
        return f"[red]{_truncate(item.error, 40)}[/red]"
    if not item.scores:
        return ""
    return ", ".join(f"{entry.label} {entry.percent}%" for entry in item.scores)


def build_items_table(state: SessionState) -> Table:
    table = Table(title=f"{state.found_count} Memes Analyzed", show_header=True, expand=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("Meme", style="white")
    table.add_column("Phase")
    table.add_column("Top", style="bold magenta")
    table.add_column("All Classifications", style="white")

    for index, item in enumerate(state.items, start=1):
        meme = item.payload_ref
        top = f"{item.top_score.label} {item.top_score.percent}%" if item.top_score else ""
        table.add_row(
            str(index),
            f"{_truncate(meme.title or meme.url)}\n[dim]{_truncate(meme.url, 60)}[/dim]",
            _PHASE_LABEL.get(item.phase, item.phase.value),
            top,
            _classifications(item),
        )
    return table


def render_session(state: SessionState) -> RenderableType:
    """Status panel plus the item table (table omitted while empty)."""
    parts = [Panel(format_status_line(state), title="Meme Emotion Analysis", border_style="blue")]
    if state.items:
        parts.append(build_items_table(state))
    return Group(*parts)


class ConsoleSessionView:
    """Live-updating view fed by a SessionController callback."""

    def __init__(self, console: Optional[Console] = None, refresh_per_second: float = 8.0) -> None:
        self.console = console or Console()
        self._live = Live(console=self.console, refresh_per_second=refresh_per_second, transient=False)
        self.last_state: Optional[SessionState] = None

    def __enter__(self) -> "ConsoleSessionView":
        self._live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._live.__exit__(exc_type, exc_val, exc_tb)

    def update(self, state: SessionState) -> None:
        self.last_state = state
        self._live.update(render_session(state), refresh=True)
