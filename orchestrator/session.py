"""Mutable state of one acquisition session."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set
from uuid import uuid4

from core import ClassifiedItem, ItemPhase, SessionState, SessionStatus
from models import Classification, MemeReference


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_session_id() -> str:
    return f"session_{_utcnow().strftime('%Y%m%d_%H%M%S')}_{uuid4().hex[:8]}"


def shortfall_message(found: int, attempts: int) -> str:
    return f"Only found {found} unique memes after {attempts} attempts."


class AcquisitionSession:
    """
    Working state for a single run.

    Owned by exactly one running pipeline task. Items live in an arena keyed
    by id; updates replace the entry for that id and never reorder. Observers
    only ever receive deep-copied snapshots.
    """

    def __init__(
        self,
        target_count: int,
        *,
        attempt_multiplier: int = 2,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or _new_session_id()
        self.target_count = int(target_count)
        self.max_attempts = max(0, int(attempt_multiplier) * self.target_count)
        self.attempts_made = 0
        self.status = SessionStatus.IDLE
        self.failure_message: Optional[str] = None
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None
        self._seen: Set[str] = set()
        self._order: List[str] = []
        self._items: Dict[str, ClassifiedItem] = {}

    @property
    def found_count(self) -> int:
        return len(self._order)

    def needs_more(self) -> bool:
        """True while the target is unmet and attempt budget remains."""
        return len(self._seen) < self.target_count and self.attempts_made < self.max_attempts

    def begin(self) -> None:
        self.status = SessionStatus.RUNNING
        self.started_at = _utcnow()

    def record_attempt(self) -> int:
        if self.attempts_made >= self.max_attempts:
            raise RuntimeError(f"attempt budget of {self.max_attempts} exhausted")
        self.attempts_made += 1
        return self.attempts_made

    def has_seen(self, identity_key: str) -> bool:
        return identity_key in self._seen

    def accept(self, reference: MemeReference) -> ClassifiedItem:
        """Register a new identity and append its pending item."""
        key = reference.identity_key
        if key in self._seen:
            raise ValueError(f"identity already accepted: {key}")
        if len(self._seen) >= self.target_count:
            raise RuntimeError("target count already reached")

        self._seen.add(key)
        item = ClassifiedItem(
            id=f"meme-{int(time.time() * 1000)}-{len(self._seen)}",
            identity_key=key,
            payload_ref=reference,
        )
        self._items[item.id] = item
        self._order.append(item.id)
        return item

    def mark_scoring(self, item_id: str) -> ClassifiedItem:
        item = self._items[item_id].model_copy(update={"phase": ItemPhase.SCORING})
        self._items[item_id] = item
        return item

    def mark_scored(self, item_id: str, results: List[Classification]) -> ClassifiedItem:
        item = self._items[item_id].with_scores(results)
        self._items[item_id] = item
        return item

    def mark_unscored(self, item_id: str, error: str) -> ClassifiedItem:
        item = self._items[item_id].model_copy(update={"phase": ItemPhase.UNSCORED, "error": str(error)})
        self._items[item_id] = item
        return item

    def complete(self) -> None:
        """Settle the terminal status once the loop has ended."""
        self.finished_at = _utcnow()
        if self.found_count >= self.target_count:
            self.status = SessionStatus.COMPLETED
            self.failure_message = None
        else:
            self.status = SessionStatus.COMPLETED_WITH_SHORTFALL
            self.failure_message = shortfall_message(self.found_count, self.attempts_made)

    def fail(self, message: str) -> None:
        self.finished_at = _utcnow()
        self.status = SessionStatus.FAILED
        self.failure_message = str(message)

    def snapshot(self) -> SessionState:
        return SessionState(
            session_id=self.session_id,
            target_count=self.target_count,
            max_attempts=self.max_attempts,
            attempts_made=self.attempts_made,
            seen_count=len(self._seen),
            items=[self._items[item_id].model_copy(deep=True) for item_id in self._order],
            status=self.status,
            failure_message=self.failure_message,
            started_at=self.started_at,
            finished_at=self.finished_at,
        )
