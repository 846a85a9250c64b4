"""Canonical data contracts for acquisition sessions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from models import Classification, MemeReference
from processing.ranking import sort_classifications, top_classification


class SessionStatus(str, Enum):
    """Lifecycle of one acquisition session."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_SHORTFALL = "completed_with_shortfall"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {
            SessionStatus.COMPLETED,
            SessionStatus.COMPLETED_WITH_SHORTFALL,
            SessionStatus.FAILED,
        }


class ItemPhase(str, Enum):
    """Per-item progress. UNSCORED is terminal: scoring gave up."""

    PENDING = "pending"
    SCORING = "scoring"
    SCORED = "scored"
    UNSCORED = "unscored"


class ClassifiedItem(BaseModel):
    """One accepted candidate and its classification progress."""

    id: str
    identity_key: str
    payload_ref: MemeReference
    scores: Optional[List[Classification]] = None
    top_score: Optional[Classification] = None
    phase: ItemPhase = ItemPhase.PENDING
    error: Optional[str] = None

    @model_validator(mode="after")
    def _top_score_tracks_scores(self) -> "ClassifiedItem":
        if self.scores is None:
            if self.top_score is not None:
                raise ValueError("top_score requires scores")
            return self
        if not self.scores:
            raise ValueError("scores must hold at least one classification")
        if self.top_score != top_classification(self.scores):
            raise ValueError("top_score must be the highest-scoring entry of scores")
        return self

    def with_scores(self, results: List[Classification]) -> "ClassifiedItem":
        """Scored copy: results sorted descending, top entry derived."""
        ordered = sort_classifications(results)
        if not ordered:
            raise ValueError("cannot score an item with no classifications")
        return ClassifiedItem(
            id=self.id,
            identity_key=self.identity_key,
            payload_ref=self.payload_ref,
            scores=ordered,
            top_score=ordered[0],
            phase=ItemPhase.SCORED,
            error=None,
        )


class SessionState(BaseModel):
    """Immutable snapshot of a session delivered to observers."""

    session_id: str
    target_count: int
    max_attempts: int
    attempts_made: int = 0
    seen_count: int = 0
    items: List[ClassifiedItem] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.IDLE
    failure_message: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def found_count(self) -> int:
        return len(self.items)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def scored_count(self) -> int:
        return sum(1 for item in self.items if item.phase == ItemPhase.SCORED)
