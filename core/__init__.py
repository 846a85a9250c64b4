"""Core contracts shared by the pipeline and its observers."""

from .contracts import (
    ClassifiedItem,
    ItemPhase,
    SessionState,
    SessionStatus,
)

__all__ = [
    "ClassifiedItem",
    "ItemPhase",
    "SessionState",
    "SessionStatus",
]
