"""Ordering helpers for classifier output."""

from __future__ import annotations

from typing import Iterable, List, Optional

from models import Classification


def sort_classifications(results: Iterable[Classification]) -> List[Classification]:
    """Return results ordered by descending score; equal scores keep their input order."""
    return sorted(results, key=lambda item: item.score, reverse=True)


def top_classification(results: Iterable[Classification]) -> Optional[Classification]:
    """Highest-scoring entry, first one wins on ties. ``None`` for empty input."""
    best: Optional[Classification] = None
    for item in results:
        if best is None or item.score > best.score:
            best = item
    return best
