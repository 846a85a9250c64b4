"""
Processing Module
Meme classification and result ordering
"""
from .classifier import (
    BaseClassifier,
    MockMemeClassifier,
    HttpMemeClassifier,
    DEFAULT_LABELS,
    get_classifier,
)
from .ranking import sort_classifications, top_classification

__all__ = [
    # Classifier
    "BaseClassifier",
    "MockMemeClassifier",
    "HttpMemeClassifier",
    "DEFAULT_LABELS",
    "get_classifier",
    # Ranking
    "sort_classifications",
    "top_classification",
]
