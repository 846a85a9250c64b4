"""
Custom Exceptions
Error taxonomy for the acquisition pipeline and its collaborators.
"""
from typing import Optional


class MemeAnalyzerError(Exception):
    """Base exception for the meme analyzer."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(MemeAnalyzerError):
    """Invalid or incomplete configuration."""
    pass


class FetchError(MemeAnalyzerError):
    """A single source fetch failed (network, status, payload or missing identity)."""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class ScoreError(MemeAnalyzerError):
    """The classifier could not score an item."""

    def __init__(self, message: str, model: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.model = model


class TargetCountError(MemeAnalyzerError):
    """Requested target count is outside the accepted range."""

    def __init__(self, value: object, lower: int, upper: int):
        super().__init__(
            f"Please enter a number between {lower} and {upper}",
            {"value": value},
        )
        self.value = value
        self.lower = lower
        self.upper = upper

    def __str__(self):
        return self.message


class SessionBusyError(MemeAnalyzerError):
    """A session is already running on this pipeline."""

    def __init__(self, message: str = "An acquisition session is already running", session_id: Optional[str] = None):
        super().__init__(message, {"session_id": session_id} if session_id else None)
        self.session_id = session_id
