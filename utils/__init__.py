"""
Utils Module
Logging setup and the shared exception hierarchy
"""
from .logger import setup_logger, get_logger, console
from .exceptions import (
    MemeAnalyzerError,
    ConfigurationError,
    FetchError,
    ScoreError,
    TargetCountError,
    SessionBusyError,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "console",
    "MemeAnalyzerError",
    "ConfigurationError",
    "FetchError",
    "ScoreError",
    "TargetCountError",
    "SessionBusyError",
]
