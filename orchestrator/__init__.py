"""Acquisition session primitives."""

from .pipeline import (
    GENERIC_FAILURE_MESSAGE,
    AcquisitionPipeline,
    clamp_target_count,
    validate_target_count,
)
from .service import SessionController, build_pipeline
from .session import AcquisitionSession, shortfall_message

__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "AcquisitionPipeline",
    "AcquisitionSession",
    "SessionController",
    "build_pipeline",
    "clamp_target_count",
    "shortfall_message",
    "validate_target_count",
]
