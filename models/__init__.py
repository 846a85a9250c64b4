"""
Data Models
"""
from .schemas import (
    MemeReference,
    Classification,
)

__all__ = [
    "MemeReference",
    "Classification",
]
