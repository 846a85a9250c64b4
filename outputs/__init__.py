"""
Outputs Module
Console presentation of session snapshots
"""

from .console import (
    ConsoleSessionView,
    build_items_table,
    format_status_line,
    render_session,
)

__all__ = [
    "ConsoleSessionView",
    "build_items_table",
    "format_status_line",
    "render_session",
]
