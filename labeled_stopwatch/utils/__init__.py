"""Utility helpers for the labeled stopwatch."""

from .timer import duration_to_ms, format_elapsed, format_missing, now_ns

__all__ = [
    "duration_to_ms",
    "format_elapsed",
    "format_missing",
    "now_ns",
]
