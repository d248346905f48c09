"""Clock readings and millisecond formatting shared by the stopwatch variants."""
from __future__ import annotations

import time
from datetime import timedelta
from typing import Optional, Union

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLI = 1_000_000


def now_ns() -> int:
    """Return a monotonic clock reading in nanoseconds."""
    return time.perf_counter_ns()


def duration_to_ms(duration: Union[int, timedelta]) -> float:
    """Convert a duration to fractional milliseconds.

    ``duration`` is either an integer count of nanoseconds or a ``timedelta``.
    Whole seconds and the sub-second remainder are converted separately, so a
    1234 ms duration yields exactly ``1234.0``.
    """
    if isinstance(duration, timedelta):
        seconds = duration.days * 86_400 + duration.seconds
        subsec_ns = duration.microseconds * 1_000
    else:
        seconds, subsec_ns = divmod(int(duration), NANOS_PER_SECOND)
    return seconds * 1000.0 + subsec_ns / float(NANOS_PER_MILLI)


def format_elapsed(label: str, elapsed_ms: float, message: Optional[str] = None, precision: int = 3) -> str:
    line = f"{label}: {elapsed_ms:.{precision}f}ms"
    if message is not None:
        line += f" - {message}"
    return line


def format_missing(label: str) -> str:
    return f"Timer '{label}' does not exist"
