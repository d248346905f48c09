"""Labeled stopwatches for ad-hoc latency measurements."""

from .config import StopwatchConfig
from .stopwatch import (
    LabeledStopwatch,
    SharedRegistry,
    SharedStopwatch,
    TimerNotFoundError,
    global_stopwatch,
    reset_global_stopwatch,
)
from .utils import duration_to_ms

__all__ = [
    "LabeledStopwatch",
    "SharedRegistry",
    "SharedStopwatch",
    "StopwatchConfig",
    "TimerNotFoundError",
    "duration_to_ms",
    "global_stopwatch",
    "reset_global_stopwatch",
]

__version__ = "0.1.0"
