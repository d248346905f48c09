"""Configuration for stopwatch output and clock source."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO

from .utils.timer import now_ns


@dataclass
class StopwatchConfig:
    """Configuration knobs shared by both stopwatch variants."""

    silent: bool = False
    precision: int = 3
    # None resolves sys.stdout / sys.stderr at print time
    stream: Optional[TextIO] = None
    error_stream: Optional[TextIO] = None
    clock: Callable[[], int] = field(default=now_ns)

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"precision must be non-negative, got {self.precision}")
