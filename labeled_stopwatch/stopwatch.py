"""Labeled stopwatches: start a named timer, peek at it, stop it."""
from __future__ import annotations

import logging
import sys
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, TextIO

from .config import StopwatchConfig
from .utils.timer import duration_to_ms, format_elapsed, format_missing

LOGGER = logging.getLogger(__name__)

_GLOBAL_STOPWATCH: Optional["SharedStopwatch"] = None
_GLOBAL_LOCK = threading.Lock()


class TimerNotFoundError(KeyError):
    """Raised by registry lookups when no timer runs under a label."""

    def __init__(self, label: str) -> None:
        super().__init__(label)
        self.label = label

    def __str__(self) -> str:
        return format_missing(self.label)


class LabeledStopwatch:
    """Named timers keyed by label, backed by a monotonic clock.

    Instances do no locking of their own. Use :class:`SharedStopwatch` when
    several threads start or stop timers on the same registry.
    """

    def __init__(self, config: Optional[StopwatchConfig] = None) -> None:
        self.config = config if config is not None else StopwatchConfig()
        self._timers: Dict[str, int] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(running={len(self)})"

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, label: object) -> bool:
        return label in self._timers

    # Registry primitives; SharedStopwatch wraps each one in its lock.

    def _put(self, label: str, started_at: int) -> bool:
        restarted = label in self._timers
        self._timers[label] = started_at
        return restarted

    def _get(self, label: str) -> int:
        try:
            return self._timers[label]
        except KeyError:
            raise TimerNotFoundError(label) from None

    def _pop(self, label: str) -> int:
        try:
            return self._timers.pop(label)
        except KeyError:
            raise TimerNotFoundError(label) from None

    def labels(self) -> List[str]:
        """Return the labels of all running timers."""
        return list(self._timers)

    def clear(self) -> None:
        """Discard every running timer without reporting."""
        self._timers.clear()

    def start(self, label: str) -> None:
        """Start (or restart) the timer for ``label``."""
        if self._put(label, self.config.clock()):
            LOGGER.debug("Restarted timer %r", label)
        else:
            LOGGER.debug("Started timer %r", label)

    def peek(self, label: str, message: Optional[str] = None, silent: Optional[bool] = None) -> float:
        """Report the elapsed milliseconds of ``label`` and keep it running.

        Returns ``0.0`` and writes a diagnostic to the error stream when no
        timer runs under ``label``.
        """
        return self._report(label, self._get, message, silent)

    def stop(self, label: str, message: Optional[str] = None, silent: Optional[bool] = None) -> float:
        """Report the elapsed milliseconds of ``label`` and remove it."""
        return self._report(label, self._pop, message, silent)

    @contextmanager
    def timed(self, label: str, message: Optional[str] = None, silent: Optional[bool] = None) -> Iterator[None]:
        """Time the enclosed block under ``label``, stopping it on exit."""
        self.start(label)
        try:
            yield
        finally:
            self.stop(label, message=message, silent=silent)

    def _report(
        self,
        label: str,
        lookup: Callable[[str], int],
        message: Optional[str],
        silent: Optional[bool],
    ) -> float:
        try:
            started_at = lookup(label)
        except TimerNotFoundError as exc:
            LOGGER.debug("Lookup failed: %s", exc)
            print(str(exc), file=self._error_stream())
            return 0.0
        elapsed_ms = duration_to_ms(self.config.clock() - started_at)
        LOGGER.debug("Timer %r at %.3f ms", label, elapsed_ms)
        if silent is None:
            silent = self.config.silent
        if not silent:
            line = format_elapsed(label, elapsed_ms, message, precision=self.config.precision)
            print(line, file=self._stream())
        return elapsed_ms

    def _stream(self) -> TextIO:
        return self.config.stream if self.config.stream is not None else sys.stdout

    def _error_stream(self) -> TextIO:
        return self.config.error_stream if self.config.error_stream is not None else sys.stderr


class SharedRegistry:
    """Timer registry guarded by a lock, shared between stopwatch handles."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.timers: Dict[str, int] = {}


class SharedStopwatch(LabeledStopwatch):
    """Thread-safe stopwatch; every operation is one critical section."""

    def __init__(self, config: Optional[StopwatchConfig] = None, registry: Optional[SharedRegistry] = None) -> None:
        super().__init__(config)
        self._registry = registry if registry is not None else SharedRegistry()
        self._timers = self._registry.timers

    def handle(self) -> "SharedStopwatch":
        """Return another stopwatch over the same registry and configuration."""
        return SharedStopwatch(self.config, self._registry)

    def shares_registry_with(self, other: "SharedStopwatch") -> bool:
        return self._registry is other._registry

    def __len__(self) -> int:
        with self._registry.lock:
            return super().__len__()

    def __contains__(self, label: object) -> bool:
        with self._registry.lock:
            return super().__contains__(label)

    def _put(self, label: str, started_at: int) -> bool:
        with self._registry.lock:
            return super()._put(label, started_at)

    def _get(self, label: str) -> int:
        with self._registry.lock:
            return super()._get(label)

    def _pop(self, label: str) -> int:
        with self._registry.lock:
            return super()._pop(label)

    def labels(self) -> List[str]:
        with self._registry.lock:
            return super().labels()

    def clear(self) -> None:
        with self._registry.lock:
            super().clear()


def global_stopwatch() -> SharedStopwatch:
    """Return the process-wide stopwatch, creating it on first use."""
    global _GLOBAL_STOPWATCH
    instance = _GLOBAL_STOPWATCH
    if instance is None:
        with _GLOBAL_LOCK:
            if _GLOBAL_STOPWATCH is None:
                _GLOBAL_STOPWATCH = SharedStopwatch()
                LOGGER.debug("Created process-wide stopwatch")
            instance = _GLOBAL_STOPWATCH
    return instance


def reset_global_stopwatch() -> None:
    """Forget the process-wide stopwatch so the next access builds a new one."""
    global _GLOBAL_STOPWATCH
    with _GLOBAL_LOCK:
        _GLOBAL_STOPWATCH = None
