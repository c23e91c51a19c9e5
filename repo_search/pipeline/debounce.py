"""Quiescence-window filter for pushed values."""

from __future__ import annotations

from functools import partial
from typing import Callable, Generic, TypeVar

from repo_search.pipeline.clock import Clock, TimerHandle

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Forward a value to ``sink`` once ``delay`` seconds pass without a newer push.

    Only one timer is ever armed, so values leave in arrival order and a
    superseded value is never emitted.
    """

    def __init__(self, clock: Clock, delay: float, sink: Callable[[T], None]) -> None:
        if delay < 0:
            raise ValueError("debounce delay must be >= 0")
        self.delay = delay
        self._clock = clock
        self._sink = sink
        self._handle: TimerHandle | None = None
        self._value: T | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: T) -> None:
        self.cancel()
        self._value = value
        self._handle = self._clock.call_later(self.delay, partial(self._fire, value))

    def cancel(self) -> bool:
        """Drop the pending value, if any. Returns whether one was dropped."""

        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._value = None
        return True

    def flush(self) -> bool:
        """Emit the pending value now instead of waiting out the window."""

        if self._handle is None:
            return False
        value = self._value
        self.cancel()
        self._sink(value)
        return True

    def _fire(self, value: T) -> None:
        self._handle = None
        self._value = None
        self._sink(value)


__all__ = ["Debouncer"]
