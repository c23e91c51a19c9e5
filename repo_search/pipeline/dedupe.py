"""Suppress consecutive duplicates."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_NOTHING = object()


class Deduplicator(Generic[T]):
    """Forward a value unless it equals the last value actually forwarded."""

    def __init__(self, sink: Callable[[T], None]) -> None:
        self._sink = sink
        self._last: object = _NOTHING

    @property
    def has_last(self) -> bool:
        return self._last is not _NOTHING

    @property
    def last(self) -> T | None:
        return None if self._last is _NOTHING else self._last  # type: ignore[return-value]

    def push(self, value: T) -> bool:
        if self._last is not _NOTHING and value == self._last:
            return False
        self._last = value
        self._sink(value)
        return True

    def reset(self) -> None:
        self._last = _NOTHING


__all__ = ["Deduplicator"]
