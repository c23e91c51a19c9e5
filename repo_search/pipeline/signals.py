"""Minimal synchronous publish/subscribe."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from repo_search.logging import logger

T = TypeVar("T")
Listener = Callable[[T], None]


class Signal(Generic[T]):
    """Calls every connected listener, in connection order, on ``emit``.

    A failing listener is logged and does not stop the others.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Listener[T]] = []

    def connect(self, listener: Listener[T]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _disconnect() -> None:
            self.disconnect(listener)

        return _disconnect

    def disconnect(self, listener: Listener[T]) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def emit(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("signal_listener_failed", signal=self.name)

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = ["Signal"]
