"""Minimal observable value cells for coordinator state."""

import asyncio
from typing import Callable, Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Subscription:
    """Handle returned by ``Published.subscribe``; ``cancel()`` detaches it."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self.cancelled = False

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._cancel()


class Published(Generic[T]):
    """A value whose every assignment is pushed to subscribers synchronously.

    Listeners are called in subscription order on the thread doing the
    assignment, which is always the owning event loop's thread. A listener
    that raises is logged and does not stop delivery to the others.
    """

    def __init__(self, value: T):
        self._value = value
        self._listeners: list[Listener] = []

    @property
    def value(self) -> T:
        return self._value

    def send(self, value: T) -> None:
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(
                    "published_listener_error",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(lambda: self._unsubscribe(listener))

    def _unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear(self) -> None:
        self._listeners.clear()


def is_owner_thread(loop: asyncio.AbstractEventLoop) -> bool:
    """True when the caller is running inside ``loop``."""
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False
