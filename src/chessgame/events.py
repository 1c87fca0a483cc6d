"""Discrete game events for the audio/haptic and UI layers."""

from __future__ import annotations

import enum
import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")


class GameEvent(enum.Enum):
    MOVE = "move"
    CAPTURE = "capture"
    CHECK = "check"
    CHECKMATE = "checkmate"


Listener = Callable[[GameEvent, S], None]


class EventBus(Generic[S]):
    """Fan-out of (event, snapshot) pairs to subscribed listeners.

    Listeners run after the engine has fully settled. A failing listener is
    logged and skipped; it never rolls back or blocks engine state.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, events: list[GameEvent], snapshot: S) -> None:
        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event, snapshot)
                except Exception:
                    logger.exception("Listener %r failed on %s", listener, event.value)
