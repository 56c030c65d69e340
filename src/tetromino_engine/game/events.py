from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, DefaultDict, List

Listener = Callable[..., Any]


class GameEvent(str, Enum):
    PIECE_LOCKED = "piece_locked"
    LINES_CLEARED = "lines_cleared"
    LEVEL_CHANGED = "level_changed"
    GAME_OVER = "game_over"


class EventBus:
    """Synchronous publish/subscribe; listeners run in subscription order."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[GameEvent, List[Listener]] = defaultdict(list)

    def subscribe(self, event: GameEvent, listener: Listener) -> Callable[[], None]:
        event = GameEvent(event)
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def emit(self, event: GameEvent, **payload: Any) -> None:
        for listener in list(self._listeners[GameEvent(event)]):
            listener(**payload)
