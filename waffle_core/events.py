from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class EventKind(Enum):
    TURN_ENDED = "turn_ended"
    VICTORY = "victory"  # payload: winner name
    PLAYER_TURN_START = "player_turn_start"  # payload: player color
    PLAYER_TURN_END = "player_turn_end"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    payload: Any = None


Subscriber = Callable[[Event], None]


class EventBus:
    """Ordered list of subscribers, notified synchronously."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            logger.debug("unsubscribe: %r was not subscribed", callback)

    def emit(self, event: Event) -> None:
        # Copy so a subscriber may unsubscribe itself while being notified.
        for callback in list(self._subscribers):
            callback(event)

    def __len__(self) -> int:
        return len(self._subscribers)
