"""
Events exchanged over the EventBus.

The worker host publishes protocol answers and expansion progress; the
match tracker publishes the course of a live game.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class EventType(Enum):
    # Worker protocol
    BEST_MOVE = auto()  # data: outbound {kind: 'best_move'} message
    MOVE_REJECTED = auto()  # data: {"move": BoardMove}
    REQUEST_REJECTED = auto()  # data: {"payload", "reason"}

    # Expansion progress, data: {"plies", "nodes"}
    LEVEL_EXPANDED = auto()
    EXPANSION_DONE = auto()

    # Match tracker
    GAME_STARTED = auto()
    MOVE_MADE = auto()
    INVALID_MOVE = auto()
    GAME_WON = auto()
    GAME_DRAW = auto()
    GAME_RESET = auto()


@dataclass
class Event:
    """
    A published notification.

    Attributes:
        type: What happened
        data: Payload, see the comments on EventType
        timestamp: Creation time (seconds since the epoch)
        source: Name of the publishing component
    """

    type: EventType
    data: Any = None
    timestamp: float = field(default_factory=time.time)
    source: str = "gametree"

    def __str__(self) -> str:
        return f"{self.type.name} from {self.source}: {self.data}"
