"""Core infrastructure for the gametree engine."""

from .bus import EventBus, get_event_bus, reset_event_bus
from .config import (
    ConnectFourSettings,
    LogSettings,
    Settings,
    TicTacToeSettings,
    WorkerSettings,
    get_settings,
    reset_settings,
)
from .errors import (
    CellOccupiedError,
    ColumnFullError,
    GameError,
    IllegalMoveError,
    MalformedMessageError,
    NoLegalMovesError,
    OutOfBoundsError,
    WrongSideError,
)
from .events import Event, EventType
from .types import BoardMove, Cell, Coords, ExpandResult


__all__ = [
    # Config
    "get_settings",
    "reset_settings",
    "Settings",
    "TicTacToeSettings",
    "ConnectFourSettings",
    "WorkerSettings",
    "LogSettings",
    # Types
    "Cell",
    "Coords",
    "BoardMove",
    "ExpandResult",
    # Errors
    "GameError",
    "IllegalMoveError",
    "OutOfBoundsError",
    "CellOccupiedError",
    "ColumnFullError",
    "WrongSideError",
    "NoLegalMovesError",
    "MalformedMessageError",
    # Events
    "Event",
    "EventType",
    "EventBus",
    "get_event_bus",
    "reset_event_bus",
]
