"""Board model and rules for the fixed-board and gravity-drop games."""

from .board import Board
from .engine import GameEngine
from .rules import FixedBoardRules, GravityRules, Rules
from .state import GameState


__all__ = [
    "Board",
    "FixedBoardRules",
    "GameEngine",
    "GameState",
    "GravityRules",
    "Rules",
]
