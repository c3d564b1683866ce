"""Incremental game-tree search for three-in-a-row and gravity four-in-a-row."""

from .ai import ConnectFourInterface, GameInterface, TicTacToeInterface, create_game
from .core import BoardMove, Cell, Coords, ExpandResult
from .game import Board, GameState


__all__ = [
    "Board",
    "BoardMove",
    "Cell",
    "ConnectFourInterface",
    "Coords",
    "ExpandResult",
    "GameInterface",
    "GameState",
    "TicTacToeInterface",
    "create_game",
]
