"""Game tree search: expansion, evaluation and the engine facade."""

from .expansion import ExpansionEngine
from .interface import ConnectFourInterface, GameInterface, TicTacToeInterface, create_game
from .minimax import EvaluationEngine
from .tree import GameTree, GameTreeNode


__all__ = [
    "ConnectFourInterface",
    "EvaluationEngine",
    "ExpansionEngine",
    "GameInterface",
    "GameTree",
    "GameTreeNode",
    "TicTacToeInterface",
    "create_game",
]
