"""Immutable game position snapshot."""

from dataclasses import dataclass

from ..core.types import BoardMove, Cell, Coords
from .board import Board


@dataclass(frozen=True, eq=False)
class GameState:
    """Board snapshot plus the move that produced it.

    The side to move is derived from the last move. States compare by
    identity only: equal boards reached through different move orders
    are distinct states.
    """

    board: Board
    last_move: BoardMove

    @classmethod
    def initial(cls, board: Board, side_to_move: Cell = Cell.X) -> "GameState":
        """Wrap a board with a sentinel last move so ``side_to_move`` plays next."""
        return cls(board=board, last_move=BoardMove(Coords(0, 0), side_to_move.opponent))

    @property
    def side(self) -> Cell:
        """Side to move next."""
        return self.last_move.side.opponent
