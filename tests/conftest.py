"""Shared fixtures for the gametree test suite."""

import pytest

from gametree.ai.interface import GameInterface, TicTacToeInterface
from gametree.core.bus import EventBus, reset_event_bus
from gametree.core.config import reset_settings
from gametree.core.types import BoardMove, Cell, ExpandResult
from gametree.game.board import Board
from gametree.game.rules import FixedBoardRules


@pytest.fixture(autouse=True)
def _fresh_singletons():
    reset_settings()
    reset_event_bus()
    yield
    reset_settings()
    reset_event_bus()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def t3() -> TicTacToeInterface:
    return TicTacToeInterface()


@pytest.fixture
def tiny() -> GameInterface:
    """2x2 board where two in a row wins: fully enumerated in three plies."""
    return GameInterface(FixedBoardRules(height=2, width=2, win_length=2))


def play(game: GameInterface, *cells: tuple[int, int]) -> None:
    """Track alternating moves starting with the side to move."""
    for row, col in cells:
        move = BoardMove.at(row, col, game.side_to_move)
        assert game.track_move(move), f"could not track {move}"


def expand_all(game: GameInterface, limit: int = 50) -> int:
    """Expand until DONE and return the number of calls."""
    for calls in range(1, limit + 1):
        if game.expand_one_level() is ExpandResult.DONE:
            return calls
    raise AssertionError("expansion did not finish")


def board_from_rows(*rows: str) -> Board:
    """Build a board from strings like "XO." (one string per row)."""
    marks = {".": Cell.EMPTY, "X": Cell.X, "O": Cell.O}
    cells = [marks[ch] for row in rows for ch in row]
    return Board.from_cells(len(rows), len(rows[0]), cells)
