"""Tests for GameState and the two rule sets."""

import pytest

from gametree.core.errors import (
    CellOccupiedError,
    IllegalMoveError,
    NoLegalMovesError,
    OutOfBoundsError,
    WrongSideError,
)
from gametree.core.types import BoardMove, Cell, Coords
from gametree.game.board import Board
from gametree.game.rules import FixedBoardRules, GravityRules
from gametree.game.state import GameState

from conftest import board_from_rows


def test_cell_opponent():
    assert Cell.X.opponent == Cell.O
    assert Cell.O.opponent == Cell.X
    with pytest.raises(ValueError):
        _ = Cell.EMPTY.opponent


def test_state_side_is_toggled_last_move():
    state = GameState(Board(3, 3), BoardMove.at(1, 1, Cell.X))
    assert state.side == Cell.O
    assert state.last_move == BoardMove.at(1, 1, Cell.X)


def test_states_compare_by_identity():
    a = GameState.initial(Board(3, 3))
    b = GameState.initial(Board(3, 3))
    assert a != b
    assert a == a


def test_initial_state_x_to_move():
    rules = FixedBoardRules()
    state = rules.initial_state()
    assert state.side == Cell.X
    assert state.board == Board(3, 3)
    assert rules.outcome(state) is None


# =============================================================================
# Fixed board
# =============================================================================


def test_fixed_legal_moves_on_empty_board():
    rules = FixedBoardRules()
    moves = rules.legal_moves(rules.initial_state())
    assert len(moves) == 9
    assert moves[0] == BoardMove.at(0, 0, Cell.X)
    assert moves[-1] == BoardMove.at(2, 2, Cell.X)


def test_fixed_legal_moves_only_empty_cells():
    board = board_from_rows("X.X", "O.O", "X.O")
    state = GameState(board, BoardMove.at(2, 2, Cell.O))
    moves = FixedBoardRules().legal_moves(state)
    assert [m.coords for m in moves] == [Coords(0, 1), Coords(1, 1), Coords(2, 1)]
    assert all(m.side == Cell.X for m in moves)


def test_apply_creates_new_state():
    rules = FixedBoardRules()
    root = rules.initial_state()
    child = rules.apply(root, BoardMove.at(1, 1, Cell.X))

    assert child.board.get_cell(1, 1) == Cell.X
    assert root.board.get_cell(1, 1) == Cell.EMPTY
    assert child.side == Cell.O


def test_apply_rejects_occupied_and_outside():
    rules = FixedBoardRules()
    state = rules.apply(rules.initial_state(), BoardMove.at(0, 0, Cell.X))
    with pytest.raises(CellOccupiedError):
        rules.apply(state, BoardMove.at(0, 0, Cell.O))
    with pytest.raises(OutOfBoundsError):
        rules.apply(state, BoardMove.at(3, 0, Cell.O))


def test_validate_errors():
    rules = FixedBoardRules()
    state = rules.apply(rules.initial_state(), BoardMove.at(0, 0, Cell.X))

    with pytest.raises(WrongSideError):
        rules.validate(state, BoardMove.at(1, 1, Cell.X))
    with pytest.raises(CellOccupiedError):
        rules.validate(state, BoardMove.at(0, 0, Cell.O))
    with pytest.raises(OutOfBoundsError):
        rules.validate(state, BoardMove.at(0, 3, Cell.O))

    rules.validate(state, BoardMove.at(1, 1, Cell.O))
    assert rules.is_legal(state, BoardMove.at(1, 1, Cell.O))
    assert not rules.is_legal(state, BoardMove.at(1, 1, Cell.EMPTY))


def test_no_moves_after_win():
    rules = FixedBoardRules()
    state = GameState(board_from_rows("XXX", "OO.", "..."), BoardMove.at(0, 2, Cell.X))
    assert rules.outcome(state) == Cell.X
    with pytest.raises(NoLegalMovesError):
        rules.validate(state, BoardMove.at(1, 2, Cell.O))


def test_outcome_draw_on_full_board():
    rules = FixedBoardRules()
    state = GameState(board_from_rows("XOX", "XOO", "OXX"), BoardMove.at(2, 2, Cell.X))
    assert rules.outcome(state) == Cell.EMPTY


def test_outcome_undecided():
    rules = FixedBoardRules()
    state = GameState(board_from_rows("XO.", "...", "..."), BoardMove.at(0, 1, Cell.O))
    assert rules.outcome(state) is None


# =============================================================================
# Gravity
# =============================================================================


def test_gravity_one_move_per_column_on_bottom_row():
    rules = GravityRules()
    root = rules.initial_state()
    moves = rules.legal_moves(root)

    assert len(moves) == 7
    assert [m.col for m in moves] == list(range(7))
    assert all(m.row == 5 and m.side == Cell.X for m in moves)

    for move in moves:
        child = rules.apply(root, move)
        matrix = child.board.as_matrix()
        assert (matrix[:5] == Cell.EMPTY).all()
        assert int((matrix[5] == Cell.X).sum()) == 1


def test_gravity_skips_full_columns():
    rules = GravityRules(height=2, width=3, win_length=4)
    state = rules.initial_state()
    for move in [BoardMove.at(1, 0, Cell.X), BoardMove.at(0, 0, Cell.O)]:
        state = rules.apply(state, move)

    moves = rules.legal_moves(state)
    assert [m.coords for m in moves] == [Coords(1, 1), Coords(1, 2)]


def test_gravity_rejects_floating_piece():
    rules = GravityRules()
    state = rules.initial_state()
    with pytest.raises(IllegalMoveError):
        rules.validate(state, BoardMove.at(3, 2, Cell.X))
    rules.validate(state, BoardMove.at(5, 2, Cell.X))
