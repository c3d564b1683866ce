"""Rule sets for the fixed-board and gravity-drop game variants."""

from abc import ABC, abstractmethod

from ..core.errors import (
    CellOccupiedError,
    ColumnFullError,
    GameError,
    IllegalMoveError,
    NoLegalMovesError,
    OutOfBoundsError,
    WrongSideError,
)
from ..core.types import BoardMove, Cell
from .board import Board
from .state import GameState


class Rules(ABC):
    """Per-variant game logic used by the shared search engine.

    Implementations decide which moves are legal; move application and
    terminal detection are shared.
    """

    name: str = "rules"

    def __init__(self, height: int, width: int, win_length: int):
        """Initialize rules.

        Args:
            height: Number of board rows
            width: Number of board columns
            win_length: Number of equal marks in a row needed to win
        """
        self.height = height
        self.width = width
        self.win_length = win_length

    def new_board(self) -> Board:
        return Board(self.height, self.width)

    def initial_state(self) -> GameState:
        """Empty board with X to move."""
        return GameState.initial(self.new_board(), Cell.X)

    @abstractmethod
    def legal_moves(self, state: GameState) -> list[BoardMove]:
        """Get all moves available to the side to move.

        Args:
            state: Non-terminal game state

        Returns:
            Moves in enumeration order
        """

    @abstractmethod
    def _check_placement(self, board: Board, move: BoardMove) -> None:
        """Raise if the variant forbids placing a mark at ``move.coords``."""

    def outcome(self, state: GameState) -> Cell | None:
        """Check whether the state is terminal.

        Returns:
            The winner, Cell.EMPTY for a draw, or None if the game goes on
        """
        winner = state.board.line_winner(state.last_move.coords, self.win_length)
        if winner != Cell.EMPTY:
            return winner
        if state.board.is_full():
            return Cell.EMPTY
        return None

    def apply(self, state: GameState, move: BoardMove) -> GameState:
        """Apply a move to a copy of the board (creates new GameState).

        Only placement is checked here; use validate() for a full check.

        Raises:
            OutOfBoundsError: If the move is outside the board
            CellOccupiedError: If the target cell is taken
        """
        board = state.board.copy()
        if not board.set_cell(move.row, move.col, move.side):
            if not board.in_bounds(move.row, move.col):
                raise OutOfBoundsError(f"Move {move} outside the board")
            raise CellOccupiedError(f"Cell {move.coords} is already taken")
        return GameState(board=board, last_move=move)

    def validate(self, state: GameState, move: BoardMove) -> None:
        """Check a move against the current position.

        Raises:
            NoLegalMovesError: If the game is already over
            OutOfBoundsError: If the move is outside the board
            CellOccupiedError: If the target cell is taken
            WrongSideError: If the move is not played by the side to move
            IllegalMoveError: If the variant forbids the placement
        """
        board = state.board
        if not board.in_bounds(move.row, move.col):
            raise OutOfBoundsError(f"Move {move} outside the board")
        if board.get_cell(move.row, move.col) != Cell.EMPTY:
            raise CellOccupiedError(f"Cell {move.coords} is already taken")
        if move.side != state.side:
            raise WrongSideError(f"{move.side.name} played but {state.side.name} is to move")
        if self.outcome(state) is not None:
            raise NoLegalMovesError("Game is already over")
        self._check_placement(board, move)

    def is_legal(self, state: GameState, move: BoardMove) -> bool:
        try:
            self.validate(state, move)
        except GameError:
            return False
        return True


class FixedBoardRules(Rules):
    """Three-in-a-row on a fixed 3x3 board.

    Any empty cell is a legal move.
    """

    name = "t3"

    def __init__(self, height: int = 3, width: int = 3, win_length: int = 3):
        super().__init__(height, width, win_length)

    def legal_moves(self, state: GameState) -> list[BoardMove]:
        side = state.side
        return [BoardMove(coords, side) for coords in state.board.empty_cells()]

    def _check_placement(self, board: Board, move: BoardMove) -> None:
        pass


class GravityRules(Rules):
    """Four-in-a-row with gravity drop on a 6x7 board.

    A piece played into a column lands on the lowest empty cell, so there
    is at most one legal move per column.
    """

    name = "fiar"

    def __init__(self, height: int = 6, width: int = 7, win_length: int = 4):
        super().__init__(height, width, win_length)

    def legal_moves(self, state: GameState) -> list[BoardMove]:
        side = state.side
        moves = []
        for col in range(state.board.width):
            try:
                coords = state.board.first_empty_in_column(col)
            except ColumnFullError:
                continue
            moves.append(BoardMove(coords, side))
        return moves

    def _check_placement(self, board: Board, move: BoardMove) -> None:
        landing = board.first_empty_in_column(move.col)
        if landing != move.coords:
            raise IllegalMoveError(
                f"Piece in column {move.col} lands on row {landing.row}, not {move.row}"
            )
