"""Board storage, coordinate math and line-win detection."""

from collections.abc import Iterable, Iterator

import numpy as np

from ..core.errors import ColumnFullError, OutOfBoundsError
from ..core.types import Cell, Coords


# Horizontal, vertical, diagonal down-right, diagonal up-right
LINE_DIRECTIONS: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (-1, 1))


class Board:
    """Rectangular grid of cells stored as a flat row-major byte array.

    Row 0 is the top row. In the gravity variant pieces fall towards row
    ``height - 1``.
    """

    def __init__(self, height: int, width: int):
        """Create an empty board.

        Args:
            height: Number of rows
            width: Number of columns
        """
        if height <= 0 or width <= 0:
            raise ValueError(f"Invalid board size {height}x{width}")
        self._height = height
        self._width = width
        self._cells = np.zeros(height * width, dtype=np.uint8)

    @classmethod
    def from_cells(cls, height: int, width: int, cells: Iterable[int]) -> "Board":
        """Build a board from a flat row-major sequence of cell values.

        Raises:
            ValueError: If the size does not match or a value is not a Cell
        """
        values = [int(cell) for cell in cells]
        if len(values) != height * width:
            raise ValueError(
                f"Expected {height * width} cells for a {height}x{width} board, got {len(values)}"
            )
        valid = {cell.value for cell in Cell}
        for value in values:
            if value not in valid:
                raise ValueError(f"Invalid cell value: {value}")

        board = cls(height, width)
        board._cells[:] = values
        return board

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> int:
        return self._width * self._height

    # ─────────────────────────────────────────────────────────
    # Coordinates
    # ─────────────────────────────────────────────────────────

    def get_index(self, row: int, col: int) -> int:
        """Row-major index. Does not validate bounds, call in_bounds first."""
        return row * self._width + col

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._height and 0 <= col < self._width

    def get_coords(self, idx: int) -> Coords:
        """Inverse of get_index.

        Raises:
            OutOfBoundsError: If idx is not a valid cell index
        """
        if not 0 <= idx < self.size:
            raise OutOfBoundsError(f"Index {idx} outside board of size {self.size}")
        return Coords(row=idx // self._width, col=idx % self._width)

    # ─────────────────────────────────────────────────────────
    # Cells
    # ─────────────────────────────────────────────────────────

    def get_cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise OutOfBoundsError(f"({row}, {col}) outside {self._height}x{self._width} board")
        return Cell(int(self._cells[self.get_index(row, col)]))

    def set_cell(self, row: int, col: int, mark: Cell) -> bool:
        """Place a mark on an empty cell.

        Returns:
            False if the coordinates are out of bounds or the cell is
            already taken, True otherwise
        """
        if not self.in_bounds(row, col):
            return False

        idx = self.get_index(row, col)
        if self._cells[idx] != Cell.EMPTY:
            return False

        self._cells[idx] = mark
        return True

    def reset(self) -> None:
        self._cells.fill(Cell.EMPTY)

    def is_full(self) -> bool:
        return int(np.count_nonzero(self._cells)) == self.size

    def empty_cells(self) -> Iterator[Coords]:
        """Iterate over empty cells in row-major order."""
        for idx in np.flatnonzero(self._cells == Cell.EMPTY):
            yield self.get_coords(int(idx))

    def copy(self) -> "Board":
        board = Board.__new__(Board)
        board._height = self._height
        board._width = self._width
        board._cells = self._cells.copy()
        return board

    # ─────────────────────────────────────────────────────────
    # Views for rendering
    # ─────────────────────────────────────────────────────────

    def cells_view(self) -> memoryview:
        """Read-only zero-copy byte view of the grid, one byte per cell, row-major."""
        return memoryview(self._cells).toreadonly()

    def as_matrix(self) -> np.ndarray:
        """Zero-copy (height, width) view of the grid."""
        return self._cells.reshape(self._height, self._width)

    # ─────────────────────────────────────────────────────────
    # Win detection
    # ─────────────────────────────────────────────────────────

    def line_winner(self, last_move: Coords, run_length: int) -> Cell:
        """Determine the winner on the lines through ``last_move``.

        Only the horizontal, vertical and both diagonal lines through the
        last move are inspected. This assumes that no winning run exists
        elsewhere on the board, which holds as long as every state is
        checked right after its move was applied: a run that does not
        contain the last mark would have been found one move earlier.

        Args:
            last_move: Cell of the most recent mark
            run_length: Number of equal marks in a row needed to win

        Returns:
            The winning side, or Cell.EMPTY if there is none
        """
        row, col = last_move.row, last_move.col
        if not self.in_bounds(row, col):
            return Cell.EMPTY

        mark = int(self._cells[self.get_index(row, col)])
        if mark == Cell.EMPTY:
            return Cell.EMPTY

        reach = max(run_length - 1, 0)
        for dr, dc in LINE_DIRECTIONS:
            count = (
                1
                + self._count_run(row, col, dr, dc, mark, reach)
                + self._count_run(row, col, -dr, -dc, mark, reach)
            )
            if count >= run_length:
                return Cell(mark)

        return Cell.EMPTY

    def _count_run(self, row: int, col: int, dr: int, dc: int, mark: int, limit: int) -> int:
        """Count equal marks next to (row, col) in one direction, up to limit."""
        count = 0
        r, c = row + dr, col + dc
        while count < limit and self.in_bounds(r, c):
            if self._cells[self.get_index(r, c)] != mark:
                break
            count += 1
            r += dr
            c += dc
        return count

    def first_empty_in_column(self, col: int) -> Coords:
        """Landing cell of a piece dropped into ``col``.

        Raises:
            OutOfBoundsError: If the column does not exist
            ColumnFullError: If the column has no empty cell
        """
        if not 0 <= col < self._width:
            raise OutOfBoundsError(f"Column {col} outside board of width {self._width}")

        for row in range(self._height - 1, -1, -1):
            if self._cells[self.get_index(row, col)] == Cell.EMPTY:
                return Coords(row=row, col=col)

        raise ColumnFullError(f"Column {col} is full")

    # ─────────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._height == other._height
            and self._width == other._width
            and np.array_equal(self._cells, other._cells)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(height={self._height}, width={self._width})"

    def __str__(self) -> str:
        return "\n".join(
            " ".join(Cell(int(value)).symbol for value in row) for row in self.as_matrix()
        )
