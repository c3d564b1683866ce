"""
Shared data types for the gametree engine.

These types are the contracts between modules.
All modules communicate using these structures.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto


# ─────────────────────────────────────────────────────────────
# CELL & SIDE
# ─────────────────────────────────────────────────────────────


class Cell(IntEnum):
    """Content of a board cell, also used to identify a side.

    The integer values are the wire values and the byte values of the
    board's cell view.
    """

    EMPTY = 0
    X = 1
    O = 2  # noqa: E741

    def __str__(self) -> str:
        return self.name

    @property
    def opponent(self) -> "Cell":
        """The other side. EMPTY has no opponent."""
        if self is Cell.X:
            return Cell.O
        if self is Cell.O:
            return Cell.X
        raise ValueError("Empty cell has no opponent")

    @property
    def symbol(self) -> str:
        """Single character used by the ASCII renderer."""
        return {0: ".", 1: "X", 2: "O"}[self.value]


# ─────────────────────────────────────────────────────────────
# COORDINATES & MOVES
# ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coords:
    """Grid position (0-indexed, row-major)."""

    row: int  # 0 = top
    col: int  # 0 = left

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True)
class BoardMove:
    """A mark placed by a side at given coordinates."""

    coords: Coords
    side: Cell

    @classmethod
    def at(cls, row: int, col: int, side: Cell) -> "BoardMove":
        return cls(coords=Coords(row=row, col=col), side=side)

    @property
    def row(self) -> int:
        return self.coords.row

    @property
    def col(self) -> int:
        return self.coords.col

    def __str__(self) -> str:
        return f"{self.side.name} → {self.coords}"


# ─────────────────────────────────────────────────────────────
# ENGINE RESULTS
# ─────────────────────────────────────────────────────────────


class ExpandResult(Enum):
    """Outcome of a single expansion step."""

    DONE = auto()  # Nothing left to expand (or depth budget reached)
    NOT_DONE = auto()  # Frontier still holds unexpanded leaves
