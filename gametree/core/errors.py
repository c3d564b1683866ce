"""Error taxonomy for board, rules and transport failures."""


class GameError(Exception):
    """Base class for all game related errors."""


class OutOfBoundsError(GameError, IndexError):
    """Coordinates or index outside the board."""


class CellOccupiedError(GameError):
    """Target cell already holds a mark."""


class ColumnFullError(GameError):
    """No empty cell left in a gravity column."""


class WrongSideError(GameError):
    """Move played by the side that is not to move."""


class NoLegalMovesError(GameError):
    """Position has no legal continuation (won or drawn)."""


class MalformedMessageError(GameError, ValueError):
    """Cross-boundary payload failed validation."""


class IllegalMoveError(GameError):
    """Move violates a variant specific placement rule."""
