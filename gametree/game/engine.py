"""Match tracker: the live game as seen by the player-facing side."""

import logging

from ..core.bus import EventBus, get_event_bus
from ..core.errors import GameError
from ..core.events import Event, EventType
from ..core.types import BoardMove, Cell, Coords
from .rules import GravityRules, Rules
from .state import GameState


logger = logging.getLogger(__name__)


class GameEngine:
    """Referee for one live match between a human and the engine.

    It:
    - Keeps the played position and move history
    - Refuses moves the rules do not allow
    - Notices when a line is completed or the board fills up
    - Publishes every change on the bus

    The search engine keeps its own copy of the position; this class is
    what a renderer or a human player talks to.
    """

    def __init__(self, rules: Rules, bus: EventBus | None = None):
        """Create a referee. Call new_game() before the first move.

        Args:
            rules: Game rules of the variant being played
            bus: Event bus (uses global if None)
        """
        self.rules = rules
        self.bus = bus or get_event_bus()
        self._state: GameState | None = None
        self._history: list[BoardMove] = []
        self._winner: Cell | None = None

    def new_game(self) -> GameState:
        """Initialize a new game with an empty board and X to move."""
        self._state = self.rules.initial_state()
        self._history = []
        self._winner = None

        self.bus.publish(Event(
            type=EventType.GAME_STARTED,
            data={"first_player": self._state.side.name},
            source="game_engine"
        ))

        return self._state

    def move_at(self, row: int, col: int) -> BoardMove:
        """Move of the side to move for a clicked cell.

        In the gravity variant the row is ignored and the piece drops to the
        lowest empty cell of the column.

        Raises:
            ValueError: If game not started
            GameError: If the column is full or outside the board
        """
        state = self._require_state()
        if isinstance(self.rules, GravityRules):
            return BoardMove(state.board.first_empty_in_column(col), state.side)
        return BoardMove(Coords(row=row, col=col), state.side)

    def make_move(self, move: BoardMove) -> GameState:
        """Make a move.

        Illegal moves leave the state untouched and publish INVALID_MOVE.

        Args:
            move: Move to play

        Returns:
            Updated game state

        Raises:
            ValueError: If game not started
        """
        state = self._require_state()

        try:
            self.rules.validate(state, move)
        except GameError as e:
            logger.info("Rejected move %s: %s", move, e)
            self.bus.publish(Event(
                type=EventType.INVALID_MOVE,
                data={"move": move, "reason": str(e)},
                source="game_engine"
            ))
            return state

        self._state = self.rules.apply(state, move)
        self._history.append(move)

        self.bus.publish(Event(
            type=EventType.MOVE_MADE,
            data={"move": move, "turn": len(self._history)},
            source="game_engine"
        ))

        outcome = self.rules.outcome(self._state)
        if outcome is not None:
            self._winner = outcome
            if outcome == Cell.EMPTY:
                logger.info("Game drawn after %d moves", len(self._history))
                self.bus.publish(Event(type=EventType.GAME_DRAW, source="game_engine"))
            else:
                logger.info("%s wins after %d moves", outcome, len(self._history))
                self.bus.publish(Event(
                    type=EventType.GAME_WON,
                    data={"winner": outcome.name},
                    source="game_engine"
                ))

        return self._state

    def is_legal(self, move: BoardMove) -> bool:
        return self._state is not None and self.rules.is_legal(self._state, move)

    def reset(self) -> None:
        """Forget the current match."""
        self._state = None
        self._history = []
        self._winner = None
        self.bus.publish(Event(
            type=EventType.GAME_RESET,
            source="game_engine"
        ))

    def _require_state(self) -> GameState:
        if self._state is None:
            raise ValueError("Game not started. Call new_game() first.")
        return self._state

    @property
    def state(self) -> GameState | None:
        """Played position, None before new_game()."""
        return self._state

    @property
    def history(self) -> list[BoardMove]:
        return list(self._history)

    @property
    def side_to_move(self) -> Cell:
        return self._require_state().side

    @property
    def winner(self) -> Cell | None:
        """Winning side, Cell.EMPTY for a draw, None while the game is running."""
        return self._winner

    @property
    def is_game_over(self) -> bool:
        """True once the match has a winner or is drawn."""
        return self._winner is not None

    @property
    def legal_moves(self) -> list[BoardMove]:
        if self._state is None or self.is_game_over:
            return []
        return self.rules.legal_moves(self._state)
