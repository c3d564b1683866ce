"""Game interface: the engine surface exposed to the worker host."""

import logging
import time

from ..core.config import GameVariant, Settings, get_settings
from ..core.errors import GameError
from ..core.types import BoardMove, Cell, ExpandResult
from ..game.board import Board
from ..game.rules import FixedBoardRules, GravityRules, Rules
from ..game.state import GameState
from .expansion import ExpansionEngine
from .minimax import EvaluationEngine
from .tree import GameTree


logger = logging.getLogger(__name__)


class GameInterface:
    """Incrementally searched game bound to one rule set.

    Usage:
        game = TicTacToeInterface()
        while game.expand_one_level() is ExpandResult.NOT_DONE:
            ...  # service requests between plies
        game.track_move(BoardMove.at(1, 1, Cell.X))
        reply = game.get_best_move()

    None of the methods are safe to call while another one is running;
    the host is responsible for pausing expansion around requests.
    """

    def __init__(
        self,
        rules: Rules,
        *,
        max_depth: int | None = None,
        initial_state: GameState | None = None,
    ):
        """Initialize the interface.

        Args:
            rules: Rules of the variant
            max_depth: Optional ply budget for expansion
            initial_state: Starting position (empty board with X to move
                if None). reset() always returns to the empty board.
        """
        self.rules = rules
        self.expansion = ExpansionEngine(rules, max_depth=max_depth)
        self.evaluator = EvaluationEngine()
        self._tree = self._new_tree(initial_state or rules.initial_state())
        logger.info("Initialized a new %s", type(self).__name__)

    def _new_tree(self, state: GameState, ply: int = 0) -> GameTree:
        return GameTree(state, self.rules.outcome(state), root_ply=ply)

    # ─────────────────────────────────────────────────────────
    # Engine surface
    # ─────────────────────────────────────────────────────────

    def expand_one_level(self) -> ExpandResult:
        """Expand the tree by one ply. See ExpansionEngine."""
        start = time.perf_counter()
        result = self.expansion.expand_one_level(self._tree)
        if result is ExpandResult.DONE:
            logger.info(
                "Expansion done at %d plies (%d nodes)", self._tree.plies, len(self._tree)
            )
        else:
            logger.debug(
                "Expansion to ply %d took %.1f ms",
                self._tree.plies,
                (time.perf_counter() - start) * 1000,
            )
        return result

    def track_move(self, move: BoardMove) -> bool:
        """Follow a move played in the real game.

        Reuses the already expanded subtree of the move when there is one
        and discards every other branch.

        Returns:
            False (and no change) if the move is not legal here
        """
        root = self._tree.root_node
        try:
            self.rules.validate(root.state, move)
        except GameError as e:
            logger.info("Could not track move %s: %s", move, e)
            return False

        child = self._tree.child_for_move(root.handle, move)
        if child is not None:
            self._tree.reroot(child)
        else:
            state = self.rules.apply(root.state, move)
            self._tree = self._new_tree(state, ply=root.ply + 1)

        logger.info("Tracked move %s (%d nodes kept)", move, len(self._tree))
        return True

    def get_best_move(self, commit: bool = False) -> BoardMove | None:
        """Best reply for the side to move according to the explored tree.

        Args:
            commit: Also track the returned move as played

        Returns:
            The chosen move, or None if the root has no children (game over
            or nothing expanded yet)
        """
        best = self.evaluator.best_child(self._tree)
        if best is None:
            logger.warning("No best move available: root has no children")
            return None

        handle, score = best
        move = self._tree.node(handle).move
        logger.info("Identified best move %s with score %d", move, score)

        if commit:
            self.track_move(move)
        return move

    def reset(self) -> None:
        """Discard the tree and start over from the empty board."""
        logger.info("Resetting %s", type(self).__name__)
        self._tree = self._new_tree(self.rules.initial_state())

    # ─────────────────────────────────────────────────────────
    # Read-only accessors
    # ─────────────────────────────────────────────────────────

    @property
    def tree(self) -> GameTree:
        return self._tree

    @property
    def state(self) -> GameState:
        return self._tree.root_node.state

    @property
    def board(self) -> Board:
        """Board of the current position. Do not mutate."""
        return self.state.board

    @property
    def side_to_move(self) -> Cell:
        return self.state.side

    @property
    def winner(self) -> Cell | None:
        """Winning side, Cell.EMPTY for a draw, None while the game is running."""
        return self._tree.root_node.winner

    @property
    def is_game_over(self) -> bool:
        return self._tree.root_node.terminal

    @property
    def plies(self) -> int:
        return self._tree.plies

    @property
    def node_count(self) -> int:
        return len(self._tree)

    @property
    def is_fully_expanded(self) -> bool:
        return not self._tree.frontier


class TicTacToeInterface(GameInterface):
    """Three-in-a-row on a fixed 3x3 board."""

    def __init__(self, max_depth: int | None = None):
        super().__init__(FixedBoardRules(), max_depth=max_depth)


class ConnectFourInterface(GameInterface):
    """Four-in-a-row with gravity drop on a 6x7 board.

    Expansion stops after six plies by default; the full tree does not fit
    in memory.
    """

    def __init__(self, max_depth: int | None = 6):
        super().__init__(GravityRules(), max_depth=max_depth)


def create_game(variant: GameVariant | None = None, settings: Settings | None = None) -> GameInterface:
    """Build a game interface from configuration.

    Args:
        variant: "t3" or "fiar" (defaults to the worker setting)
        settings: Settings to use (global settings if None)
    """
    settings = settings or get_settings()
    variant = variant or settings.worker.game
    board = settings.variant(variant)

    if variant == "t3":
        rules: Rules = FixedBoardRules(board.height, board.width, board.win_length)
    else:
        rules = GravityRules(board.height, board.width, board.win_length)

    return GameInterface(rules, max_depth=board.max_depth)
