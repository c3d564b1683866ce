"""Incremental ply-by-ply expansion of the game tree."""

import logging
import time

from ..core.types import ExpandResult
from ..game.rules import Rules
from .tree import GameTree


logger = logging.getLogger(__name__)


class ExpansionEngine:
    """Advances a game tree by exactly one ply per call.

    A single call never yields half-way: it processes the whole frontier.
    Callers interleave other work between calls.
    """

    def __init__(self, rules: Rules, max_depth: int | None = None):
        """Initialize the expansion engine.

        Args:
            rules: Rules of the variant being searched
            max_depth: Optional budget of plies below the root. None means
                enumerate until every leaf is terminal.
        """
        self.rules = rules
        self.max_depth = max_depth

    def budget_exhausted(self, tree: GameTree) -> bool:
        return self.max_depth is not None and tree.plies >= self.max_depth

    def expand_one_level(self, tree: GameTree) -> ExpandResult:
        """Expand every frontier node by one ply.

        Returns:
            NOT_DONE while non-terminal leaves remain, DONE once the tree is
            fully enumerated or the depth budget is used up
        """
        if not tree.frontier or self.budget_exhausted(tree):
            return ExpandResult.DONE

        start = time.perf_counter()
        rules = self.rules
        next_frontier: list[int] = []
        created = 0

        for handle in tree.frontier:
            node = tree.node(handle)
            if node.terminal:
                continue

            for move in rules.legal_moves(node.state):
                child_state = rules.apply(node.state, move)
                winner = rules.outcome(child_state)
                child = tree.add_child(handle, child_state, winner)
                created += 1
                if winner is None:
                    next_frontier.append(child)

        tree.frontier = next_frontier
        tree.plies += 1

        logger.debug(
            "Expanded level %d: %d new nodes, %d open leaves, %.1f ms",
            tree.plies,
            created,
            len(next_frontier),
            (time.perf_counter() - start) * 1000,
        )

        if not next_frontier or self.budget_exhausted(tree):
            return ExpandResult.DONE
        return ExpandResult.NOT_DONE
