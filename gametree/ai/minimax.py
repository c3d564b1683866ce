"""Minimax evaluation over a (possibly partial) game tree."""

import logging

from ..core.types import BoardMove, Cell
from .tree import GameTree


logger = logging.getLogger(__name__)

WIN_SCORE = 1
LOSS_SCORE = -1
DRAW_SCORE = 0
UNKNOWN_SCORE = 0  # Unexpanded leaf


def terminal_score(winner: Cell, side: Cell) -> int:
    """Score of a decided position from ``side``'s point of view."""
    if winner == Cell.EMPTY:
        return DRAW_SCORE
    return WIN_SCORE if winner == side else LOSS_SCORE


class EvaluationEngine:
    """Minimax scoring of the explored tree from the root side's view.

    Features:
    - Terminal nodes score +1 / -1 / 0 for win / loss / draw
    - Unexpanded leaves count as a draw, so deeper trees give better moves
    - The root side maximizes, the opponent minimizes
    - Ties go to the move enumerated first
    """

    def evaluate(self, tree: GameTree) -> dict[int, int]:
        """Score every node reachable from the root.

        Nodes are visited in reverse BFS order so children are scored
        before their parents.

        Returns:
            Mapping of node handle to score
        """
        root_side = tree.root_node.state.side
        scores: dict[int, int] = {}

        for handle in reversed(list(tree.bfs())):
            node = tree.node(handle)
            if node.winner is not None:
                scores[handle] = terminal_score(node.winner, root_side)
            elif not node.children:
                scores[handle] = UNKNOWN_SCORE
            else:
                child_scores = [scores[child] for child in node.children]
                if node.state.side == root_side:
                    scores[handle] = max(child_scores)
                else:
                    scores[handle] = min(child_scores)

        return scores

    def best_child(self, tree: GameTree) -> tuple[int, int] | None:
        """Pick the root child with the highest score.

        Returns:
            Tuple of (child handle, score), or None if the root has no
            children
        """
        children = tree.root_node.children
        if not children:
            return None

        scores = self.evaluate(tree)
        best_handle = children[0]
        best_score = scores[best_handle]
        for child in children[1:]:
            if scores[child] > best_score:
                best_handle = child
                best_score = scores[child]

        return best_handle, best_score

    def best_move(self, tree: GameTree) -> BoardMove | None:
        best = self.best_child(tree)
        if best is None:
            return None
        return tree.node(best[0]).move
