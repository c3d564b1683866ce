"""Arena of explored game states connected by legal moves."""

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field

from ..core.types import BoardMove, Cell
from ..game.state import GameState


@dataclass(eq=False)
class GameTreeNode:
    """A single explored state.

    Parent and children are arena handles, never object references.
    """

    handle: int
    state: GameState
    parent: int | None
    ply: int
    winner: Cell | None = None  # Cell.EMPTY marks a draw
    children: list[int] = field(default_factory=list)

    @property
    def terminal(self) -> bool:
        return self.winner is not None

    @property
    def move(self) -> BoardMove:
        """Move that produced this node's state."""
        return self.state.last_move


class GameTree:
    """Game tree rooted at the real, current game position.

    Nodes live in an arena keyed by integer handle. The frontier holds the
    non-terminal leaves that still need expanding and ``plies`` counts how
    many levels below the root have been enumerated.
    """

    def __init__(self, root_state: GameState, root_winner: Cell | None = None, root_ply: int = 0):
        self._nodes: dict[int, GameTreeNode] = {}
        self._next_handle = 0
        self.root = self._new_node(root_state, parent=None, ply=root_ply, winner=root_winner)
        self.frontier: list[int] = [] if root_winner is not None else [self.root]
        self.plies = 0

    def _new_node(
        self, state: GameState, parent: int | None, ply: int, winner: Cell | None
    ) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._nodes[handle] = GameTreeNode(
            handle=handle, state=state, parent=parent, ply=ply, winner=winner
        )
        return handle

    def node(self, handle: int) -> GameTreeNode:
        return self._nodes[handle]

    @property
    def root_node(self) -> GameTreeNode:
        return self._nodes[self.root]

    def add_child(self, parent: int, state: GameState, winner: Cell | None) -> int:
        """Attach a new state below ``parent`` and return its handle."""
        parent_node = self._nodes[parent]
        if parent_node.terminal:
            raise ValueError(f"Cannot add children to terminal node {parent}")
        handle = self._new_node(state, parent=parent, ply=parent_node.ply + 1, winner=winner)
        parent_node.children.append(handle)
        return handle

    def child_for_move(self, handle: int, move: BoardMove) -> int | None:
        for child in self._nodes[handle].children:
            if self._nodes[child].move == move:
                return child
        return None

    def bfs(self, start: int | None = None) -> Iterator[int]:
        """Iterate handles breadth-first, parents before children."""
        buffer = deque([self.root if start is None else start])
        while buffer:
            handle = buffer.popleft()
            buffer.extend(self._nodes[handle].children)
            yield handle

    def reroot(self, handle: int) -> None:
        """Make a child of the root the new root.

        Sibling subtrees are discarded, the frontier keeps only leaves
        below the new root and one enumerated ply is consumed.
        """
        node = self._nodes[handle]
        if node.parent != self.root:
            raise ValueError(f"Node {handle} is not a child of the root")

        kept = list(self.bfs(handle))
        self._nodes = {h: self._nodes[h] for h in kept}
        node.parent = None
        self.root = handle
        self.frontier = [h for h in self.frontier if h in self._nodes]
        self.plies = max(self.plies - 1, 0)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, handle: object) -> bool:
        return handle in self._nodes
