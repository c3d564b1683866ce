"""
Cooperative worker host.

Runs the expansion loop and services requests on a single thread. The
loop is an explicit FIFO task queue: the expansion task performs one ply
and re-enqueues itself, so requests posted in the meantime are handled
between two plies. Requests always run with expansion paused.
"""

import logging
from collections import deque
from collections.abc import Callable
from functools import partial
from typing import Any

from ..ai.interface import GameInterface
from ..core.bus import EventBus, get_event_bus
from ..core.errors import GameError, MalformedMessageError
from ..core.events import Event, EventType
from ..core.types import ExpandResult
from .protocol import (
    GetBestMoveRequest,
    Request,
    ResetRequest,
    TrackMoveRequest,
    best_move_message,
    decode_request,
    decode_request_json,
)


logger = logging.getLogger(__name__)


class ExpansionHost:
    """
    Single-threaded scheduler around a GameInterface.

    Usage:
        host = ExpansionHost(TicTacToeInterface())
        host.start()
        host.post({"kind": "track_move", "lastMove": {"row": 1, "col": 1, "side": 1}})
        host.post({"kind": "get_best_move"})
        host.run()

    Outbound messages are published on the bus as BEST_MOVE events.
    """

    def __init__(
        self,
        game: GameInterface,
        bus: EventBus | None = None,
        commit_best_move: bool = True,
    ):
        """Initialize the host.

        Args:
            game: Engine to drive
            bus: Event bus for outbound messages (uses global if None)
            commit_best_move: Track the engine's reply after answering
                get_best_move, so the client does not have to echo it
        """
        self.game = game
        self.bus = bus or get_event_bus()
        self.commit_best_move = commit_best_move
        self._queue: deque[Callable[[], None]] = deque()
        self._held = False  # paused by the owner
        self._in_request = False  # paused around a request
        self._expansion_scheduled = False
        self._done = False

    # ─────────────────────────────────────────────────────────
    # Scheduling
    # ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Kick off the expansion loop."""
        self._schedule_expansion()

    def pause(self) -> None:
        """Stop rescheduling expansion until resume() is called."""
        self._held = True

    def resume(self) -> None:
        self._held = False
        self._schedule_expansion()

    @property
    def is_paused(self) -> bool:
        return self._held or self._in_request

    @property
    def pending(self) -> int:
        """Number of queued tasks."""
        return len(self._queue)

    @property
    def is_idle(self) -> bool:
        return not self._queue

    def _schedule_expansion(self) -> None:
        if self._expansion_scheduled or self.is_paused:
            return
        self._expansion_scheduled = True
        self._queue.append(self._expand_step)

    def _expand_step(self) -> None:
        self._expansion_scheduled = False
        if self.is_paused:
            return

        result = self.game.expand_one_level()
        if result is ExpandResult.NOT_DONE:
            self.bus.publish(Event(
                type=EventType.LEVEL_EXPANDED,
                data={"plies": self.game.plies, "nodes": self.game.node_count},
                source="expansion_host"
            ))
            self._schedule_expansion()
        elif not self._done:
            self._done = True
            self.bus.publish(Event(
                type=EventType.EXPANSION_DONE,
                data={"plies": self.game.plies, "nodes": self.game.node_count},
                source="expansion_host"
            ))

    def run_between_expansion(self, task: Callable[[], None]) -> None:
        """Run ``task`` with expansion paused, then resume expansion."""
        self._in_request = True
        position = (self.game.tree, self.game.tree.root)
        try:
            task()
        finally:
            self._in_request = False
            # A moved or reset root may bring new leaves to expand
            if (self.game.tree, self.game.tree.root) != position:
                self._done = False
            self._schedule_expansion()

    def step(self) -> bool:
        """Run the next queued task.

        Returns:
            False if the queue was empty
        """
        if not self._queue:
            return False
        task = self._queue.popleft()
        task()
        return True

    def run(self, max_tasks: int | None = None) -> int:
        """Run queued tasks until the queue drains or ``max_tasks`` ran.

        Returns:
            Number of tasks run
        """
        count = 0
        while max_tasks is None or count < max_tasks:
            if not self.step():
                break
            count += 1
        return count

    # ─────────────────────────────────────────────────────────
    # Messages
    # ─────────────────────────────────────────────────────────

    def post(self, payload: Any) -> bool:
        """Queue an inbound message given as a dict.

        Returns:
            False if the message was malformed and dropped
        """
        try:
            request = decode_request(payload)
        except MalformedMessageError as e:
            self._reject(payload, e)
            return False
        self._enqueue(request)
        return True

    def post_json(self, data: str | bytes) -> bool:
        """Queue an inbound message given as a JSON document."""
        try:
            request = decode_request_json(data)
        except MalformedMessageError as e:
            self._reject(data, e)
            return False
        self._enqueue(request)
        return True

    def _reject(self, payload: Any, error: MalformedMessageError) -> None:
        logger.warning("Dropping malformed message: %s", error)
        self.bus.publish(Event(
            type=EventType.REQUEST_REJECTED,
            data={"payload": payload, "reason": str(error)},
            source="expansion_host"
        ))

    def _enqueue(self, request: Request) -> None:
        logger.debug("Got message %s", request.kind)
        self._queue.append(partial(self.run_between_expansion, partial(self._handle, request)))

    def _handle(self, request: Request) -> None:
        try:
            if isinstance(request, TrackMoveRequest):
                self._track_move(request)
            elif isinstance(request, ResetRequest):
                self.game.reset()
            elif isinstance(request, GetBestMoveRequest):
                self._answer_best_move()
        except GameError:
            logger.exception("Request %s failed", request.kind)

    def _track_move(self, request: TrackMoveRequest) -> None:
        move = request.last_move.to_move()
        if not self.game.track_move(move):
            self.bus.publish(Event(
                type=EventType.MOVE_REJECTED,
                data={"move": move},
                source="expansion_host"
            ))

    def _answer_best_move(self) -> None:
        move = self.game.get_best_move(commit=self.commit_best_move)
        self.bus.publish(Event(
            type=EventType.BEST_MOVE,
            data=best_move_message(move),
            source="expansion_host"
        ))
