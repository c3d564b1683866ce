"""
Tests for the cooperative ExpansionHost.

Covers:
- expansion runs to completion one ply per task
- requests are serviced between two plies
- pause / resume
- malformed and rejected messages
"""

import pytest

from gametree.ai.interface import TicTacToeInterface
from gametree.core.events import EventType
from gametree.core.types import Cell
from gametree.worker.host import ExpansionHost


def collect(bus, event_type):
    events = []
    bus.subscribe(event_type, events.append)
    return events


@pytest.fixture
def host(bus, tiny) -> ExpansionHost:
    return ExpansionHost(tiny, bus=bus)


# =============================================================================
# Expansion loop
# =============================================================================


def test_runs_expansion_to_completion(bus, host):
    levels = collect(bus, EventType.LEVEL_EXPANDED)
    done = collect(bus, EventType.EXPANSION_DONE)

    host.start()
    assert host.pending == 1
    assert host.run() == 3

    assert [e.data["plies"] for e in levels] == [1, 2]
    assert len(done) == 1
    assert done[0].data == {"plies": 3, "nodes": 41}
    assert host.is_idle
    assert host.game.is_fully_expanded


def test_start_twice_queues_one_expansion(host):
    host.start()
    host.start()
    assert host.pending == 1


def test_run_respects_max_tasks(host):
    host.start()
    assert host.run(max_tasks=1) == 1
    assert host.game.plies == 1
    assert host.pending == 1


def test_step_on_empty_queue(host):
    assert not host.step()


# =============================================================================
# Requests between plies
# =============================================================================


def test_request_is_handled_between_plies(bus):
    game = TicTacToeInterface()
    host = ExpansionHost(game, bus=bus)
    replies = collect(bus, EventType.BEST_MOVE)

    host.start()
    host.step()
    assert game.plies == 1

    assert host.post({"kind": "get_best_move"})
    assert host.pending == 2

    host.step()  # the already queued ply goes first
    assert game.plies == 2
    assert replies == []

    host.step()
    assert [e.data for e in replies] == [
        {"kind": "best_move", "bestMove": {"row": 0, "col": 0, "side": 1}}
    ]
    # Reply was committed: the engine now waits for O
    assert game.side_to_move == Cell.O
    assert game.plies == 1
    assert host.pending == 1
    assert not host.is_paused


def test_best_move_without_commit(bus, tiny):
    host = ExpansionHost(tiny, bus=bus, commit_best_move=False)
    replies = collect(bus, EventType.BEST_MOVE)
    host.start()
    host.run()

    host.post({"kind": "get_best_move"})
    host.run()

    assert replies[0].data["bestMove"] == {"row": 0, "col": 0, "side": 1}
    assert tiny.side_to_move == Cell.X
    assert tiny.node_count == 41


def test_queries_on_finished_tree_do_not_repeat_done(bus, tiny):
    host = ExpansionHost(tiny, bus=bus, commit_best_move=False)
    done = collect(bus, EventType.EXPANSION_DONE)
    host.start()
    host.run()

    for _ in range(2):
        host.post({"kind": "get_best_move"})
        host.run()

    assert len(done) == 1
    assert host.is_idle


def test_best_move_before_expansion_is_none(bus, host):
    replies = collect(bus, EventType.BEST_MOVE)
    host.post({"kind": "get_best_move"})
    host.step()

    assert replies[0].data == {"kind": "best_move", "bestMove": None}


def test_track_move_restarts_finished_expansion(bus, host):
    done = collect(bus, EventType.EXPANSION_DONE)
    host.start()
    host.run()

    assert host.post({"kind": "track_move", "lastMove": {"row": 1, "col": 1, "side": 1}})
    host.run()

    assert host.game.side_to_move == Cell.O
    assert host.game.node_count == 1 + 3 + 6
    assert len(done) == 2


def test_reset_request(bus, host):
    done = collect(bus, EventType.EXPANSION_DONE)
    host.start()
    host.run()

    assert host.post_json('{"kind": "reset"}')
    assert host.run() == 4  # the request plus three plies

    assert host.game.node_count == 41
    assert len(done) == 2


# =============================================================================
# Pause / resume
# =============================================================================


def test_pause_holds_expansion(host):
    host.start()
    host.pause()
    assert host.is_paused

    host.run()
    assert host.game.plies == 0
    assert host.is_idle

    host.resume()
    assert not host.is_paused
    host.run()
    assert host.game.is_fully_expanded


def test_requests_are_served_while_paused(bus, host):
    replies = collect(bus, EventType.BEST_MOVE)
    host.pause()
    host.post({"kind": "get_best_move"})

    assert host.run() == 1
    assert len(replies) == 1
    assert host.is_idle  # still held: no expansion was scheduled
    assert host.game.plies == 0


# =============================================================================
# Bad input
# =============================================================================


def test_malformed_message_is_dropped(bus, host):
    rejected = collect(bus, EventType.REQUEST_REJECTED)

    assert not host.post({"kind": "track_move", "lastMove": {"row": -1, "col": 0, "side": 1}})
    assert not host.post_json("not json")

    assert len(rejected) == 2
    assert host.is_idle


def test_illegal_move_is_reported(bus, host):
    rejected = collect(bus, EventType.MOVE_REJECTED)

    host.post({"kind": "track_move", "lastMove": {"row": 0, "col": 0, "side": 2}})
    host.step()

    assert len(rejected) == 1
    assert rejected[0].data["move"].side == Cell.O
    assert host.game.node_count == 1
    assert host.game.side_to_move == Cell.X
