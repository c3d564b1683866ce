"""
CLI for the gametree engine.

Usage:
    python -m gametree.cli.main --help
    python -m gametree.cli.main play --game t3
    python -m gametree.cli.main play --game fiar --human-first --think 4
    python -m gametree.cli.main best-move --game t3 --moves "1,1;0,0"
    python -m gametree.cli.main expand --game t3 --plies 4
    python -m gametree.cli.main serve --game fiar
"""

import json
import logging
import select
import sys
import time
from enum import Enum
from typing import Annotated

import typer

from ..ai.interface import GameInterface, create_game
from ..core.bus import EventBus
from ..core.config import get_settings
from ..core.errors import GameError
from ..core.events import Event, EventType
from ..core.types import BoardMove, Cell, Coords, ExpandResult
from ..game.board import Board
from ..game.engine import GameEngine
from ..worker.host import ExpansionHost
from ..worker.protocol import best_move_message, decode_move, encode_move


app = typer.Typer(
    name="gametree",
    help="Incremental game-tree search for three-in-a-row and four-in-a-row.",
    add_completion=False,
)

logger = logging.getLogger(__name__)


class GameChoice(str, Enum):
    """Game variants selectable on the command line."""

    T3 = "t3"
    FIAR = "fiar"


GameOption = Annotated[
    GameChoice | None,
    typer.Option("--game", "-g", help="Game variant: t3 or fiar (default from WORKER_GAME)"),
]


@app.callback()
def configure(
    log_level: Annotated[str | None, typer.Option("--log-level", help="Override LOG_LEVEL")] = None,
):
    """Configure logging from settings."""
    log = get_settings().log
    logging.basicConfig(
        level=(log_level or log.level).upper(),
        format=log.format,
        stream=sys.stderr,
        force=True,
    )


def board_to_ascii(board: Board) -> str:
    """Render a board from its byte view."""
    cells = board.cells_view()
    width = board.width

    lines = ["\n   " + "   ".join(str(col) for col in range(width))]
    lines.append(" +" + "---+" * width)
    for row in range(board.height):
        symbols = [Cell(cells[row * width + col]).symbol for col in range(width)]
        lines.append(f"{row}| " + " | ".join(s if s != "." else " " for s in symbols) + " |")
        lines.append(" +" + "---+" * width)

    return "\n".join(lines)


def parse_moves(text: str) -> list[Coords]:
    """Parse "r,c;r,c;..." into coordinates."""
    coords = []
    for part in text.split(";"):
        part = part.strip()
        if not part:
            continue
        row, col = (int(value) for value in part.split(","))
        coords.append(Coords(row=row, col=col))
    return coords


def _variant(game: GameChoice | None) -> str:
    return game.value if game is not None else get_settings().worker.game


def _replay(game: GameInterface, coords: list[Coords]) -> None:
    for c in coords:
        move = BoardMove(c, game.side_to_move)
        if not game.track_move(move):
            typer.echo(f"Illegal move {move}", err=True)
            raise typer.Exit(1)


def _expand(game: GameInterface, plies: int | None) -> None:
    steps = 0
    while plies is None or steps < plies:
        steps += 1
        if game.expand_one_level() is ExpandResult.DONE:
            break


# ─────────────────────────────────────────────────────────────
# COMMANDS
# ─────────────────────────────────────────────────────────────


@app.command()
def play(
    game: GameOption = None,
    human_first: Annotated[bool, typer.Option("--human-first", help="Human plays X")] = False,
    think: Annotated[int, typer.Option("--think", "-t", min=1, help="Plies to expand before each engine reply")] = 3,
):
    """
    Play against the engine in the terminal.

    Examples:
        play --game t3                  # Engine opens
        play --game fiar --human-first  # Human opens, four-in-a-row
        play --game t3 --think 9        # Search the whole 3x3 tree first
    """
    settings = get_settings()
    variant = _variant(game)
    bus = EventBus()
    search = create_game(variant, settings)
    host = ExpansionHost(search, bus=bus, commit_best_move=True)
    engine = GameEngine(search.rules, bus=bus)

    replies: list[BoardMove | None] = []

    def on_best_move(event: Event) -> None:
        record = event.data["bestMove"]
        replies.append(decode_move(record) if record is not None else None)

    bus.subscribe(EventType.BEST_MOVE, on_best_move)

    typer.echo("\n" + "=" * 50)
    typer.echo("  " + ("THREE IN A ROW" if variant == "t3" else "FOUR IN A ROW"))
    typer.echo("=" * 50)

    human = Cell.X if human_first else Cell.O
    prompt = "row,col" if variant == "t3" else "column"
    engine.new_game()
    host.start()

    while not engine.is_game_over:
        typer.echo(board_to_ascii(engine.state.board))

        if engine.side_to_move == human:
            move = _ask_move(engine, variant, prompt)
            if move is None:
                typer.echo("Game quit.")
                return
            engine.make_move(move)
            host.post({"kind": "track_move", "lastMove": encode_move(move)})
        else:
            typer.echo("\nEngine is thinking...")
            start = time.perf_counter()
            host.run(max_tasks=think)
            host.post({"kind": "get_best_move"})
            while not replies and host.step():
                pass
            reply = replies.pop() if replies else None
            if reply is None:
                typer.echo("Engine has no move.", err=True)
                raise typer.Exit(1)
            typer.echo(
                f"Engine plays {reply.coords} after {time.perf_counter() - start:.2f}s "
                f"({search.node_count} nodes)"
            )
            engine.make_move(reply)

    typer.echo(board_to_ascii(engine.state.board))
    if engine.winner == Cell.EMPTY:
        typer.echo("\nIt's a DRAW!")
    else:
        who = "You" if engine.winner == human else "Engine"
        typer.echo(f"\n{who} ({engine.winner.name}) WIN{'S' if who == 'Engine' else ''}!")


def _ask_move(engine: GameEngine, variant: str, prompt: str) -> BoardMove | None:
    while True:
        try:
            user_input = typer.prompt(f"\nYour move ({prompt}, 'q' to quit)")
        except (KeyboardInterrupt, EOFError, typer.Abort):
            return None
        if user_input.strip().lower() == "q":
            return None
        try:
            if variant == "t3":
                row, col = (int(value) for value in user_input.split(","))
            else:
                row, col = 0, int(user_input)
            move = engine.move_at(row, col)
        except (ValueError, GameError) as e:
            typer.echo(f"Invalid input: {e}")
            continue
        if engine.is_legal(move):
            return move
        typer.echo(f"Illegal move {move}")


@app.command("best-move")
def best_move(
    game: GameOption = None,
    moves: Annotated[str, typer.Option("--moves", "-m", help='Moves played so far, "r,c;r,c"')] = "",
    plies: Annotated[int | None, typer.Option("--plies", "-p", help="Plies to expand (default: all)")] = None,
):
    """Print the best reply for a position as a best_move message."""
    search = create_game(_variant(game), get_settings())
    try:
        coords = parse_moves(moves)
    except ValueError as e:
        typer.echo(f"Invalid --moves: {e}", err=True)
        raise typer.Exit(1) from e

    _replay(search, coords)
    _expand(search, plies)
    typer.echo(json.dumps(best_move_message(search.get_best_move())))


@app.command()
def expand(
    game: GameOption = None,
    plies: Annotated[int, typer.Option("--plies", "-p", help="Plies to expand")] = 4,
):
    """Report tree growth per expanded ply."""
    search = create_game(_variant(game), get_settings())
    typer.echo(f"{'Ply':<5} {'Nodes':>10} {'Open':>10} {'ms':>10}")
    typer.echo("-" * 38)

    for _ in range(plies):
        start = time.perf_counter()
        result = search.expand_one_level()
        elapsed = (time.perf_counter() - start) * 1000
        typer.echo(
            f"{search.plies:<5} {search.node_count:>10} {len(search.tree.frontier):>10} {elapsed:>10.1f}"
        )
        if result is ExpandResult.DONE:
            typer.echo("Done.")
            break


@app.command()
def serve(game: GameOption = None):
    """
    Speak the worker protocol as JSON lines on stdin/stdout.

    Expansion runs between incoming lines; every best_move answer is
    written as one JSON line.
    """
    settings = get_settings()
    bus = EventBus()
    host = ExpansionHost(
        create_game(_variant(game), settings),
        bus=bus,
        commit_best_move=settings.worker.commit_best_move,
    )

    def emit(event: Event) -> None:
        sys.stdout.write(json.dumps(event.data) + "\n")
        sys.stdout.flush()

    bus.subscribe(EventType.BEST_MOVE, emit)
    host.start()

    while True:
        timeout = None if host.is_idle else settings.worker.poll_interval
        readable, _, _ = select.select([sys.stdin], [], [], timeout)
        if readable:
            line = sys.stdin.readline()
            if not line:
                break
            if line.strip():
                host.post_json(line)
        host.step()

    logger.info("Input closed, stopping")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
