"""
Message protocol between the worker host and its clients.

Inbound:  {kind: 'track_move', lastMove: BoardMove} | {kind: 'reset'} |
          {kind: 'get_best_move'}
Outbound: {kind: 'best_move', bestMove: BoardMove | None}

BoardMove records are flat {row, col, side} dicts with side 0/1/2.
Payloads are validated here so malformed values never reach the engine.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..core.errors import MalformedMessageError
from ..core.types import BoardMove, Cell, Coords


Index = Annotated[int, Field(ge=0, strict=True)]
Side = Annotated[int, Field(ge=0, le=2, strict=True)]  # Cell value


class BoardMoveRecord(BaseModel):
    """Cross-boundary form of a BoardMove."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    row: Index
    col: Index
    side: Side

    def to_move(self) -> BoardMove:
        return BoardMove(coords=Coords(row=self.row, col=self.col), side=Cell(self.side))


def encode_move(move: BoardMove) -> dict[str, int]:
    """Convert a move to a plain record for transport."""
    return {"row": move.row, "col": move.col, "side": int(move.side)}


def decode_move(record: Any) -> BoardMove:
    """Convert a transported record back to a move.

    Raises:
        MalformedMessageError: If the record is not a valid BoardMove
    """
    try:
        return BoardMoveRecord.model_validate(record).to_move()
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid BoardMove record: {record!r}") from e


# ─────────────────────────────────────────────────────────────
# REQUESTS
# ─────────────────────────────────────────────────────────────


class TrackMoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["track_move"]
    last_move: BoardMoveRecord = Field(alias="lastMove")


class ResetRequest(BaseModel):
    kind: Literal["reset"]


class GetBestMoveRequest(BaseModel):
    kind: Literal["get_best_move"]


Request = Annotated[
    Union[TrackMoveRequest, ResetRequest, GetBestMoveRequest],
    Field(discriminator="kind"),
]

_request_adapter: TypeAdapter[Request] = TypeAdapter(Request)


def decode_request(payload: Any) -> Request:
    """Validate an inbound message.

    Raises:
        MalformedMessageError: If the payload is not a known request
    """
    try:
        return _request_adapter.validate_python(payload)
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid request: {payload!r}") from e


def decode_request_json(data: str | bytes) -> Request:
    """Validate an inbound message given as a JSON document."""
    try:
        return _request_adapter.validate_json(data)
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid request: {data!r}") from e


# ─────────────────────────────────────────────────────────────
# RESPONSES
# ─────────────────────────────────────────────────────────────


def best_move_message(move: BoardMove | None) -> dict[str, Any]:
    """Outbound answer to a get_best_move request."""
    return {
        "kind": "best_move",
        "bestMove": encode_move(move) if move is not None else None,
    }
