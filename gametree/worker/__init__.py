"""Worker host and message protocol."""

from .host import ExpansionHost
from .protocol import (
    BoardMoveRecord,
    best_move_message,
    decode_move,
    decode_request,
    decode_request_json,
    encode_move,
)


__all__ = [
    "BoardMoveRecord",
    "ExpansionHost",
    "best_move_message",
    "decode_move",
    "decode_request",
    "decode_request_json",
    "encode_move",
]
