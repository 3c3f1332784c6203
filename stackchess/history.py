"""Move execution on a board and the history stack used for undo."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from .board import Board, Piece, Position
from .constants import PieceType
from .move import Move

logger = logging.getLogger(__name__)


def execute_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    promotion: Optional[PieceType] = None,
) -> Move:
    """Apply a move in place and return the record needed to reverse it."""
    from_pos = Position(*from_pos)
    to_pos = Position(*to_pos)
    piece = board[from_pos.row][from_pos.col]
    if piece is None:
        raise ValueError(f"No piece on {from_pos.name}")

    captured = board[to_pos.row][to_pos.col]
    if promotion is not None:
        board[to_pos.row][to_pos.col] = Piece(promotion, piece.color)
    else:
        board[to_pos.row][to_pos.col] = piece
    board[from_pos.row][from_pos.col] = None

    move = Move(from_pos=from_pos, to_pos=to_pos, piece=piece, captured=captured, promotion=promotion)
    logger.debug("executed %s", move)
    return move


def revert_move(board: Board, move: Move) -> None:
    # The piece snapshot predates any promotion, so this also undoes it.
    board[move.from_pos.row][move.from_pos.col] = move.piece
    board[move.to_pos.row][move.to_pos.col] = move.captured
    logger.debug("reverted %s", move)


class MoveStack:
    """LIFO sequence of committed moves."""

    __slots__ = ("_moves",)

    def __init__(self) -> None:
        self._moves: list[Move] = []

    def push(self, move: Move) -> None:
        self._moves.append(move)

    def pop(self) -> Optional[Move]:
        if not self._moves:
            return None
        return self._moves.pop()

    def peek(self) -> Optional[Move]:
        return self._moves[-1] if self._moves else None

    def clear(self) -> None:
        self._moves.clear()

    def notation(self) -> list[str]:
        return [move.uci() for move in self._moves]

    def __len__(self) -> int:
        return len(self._moves)

    def __bool__(self) -> bool:
        return bool(self._moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(list(self._moves))
