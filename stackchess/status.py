"""Terminal-state detection for the side to move."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .board import Board, iter_pieces
from .constants import Color, opposite
from .movegen import MoveMode, generate_moves, in_check


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def has_legal_moves(board: Board, color: Color) -> bool:
    for from_pos, _ in iter_pieces(board, color):
        if generate_moves(board, from_pos, MoveMode.LEGAL):
            return True
    return False


def game_status(board: Board, color: Color) -> GameStatus:
    if has_legal_moves(board, color):
        return GameStatus.ONGOING
    if in_check(board, color):
        return GameStatus.CHECKMATE
    return GameStatus.STALEMATE


def game_over_message(status: GameStatus, side_to_move: Color) -> Optional[str]:
    if status is GameStatus.CHECKMATE:
        return f"Checkmate! {opposite(side_to_move).label} wins!"
    if status is GameStatus.STALEMATE:
        return "Stalemate! Draw!"
    return None
