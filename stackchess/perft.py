"""Perft utilities for move generation correctness checks."""

from __future__ import annotations

from .board import Board
from .constants import Color, opposite
from .history import execute_move, revert_move
from .movegen import legal_moves_for


def perft(board: Board, color: Color, depth: int) -> int:
    if depth < 0:
        raise ValueError("Depth must be >= 0")
    if depth == 0:
        return 1

    moves = legal_moves_for(board, color)
    if depth == 1:
        return len(moves)

    nodes = 0
    for from_pos, to_pos in moves:
        move = execute_move(board, from_pos, to_pos)
        nodes += perft(board, opposite(color), depth - 1)
        revert_move(board, move)
    return nodes


def perft_divide(board: Board, color: Color, depth: int) -> dict[str, int]:
    if depth < 1:
        raise ValueError("Depth must be >= 1 for perft divide")

    result: dict[str, int] = {}
    for from_pos, to_pos in legal_moves_for(board, color):
        move = execute_move(board, from_pos, to_pos)
        count = perft(board, opposite(color), depth - 1)
        revert_move(board, move)
        result[move.uci()] = count
    return dict(sorted(result.items()))
