"""Move generation and attack detection.

Generation runs in one of two modes. ``RAW`` answers "which squares can this
piece reach", ignoring whether its own king would be exposed; attack detection
only ever uses this mode. ``LEGAL`` filters the raw destinations by playing
each one on a private copy of the board and asking the check detector whether
the mover's king is attacked. Keeping attack detection on ``RAW`` is what stops
the two from recursing into each other.
"""

from __future__ import annotations

from enum import Enum

from .board import Board, Piece, Position, copy_board, find_king, in_bounds, iter_pieces
from .constants import PAWN_DIRECTION, PAWN_START_ROW, Color, PieceType, opposite


class MoveMode(Enum):
    RAW = "raw"
    LEGAL = "legal"


KNIGHT_DELTAS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_DELTAS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))
BISHOP_DIRS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS = BISHOP_DIRS + ROOK_DIRS

SLIDER_DIRS = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}
LEAPER_DELTAS = {
    PieceType.KNIGHT: KNIGHT_DELTAS,
    PieceType.KING: KING_DELTAS,
}


def _generate_pawn_moves(board: Board, from_pos: Position, piece: Piece, moves: list[Position]) -> None:
    direction = PAWN_DIRECTION[piece.color]
    row, col = from_pos

    one_step = Position(row + direction, col)
    if in_bounds(one_step) and board[one_step.row][one_step.col] is None:
        moves.append(one_step)
        if row == PAWN_START_ROW[piece.color]:
            two_step = Position(row + 2 * direction, col)
            if board[two_step.row][two_step.col] is None:
                moves.append(two_step)

    for dc in (-1, 1):
        target = Position(row + direction, col + dc)
        if not in_bounds(target):
            continue
        occupant = board[target.row][target.col]
        if occupant is not None and occupant.color is not piece.color:
            moves.append(target)


def _generate_leaper_moves(
    board: Board,
    from_pos: Position,
    piece: Piece,
    deltas: tuple[tuple[int, int], ...],
    moves: list[Position],
) -> None:
    for dr, dc in deltas:
        target = Position(from_pos.row + dr, from_pos.col + dc)
        if not in_bounds(target):
            continue
        occupant = board[target.row][target.col]
        if occupant is not None and occupant.color is piece.color:
            continue
        moves.append(target)


def _generate_slider_moves(
    board: Board,
    from_pos: Position,
    piece: Piece,
    directions: tuple[tuple[int, int], ...],
    moves: list[Position],
) -> None:
    for dr, dc in directions:
        target = Position(from_pos.row + dr, from_pos.col + dc)
        while in_bounds(target):
            occupant = board[target.row][target.col]
            if occupant is None:
                moves.append(target)
            else:
                if occupant.color is not piece.color:
                    moves.append(target)
                break
            target = Position(target.row + dr, target.col + dc)


def _generate_raw_moves(board: Board, from_pos: Position, piece: Piece) -> list[Position]:
    moves: list[Position] = []
    if piece.type is PieceType.PAWN:
        _generate_pawn_moves(board, from_pos, piece, moves)
    elif piece.type in LEAPER_DELTAS:
        _generate_leaper_moves(board, from_pos, piece, LEAPER_DELTAS[piece.type], moves)
    else:
        _generate_slider_moves(board, from_pos, piece, SLIDER_DIRS[piece.type], moves)
    return moves


def _leaves_king_safe(board: Board, from_pos: Position, to_pos: Position, color: Color) -> bool:
    trial = copy_board(board)
    trial[to_pos.row][to_pos.col] = trial[from_pos.row][from_pos.col]
    trial[from_pos.row][from_pos.col] = None
    return not in_check(trial, color)


def generate_moves(board: Board, from_pos: Position, mode: MoveMode = MoveMode.LEGAL) -> list[Position]:
    """Return the destinations for the piece on ``from_pos``.

    An empty square yields an empty list.
    """
    from_pos = Position(*from_pos)
    piece = board[from_pos.row][from_pos.col]
    if piece is None:
        return []

    moves = _generate_raw_moves(board, from_pos, piece)
    if mode is MoveMode.RAW:
        return moves
    return [to_pos for to_pos in moves if _leaves_king_safe(board, from_pos, to_pos, piece.color)]


def is_square_attacked(board: Board, pos: Position, by_color: Color) -> bool:
    target = Position(*pos)
    for from_pos, _ in iter_pieces(board, by_color):
        if target in generate_moves(board, from_pos, MoveMode.RAW):
            return True
    return False


def in_check(board: Board, color: Color) -> bool:
    king_pos = find_king(board, color)
    if king_pos is None:
        return False
    return is_square_attacked(board, king_pos, opposite(color))


def legal_moves_for(board: Board, color: Color) -> list[tuple[Position, Position]]:
    """Every ``(from, to)`` legal move of ``color`` in row-major source order."""
    return [
        (from_pos, to_pos)
        for from_pos, _ in iter_pieces(board, color)
        for to_pos in generate_moves(board, from_pos, MoveMode.LEGAL)
    ]
