"""Board model: an 8x8 grid of optional pieces and pure helpers around it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional

from .constants import (
    BACK_RANK,
    BOARD_SIZE,
    HOME_ROW,
    PAWN_START_ROW,
    START_PLACEMENT,
    Color,
    PieceType,
    square_name,
)


@dataclass(frozen=True, slots=True)
class Piece:
    type: PieceType
    color: Color

    @property
    def symbol(self) -> str:
        letter = self.type.value
        return letter.upper() if self.color is Color.WHITE else letter

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        try:
            piece_type = PieceType(symbol.lower())
        except ValueError as exc:
            raise ValueError(f"Invalid piece symbol: {symbol}") from exc
        return cls(piece_type, Color.WHITE if symbol.isupper() else Color.BLACK)

    def __str__(self) -> str:
        return self.symbol


class Position(NamedTuple):
    row: int
    col: int

    @property
    def name(self) -> str:
        return square_name(self.row, self.col)

    def __str__(self) -> str:
        return self.name


Board = list[list[Optional[Piece]]]


def empty_board() -> Board:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def initial_board() -> Board:
    board = empty_board()
    for color in (Color.BLACK, Color.WHITE):
        pawn_row = PAWN_START_ROW[color]
        home_row = HOME_ROW[color]
        for col, piece_type in enumerate(BACK_RANK):
            board[pawn_row][col] = Piece(PieceType.PAWN, color)
            board[home_row][col] = Piece(piece_type, color)
    return board


def copy_board(board: Board) -> Board:
    # Pieces are frozen values, so copying the rows is a deep copy.
    return [list(row) for row in board]


def in_bounds(pos: Position) -> bool:
    return 0 <= pos[0] < BOARD_SIZE and 0 <= pos[1] < BOARD_SIZE


def positions_equal(a: Optional[Position], b: Optional[Position]) -> bool:
    if a is None or b is None:
        return False
    return a[0] == b[0] and a[1] == b[1]


def find_king(board: Board, color: Color) -> Optional[Position]:
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            piece = board[row][col]
            if piece is not None and piece.type is PieceType.KING and piece.color is color:
                return Position(row, col)
    return None


def iter_pieces(board: Board, color: Optional[Color] = None) -> Iterator[tuple[Position, Piece]]:
    """Yield ``(position, piece)`` in row-major order, optionally for one colour."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            piece = board[row][col]
            if piece is None:
                continue
            if color is not None and piece.color is not color:
                continue
            yield Position(row, col), piece


def board_from_placement(placement: str = START_PLACEMENT) -> Board:
    """Parse the piece-placement field of a FEN string.

    The first rank listed is row 0 (black's home rank), matching FEN order.
    """
    ranks = placement.strip().split("/")
    if len(ranks) != BOARD_SIZE:
        raise ValueError(f"Invalid board placement: {placement}")

    board = empty_board()
    for row, rank in enumerate(ranks):
        col = 0
        for ch in rank:
            if ch.isdigit():
                col += int(ch)
                continue
            if col >= BOARD_SIZE:
                raise ValueError(f"Invalid rank in placement: {rank}")
            board[row][col] = Piece.from_symbol(ch)
            col += 1
        if col != BOARD_SIZE:
            raise ValueError(f"Invalid rank in placement: {rank}")
    return board


def board_to_placement(board: Board) -> str:
    ranks = []
    for row in board:
        text = ""
        gap = 0
        for piece in row:
            if piece is None:
                gap += 1
                continue
            if gap:
                text += str(gap)
                gap = 0
            text += piece.symbol
        if gap:
            text += str(gap)
        ranks.append(text)
    return "/".join(ranks)


def render_board(board: Board) -> str:
    rows = []
    for row_idx, row in enumerate(board):
        cells = [piece.symbol if piece else "." for piece in row]
        rows.append(f"{BOARD_SIZE - row_idx} " + " ".join(cells))
    rows.append("  a b c d e f g h")
    return "\n".join(rows)
