"""Engine-wide constants and square helpers."""

from __future__ import annotations

from enum import Enum


class Color(str, Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def label(self) -> str:
        return "White" if self is Color.WHITE else "Black"


class PieceType(str, Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


BOARD_SIZE = 8

BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

HOME_ROW = {Color.BLACK: 0, Color.WHITE: 7}
PAWN_START_ROW = {Color.BLACK: 1, Color.WHITE: 6}
PAWN_DIRECTION = {Color.BLACK: 1, Color.WHITE: -1}
PROMOTION_ROW = {Color.WHITE: 0, Color.BLACK: 7}

PROMOTION_CHOICES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)

START_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

FILES = "abcdefgh"


def square_name(row: int, col: int) -> str:
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise ValueError(f"Square out of range: ({row}, {col})")
    return f"{FILES[col]}{BOARD_SIZE - row}"


def parse_square(square: str) -> tuple[int, int]:
    text = square.strip().lower()
    if len(text) != 2 or text[0] not in FILES or text[1] not in "12345678":
        raise ValueError(f"Invalid square: {square}")
    return BOARD_SIZE - int(text[1]), FILES.index(text[0])


def opposite(color: Color) -> Color:
    return Color.BLACK if color is Color.WHITE else Color.WHITE
