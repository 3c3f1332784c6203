"""Move record used by the executor and the history stack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import Piece, Position
from .constants import PieceType


@dataclass(frozen=True, slots=True)
class CastlingInfo:
    rook_from: Position
    rook_to: Position


@dataclass(frozen=True, slots=True)
class Move:
    from_pos: Position
    to_pos: Position
    piece: Piece
    captured: Optional[Piece] = None
    promotion: Optional[PieceType] = None
    # Never populated: castling and en passant are not played.
    castling: Optional[CastlingInfo] = None
    en_passant: Optional[Position] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def uci(self) -> str:
        promo = self.promotion.value if self.promotion is not None else ""
        return f"{self.from_pos.name}{self.to_pos.name}{promo}"

    def to_dict(self) -> dict:
        return {
            "from": self.from_pos.name,
            "to": self.to_pos.name,
            "piece": self.piece.symbol,
            "captured": self.captured.symbol if self.captured else None,
            "promotion": self.promotion.value if self.promotion else None,
            "uci": self.uci(),
        }

    def __str__(self) -> str:
        return self.uci()
