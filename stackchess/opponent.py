"""One-ply heuristic move selection for the automated opponent."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from .board import Board, Position
from .constants import Color, PieceType
from .movegen import legal_moves_for

logger = logging.getLogger(__name__)

CAPTURE_BONUS = 100
PAWN_BONUS = 5
NOISE_SCALE = 10

Scorer = Callable[[Board, Position, Position], float]


@dataclass(frozen=True, slots=True)
class Candidate:
    from_pos: Position
    to_pos: Position
    score: float


class MoveSelector:
    """Scores every legal move once and keeps the best.

    Scores are ``random * 10``, plus 100 for a capture and 5 for a pawn move.
    Ties keep the earlier candidate. Pass ``rng`` to seed the noise or
    ``scorer`` to replace the scoring function entirely.
    """

    def __init__(self, rng: Optional[random.Random] = None, scorer: Optional[Scorer] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._scorer = scorer if scorer is not None else self.heuristic_score

    def heuristic_score(self, board: Board, from_pos: Position, to_pos: Position) -> float:
        score = self._rng.random() * NOISE_SCALE
        mover = board[from_pos.row][from_pos.col]
        target = board[to_pos.row][to_pos.col]
        if target is not None and mover is not None and target.color is not mover.color:
            score += CAPTURE_BONUS
        if mover is not None and mover.type is PieceType.PAWN:
            score += PAWN_BONUS
        return score

    def score_candidates(self, board: Board, color: Color) -> list[Candidate]:
        return [
            Candidate(from_pos, to_pos, self._scorer(board, from_pos, to_pos))
            for from_pos, to_pos in legal_moves_for(board, color)
        ]

    def choose_move(self, board: Board, color: Color) -> Optional[tuple[Position, Position]]:
        best: Optional[Candidate] = None
        for candidate in self.score_candidates(board, color):
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None:
            logger.debug("no legal moves for %s", color.label)
            return None
        logger.debug("%s picks %s%s (score %.2f)", color.label, best.from_pos, best.to_pos, best.score)
        return best.from_pos, best.to_pos
