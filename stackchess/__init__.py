"""Chess rules engine with a move-history stack and a heuristic opponent."""

from .board import Board, Piece, Position
from .constants import Color, PieceType
from .game import GameState
from .move import Move
from .status import GameStatus

__all__ = ["Board", "Color", "GameState", "GameStatus", "Move", "Piece", "PieceType", "Position"]
