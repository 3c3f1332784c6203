"""Game-state aggregate: board, turn, history, selection and the opponent job."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from .board import Board, Position, board_from_placement, board_to_placement, in_bounds, initial_board
from .constants import PROMOTION_CHOICES, PROMOTION_ROW, Color, PieceType, opposite
from .errors import GameOverError, IllegalMoveError
from .history import MoveStack, execute_move, revert_move
from .move import Move
from .movegen import MoveMode, generate_moves, in_check
from .opponent import MoveSelector
from .scheduler import DelayedMoveScheduler
from .status import GameStatus, game_over_message, game_status

logger = logging.getLogger(__name__)

DEFAULT_OPPONENT_DELAY = 2.0

EventListener = Callable[[str, "GameState"], None]


class GameState:
    """One game of chess, optionally against an automated opponent.

    All mutations go through a re-entrant lock so the delayed opponent job,
    which fires on a timer thread, never sees a half-applied move.
    """

    def __init__(
        self,
        opponent_color: Optional[Color] = Color.BLACK,
        opponent_delay: Optional[float] = DEFAULT_OPPONENT_DELAY,
        selector: Optional[MoveSelector] = None,
        on_event: Optional[EventListener] = None,
        placement: Optional[str] = None,
        turn: Color = Color.WHITE,
    ) -> None:
        self.opponent_color = opponent_color
        self.opponent_delay = opponent_delay
        self.selector = selector if selector is not None else MoveSelector()
        self.on_event = on_event

        self._lock = threading.RLock()
        self._scheduler = DelayedMoveScheduler()
        self._start_placement = placement
        self._start_turn = turn

        self.board: Board = []
        self.turn = turn
        self.history = MoveStack()
        self.selected: Optional[Position] = None
        self.highlights: list[Position] = []
        self.pending_promotion: Optional[tuple[Position, Position]] = None
        self.game_over: Optional[str] = None
        self._reset_locked()

    @property
    def opponent_pending(self) -> bool:
        return self._scheduler.armed

    @property
    def last_move(self) -> Optional[Move]:
        return self.history.peek()

    @property
    def status(self) -> GameStatus:
        with self._lock:
            return game_status(self.board, self.turn)

    @property
    def in_check(self) -> bool:
        with self._lock:
            return in_check(self.board, self.turn)

    def legal_moves(self, pos: Position) -> list[Position]:
        with self._lock:
            pos = Position(*pos)
            if not in_bounds(pos):
                return []
            piece = self.board[pos.row][pos.col]
            if piece is None or piece.color is not self.turn:
                return []
            return generate_moves(self.board, pos, MoveMode.LEGAL)

    def select_square(self, row: int, col: int) -> list[Position]:
        """Handle a click on a square and return the squares to highlight."""
        with self._lock:
            pos = Position(row, col)
            if self.game_over or self._is_opponent_turn() or not in_bounds(pos):
                return list(self.highlights)
            if self.pending_promotion is not None:
                return []

            piece = self.board[row][col]
            if self.selected is not None:
                if pos in self.highlights:
                    from_pos = self.selected
                    if self._needs_promotion(from_pos, pos):
                        self.pending_promotion = (from_pos, pos)
                        self._clear_selection()
                        self._emit("promotion")
                        return []
                    self.apply_move(from_pos, pos)
                    return []
                if piece is not None and piece.color is self.turn:
                    return self._select(pos)
                self._clear_selection()
                self._emit("select")
                return []

            if piece is not None and piece.color is self.turn:
                return self._select(pos)
            return []

    def choose_promotion(self, piece_type: PieceType) -> Move:
        with self._lock:
            if self.pending_promotion is None:
                raise IllegalMoveError("No promotion is pending")
            if piece_type not in PROMOTION_CHOICES:
                raise IllegalMoveError(f"Cannot promote to {piece_type.name.lower()}")
            from_pos, to_pos = self.pending_promotion
            self.pending_promotion = None
            return self.apply_move(from_pos, to_pos, piece_type)

    def cancel_promotion(self) -> None:
        with self._lock:
            if self.pending_promotion is None:
                return
            self.pending_promotion = None
            self._emit("select")

    def apply_move(
        self,
        from_pos: Position,
        to_pos: Position,
        promotion: Optional[PieceType] = None,
    ) -> Move:
        with self._lock:
            from_pos = Position(*from_pos)
            to_pos = Position(*to_pos)
            if not self.game_over and self._is_opponent_turn():
                raise IllegalMoveError(f"{self.turn.label} is played automatically")
            return self._commit(from_pos, to_pos, promotion)

    def _commit(self, from_pos: Position, to_pos: Position, promotion: Optional[PieceType]) -> Move:
        self._validate(from_pos, to_pos, promotion)

        move = execute_move(self.board, from_pos, to_pos, promotion)
        self.history.push(move)
        self.turn = opposite(self.turn)
        self._clear_selection()
        self.pending_promotion = None
        logger.debug("%s played %s", move.piece.color.label, move)

        self._emit("move")
        self._refresh_game_over()
        self._after_state_change()
        return move

    def undo(self) -> Optional[Move]:
        with self._lock:
            move = self.history.pop()
            if move is None:
                return None
            revert_move(self.board, move)
            self.turn = opposite(self.turn)
            self._clear_selection()
            self.pending_promotion = None
            self.game_over = None
            logger.debug("undid %s", move)
            self._emit("undo")
            self._after_state_change()
            return move

    def reset(self) -> None:
        with self._lock:
            self._reset_locked()
            logger.info("game reset")
            self._emit("reset")

    def close(self) -> None:
        self._scheduler.cancel()

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            last = self.last_move
            return {
                "board": board_to_placement(self.board),
                "turn": self.turn.value,
                "status": self.status.value,
                "in_check": in_check(self.board, self.turn),
                "game_over": self.game_over,
                "selected": self.selected.name if self.selected else None,
                "highlights": [pos.name for pos in self.highlights],
                "pending_promotion": (
                    [pos.name for pos in self.pending_promotion] if self.pending_promotion else None
                ),
                "last_move": last.to_dict() if last else None,
                "history": [move.to_dict() for move in self.history],
                "opponent": self.opponent_color.value if self.opponent_color else None,
                "opponent_pending": self.opponent_pending,
            }

    def _reset_locked(self) -> None:
        self._scheduler.cancel()
        if self._start_placement is None:
            self.board = initial_board()
        else:
            self.board = board_from_placement(self._start_placement)
        self.turn = self._start_turn
        self.history.clear()
        self._clear_selection()
        self.pending_promotion = None
        self.game_over = None
        self._refresh_game_over()
        self._after_state_change()

    def _validate(self, from_pos: Position, to_pos: Position, promotion: Optional[PieceType]) -> None:
        if self.game_over:
            raise GameOverError(self.game_over)
        if not in_bounds(from_pos) or not in_bounds(to_pos):
            raise IllegalMoveError("Square out of bounds")
        piece = self.board[from_pos.row][from_pos.col]
        if piece is None or piece.color is not self.turn:
            raise IllegalMoveError(f"No {self.turn.label.lower()} piece on {from_pos.name}")
        if to_pos not in generate_moves(self.board, from_pos, MoveMode.LEGAL):
            raise IllegalMoveError(f"Illegal move: {from_pos.name}{to_pos.name}")
        if promotion is not None:
            if not self._needs_promotion(from_pos, to_pos):
                raise IllegalMoveError("Only a pawn reaching the last rank can promote")
            if promotion not in PROMOTION_CHOICES:
                raise IllegalMoveError(f"Cannot promote to {promotion.name.lower()}")

    def _needs_promotion(self, from_pos: Position, to_pos: Position) -> bool:
        piece = self.board[from_pos.row][from_pos.col]
        return (
            piece is not None
            and piece.type is PieceType.PAWN
            and to_pos.row == PROMOTION_ROW[piece.color]
        )

    def _select(self, pos: Position) -> list[Position]:
        self.selected = pos
        self.highlights = self.legal_moves(pos)
        self._emit("select")
        return list(self.highlights)

    def _clear_selection(self) -> None:
        self.selected = None
        self.highlights = []

    def _is_opponent_turn(self) -> bool:
        return self.opponent_color is not None and self.turn is self.opponent_color

    def _refresh_game_over(self) -> None:
        if self.game_over:
            return
        message = game_over_message(game_status(self.board, self.turn), self.turn)
        if message:
            self.game_over = message
            logger.info("game over: %s", message)
            self._emit("game_over")

    def _after_state_change(self) -> None:
        # Any state change invalidates a pending opponent move.
        self._scheduler.cancel()
        if self.game_over or not self._is_opponent_turn() or self.opponent_delay is None:
            return
        self._scheduler.arm(self.opponent_delay, self._play_opponent)

    def play_opponent_move(self) -> Optional[Move]:
        """Play the automated side's move now, if it is that side's turn."""
        with self._lock:
            if not self._is_opponent_turn() or self.game_over:
                return None
            choice = self.selector.choose_move(self.board, self.turn)
            if choice is None:
                return None
            return self._commit(*choice, None)

    def _play_opponent(self, generation: int) -> None:
        with self._lock:
            if not self._scheduler.is_current(generation):
                return
            self.play_opponent_move()

    def _emit(self, event: str) -> None:
        if self.on_event is None:
            return
        try:
            self.on_event(event, self)
        except Exception:  # noqa: BLE001
            logger.exception("event listener failed on %s", event)
