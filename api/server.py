"""FastAPI server exposing game sessions and stateless rules endpoints."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from stackchess.board import Board, Position, board_from_placement
from stackchess.constants import START_PLACEMENT, Color, PieceType, parse_square
from stackchess.movegen import legal_moves_for
from stackchess.perft import perft, perft_divide
from stackchess.status import game_status

from .config import Settings
from .errors import install_error_handlers
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore
from .websocket import router as websocket_router

logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    opponent_color: Optional[Color] = None
    vs_human: bool = Field(default=False)
    opponent_delay_ms: Optional[int] = Field(default=None, ge=0, le=60_000)
    placement: Optional[str] = None
    turn: Color = Field(default=Color.WHITE)


class SelectRequest(BaseModel):
    row: int
    col: int


class MoveRequest(BaseModel):
    from_square: str = Field(min_length=2, max_length=2)
    to_square: str = Field(min_length=2, max_length=2)
    promotion: Optional[PieceType] = None


class PromotionRequest(BaseModel):
    piece: PieceType


class PositionRequest(BaseModel):
    placement: str = Field(default=START_PLACEMENT)
    turn: Color = Field(default=Color.WHITE)


class PerftRequest(PositionRequest):
    depth: int = Field(default=2, ge=1, le=4)
    divide: bool = Field(default=False)


def _board_from_placement(placement: str) -> Board:
    try:
        return board_from_placement(placement)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _square(name: str) -> Position:
    try:
        return Position(*parse_square(name))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _require_session(request: Request, game_id: str) -> GameSession:
    session = request.app.state.store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _session_payload(session: GameSession) -> dict:
    payload = session.game.snapshot()
    payload["game_id"] = session.game_id
    return payload


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings if settings is not None else Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    store = InMemorySessionStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.close_all()

    app = FastAPI(title="Stack Chess API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDLoggingMiddleware)
    install_error_handlers(app)
    app.include_router(websocket_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/games")
    def create_game(payload: Optional[CreateGameRequest] = None) -> dict:
        payload = payload or CreateGameRequest()
        opponent = None if payload.vs_human else (payload.opponent_color or settings.opponent_color)
        delay = settings.opponent_delay if payload.opponent_delay_ms is None else payload.opponent_delay_ms / 1000.0
        if payload.placement is not None:
            _board_from_placement(payload.placement)
        session = store.create(opponent, delay, payload.placement, payload.turn)
        return _session_payload(session)

    @app.get("/games/{game_id}")
    def get_game(game_id: str, request: Request) -> dict:
        return _session_payload(_require_session(request, game_id))

    @app.delete("/games/{game_id}")
    def delete_game(game_id: str) -> dict:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"deleted": game_id}

    @app.post("/games/{game_id}/select")
    def select(game_id: str, payload: SelectRequest, request: Request) -> dict:
        session = _require_session(request, game_id)
        session.game.select_square(payload.row, payload.col)
        return _session_payload(session)

    @app.post("/games/{game_id}/move")
    def move(game_id: str, payload: MoveRequest, request: Request) -> dict:
        session = _require_session(request, game_id)
        played = session.game.apply_move(
            _square(payload.from_square),
            _square(payload.to_square),
            payload.promotion,
        )
        response = _session_payload(session)
        response["played"] = played.to_dict()
        return response

    @app.post("/games/{game_id}/promotion")
    def promote(game_id: str, payload: PromotionRequest, request: Request) -> dict:
        session = _require_session(request, game_id)
        session.game.choose_promotion(payload.piece)
        return _session_payload(session)

    @app.delete("/games/{game_id}/promotion")
    def cancel_promotion(game_id: str, request: Request) -> dict:
        session = _require_session(request, game_id)
        session.game.cancel_promotion()
        return _session_payload(session)

    @app.post("/games/{game_id}/undo")
    def undo(game_id: str, request: Request) -> dict:
        session = _require_session(request, game_id)
        undone = session.game.undo()
        response = _session_payload(session)
        response["undone"] = undone.to_dict() if undone else None
        return response

    @app.post("/games/{game_id}/reset")
    def reset(game_id: str, request: Request) -> dict:
        session = _require_session(request, game_id)
        session.game.reset()
        return _session_payload(session)

    @app.post("/legal-moves")
    def legal_moves(payload: PositionRequest) -> dict:
        board = _board_from_placement(payload.placement)
        moves = legal_moves_for(board, payload.turn)
        return {
            "placement": payload.placement,
            "turn": payload.turn.value,
            "legal_moves": [f"{src.name}{dst.name}" for src, dst in moves],
            "status": game_status(board, payload.turn).value,
        }

    @app.post("/perft")
    def run_perft(payload: PerftRequest) -> dict:
        board = _board_from_placement(payload.placement)
        if payload.divide:
            return {"divide": perft_divide(board, payload.turn, payload.depth)}
        return {"nodes": perft(board, payload.turn, payload.depth)}

    return app


app = create_app()
