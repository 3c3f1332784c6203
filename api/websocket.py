"""WebSocket route streaming live game-state updates."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from stackchess.errors import ChessError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _handle_command(websocket: WebSocket, session, payload: dict) -> None:
    game = session.game
    action = payload.get("action")
    # Game methods take the game lock, which the opponent timer thread may hold.
    try:
        if action == "select":
            await run_in_threadpool(game.select_square, int(payload["row"]), int(payload["col"]))
        elif action == "undo":
            await run_in_threadpool(game.undo)
        elif action == "reset":
            await run_in_threadpool(game.reset)
        elif action == "state":
            state = await run_in_threadpool(game.snapshot)
            await websocket.send_json({"type": "state", "game_id": session.game_id, "state": state})
        else:
            await websocket.send_json({"type": "error", "message": f"Unknown action: {action}"})
    except (ChessError, KeyError, TypeError, ValueError) as exc:
        await websocket.send_json({"type": "error", "message": str(exc)})


@router.websocket("/ws/games/{game_id}")
async def game_websocket(websocket: WebSocket, game_id: str) -> None:
    session = websocket.app.state.store.get(game_id)
    if session is None:
        await websocket.close(code=4404)
        return

    await websocket.accept()
    queue = session.subscribe()
    state = await run_in_threadpool(session.game.snapshot)
    await websocket.send_json({"type": "state", "game_id": game_id, "state": state})

    async def forward_updates() -> None:
        while True:
            message = await queue.get()
            await websocket.send_json(message)

    forwarder = asyncio.create_task(forward_updates())
    try:
        while True:
            payload = await websocket.receive_json()
            await _handle_command(websocket, session, payload)
    except WebSocketDisconnect:
        logger.debug("websocket for %s disconnected", game_id)
    finally:
        session.unsubscribe(queue)
        forwarder.cancel()
