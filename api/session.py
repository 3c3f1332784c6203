"""In-memory game sessions and their live-update subscribers."""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from typing import Any, Optional

from stackchess.constants import Color
from stackchess.game import GameState

logger = logging.getLogger(__name__)


class GameSession:
    """A game plus the WebSocket queues that want its updates."""

    def __init__(
        self,
        game_id: str,
        opponent_color: Optional[Color],
        opponent_delay: float,
        placement: Optional[str] = None,
        turn: Color = Color.WHITE,
    ) -> None:
        self.game_id = game_id
        self._lock = threading.RLock()
        self._subscribers: list[tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = []
        self.game = GameState(
            opponent_color=opponent_color,
            opponent_delay=opponent_delay,
            on_event=self._publish,
            placement=placement,
            turn=turn,
        )

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        with self._lock:
            self._subscribers.append((asyncio.get_running_loop(), queue))
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        with self._lock:
            self._subscribers = [item for item in self._subscribers if item[1] is not queue]

    def _publish(self, event: str, game: GameState) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            return
        message = {"type": event, "game_id": self.game_id, "state": game.snapshot()}
        for loop, queue in subscribers:
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(queue.put_nowait, message)

    def close(self) -> None:
        self.game.close()


class InMemorySessionStore:
    """Thread-safe in-memory store of game sessions keyed by ``game_id``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: dict[str, GameSession] = {}

    def create(
        self,
        opponent_color: Optional[Color],
        opponent_delay: float,
        placement: Optional[str] = None,
        turn: Color = Color.WHITE,
    ) -> GameSession:
        game_id = str(uuid.uuid4())
        session = GameSession(game_id, opponent_color, opponent_delay, placement, turn)
        with self._lock:
            self._sessions[game_id] = session
        logger.info("created game %s", game_id)
        return session

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_id)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(game_id, None)
        if session is None:
            return False
        session.close()
        logger.info("deleted game %s", game_id)
        return True

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
