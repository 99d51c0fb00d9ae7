from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Sequence

from fastapi import WebSocket

from snakecalc.core.events import GameEvent

logger = logging.getLogger(__name__)


class PlayerWebSocketHub:
    """Live feed of committed game events, keyed by player_id.

    Sockets subscribe with `connect(player_id, websocket)`; the routes push each
    action's events with `broadcast_events` once the action has committed. The
    Redis event stream stays the durable record. This hub only reaches sockets
    held by the current process.
    """

    def __init__(self) -> None:
        self._by_player: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def connect(self, player_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._by_player[player_id].add(websocket)

    async def disconnect(self, player_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            self._forget(player_id, [websocket])

    async def broadcast_events(self, player_id: str, events: Sequence[GameEvent]) -> None:
        """Send events to the player's sockets in commit order."""

        for event in events:
            await self.broadcast(player_id, event.as_message())

    async def broadcast(self, player_id: str, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._by_player.get(player_id, ()))

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            logger.debug("player=%s dropping %d dead socket(s)", player_id, len(dead))
            async with self._lock:
                self._forget(player_id, dead)

    def _forget(self, player_id: str, sockets: Sequence[WebSocket]) -> None:
        # Caller holds self._lock.
        conns = self._by_player.get(player_id)
        if conns is None:
            return
        for ws in sockets:
            conns.discard(ws)
        if not conns:
            del self._by_player[player_id]

    def connection_count(self, player_id: str) -> int:
        return len(self._by_player.get(player_id, ()))

    def tracked_players(self) -> list[str]:
        return sorted(self._by_player)


hub = PlayerWebSocketHub()
