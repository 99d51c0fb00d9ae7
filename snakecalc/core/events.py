from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

EventType = Literal[
    "GAME_STARTED",
    "APPLE_SPAWNED",
    "GAME_UPDATED",
    "GAME_OVER",
    "CALCULATOR_USED",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    type: EventType
    player_id: str
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, player_id: str, payload: dict[str, Any]) -> "GameEvent":
        return GameEvent(type=type, player_id=player_id, payload=payload, ts=datetime.now(timezone.utc))

    def as_fields(self) -> dict[str, str]:
        """Flat string fields for a Redis Stream entry."""

        fields = {"type": self.type, "player_id": self.player_id, "ts": self.ts.isoformat()}
        for k, v in self.payload.items():
            fields[k] = str(v).lower() if isinstance(v, bool) else str(v)
        return fields

    def as_message(self) -> dict[str, object]:
        return {"type": self.type, "player_id": self.player_id, **self.payload, "ts": self.ts.isoformat()}
