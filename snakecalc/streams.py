from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import cast

import redis

from snakecalc.config import settings_from_env
from snakecalc.core.events import GameEvent


@dataclass(frozen=True, slots=True)
class EventStream:
    player_id: str

    @property
    def key(self) -> str:
        return f"events:{self.player_id}"


def publish_events(*, r: redis.Redis, events: Sequence[GameEvent], maxlen: int | None = None) -> list[str]:
    """Append events to their players' streams, in order.

    Each stream is trimmed to roughly `maxlen` entries (oldest first); Redis may
    keep a few more than that with approximate trimming.
    """

    if maxlen is None:
        maxlen = settings_from_env().event_stream_maxlen

    ids: list[str] = []
    for event in events:
        stream_id = r.xadd(
            EventStream(player_id=event.player_id).key,
            event.as_fields(),
            maxlen=maxlen,
            approximate=True,
        )
        ids.append(cast(str, stream_id))
    return ids


def read_events(*, r: redis.Redis, player_id: str, count: int = 20, start: str = "-", end: str = "+") -> list[tuple[str, dict[str, str]]]:
    return r.xrange(EventStream(player_id=player_id).key, min=start, max=end, count=count)
