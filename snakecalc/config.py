from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str
    lock_ttl_ms: int
    log_level: str
    event_stream_maxlen: int


def settings_from_env() -> Settings:
    return Settings(
        redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
        lock_ttl_ms=int(os.environ.get("SNAKECALC_LOCK_TTL_MS", "5000")),
        log_level=os.environ.get("SNAKECALC_LOG_LEVEL", "INFO").upper(),
        event_stream_maxlen=int(os.environ.get("SNAKECALC_EVENT_STREAM_MAXLEN", "1000")),
    )
