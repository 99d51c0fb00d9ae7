from __future__ import annotations

import logging
from contextlib import contextmanager

import redis
from redis.exceptions import LockNotOwnedError

from snakecalc.config import settings_from_env
from snakecalc.errors import PlayerBusyError

logger = logging.getLogger(__name__)


def lock_key(player_id: str) -> str:
    return f"lock:player:{player_id}"


@contextmanager
def player_lock(*, r: redis.Redis, player_id: str, ttl_ms: int | None = None):
    """Best-effort per-player lock.

    Every mutation of one player's record runs inside this, so two requests for the
    same player never interleave. Contention fails fast; there is no waiting.

    The lock carries a random token and release only deletes the key while that
    token is still stored, so a holder whose TTL ran out cannot free a lock that
    another request has since taken.
    """

    if ttl_ms is None:
        ttl_ms = settings_from_env().lock_ttl_ms

    lock = r.lock(lock_key(player_id), timeout=ttl_ms / 1000, blocking=False)
    if not lock.acquire():
        raise PlayerBusyError("Player is busy")
    try:
        yield
    finally:
        try:
            lock.release()
        except LockNotOwnedError:
            logger.warning("player=%s lock expired after %dms before release", player_id, ttl_ms)
