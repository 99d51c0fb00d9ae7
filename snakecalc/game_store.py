from __future__ import annotations

import redis

from snakecalc.api.models import SnakeGame

GAME_KEY_PREFIX = "snakecalc:game:"  # + {player_id}


def _game_key(player_id: str) -> str:
    return f"{GAME_KEY_PREFIX}{player_id}"


def get_game(*, r: redis.Redis, player_id: str) -> SnakeGame:
    """Load a player's record, or the zero record if they never started one."""

    raw = r.get(_game_key(player_id))
    if not raw:
        return SnakeGame()
    return SnakeGame.model_validate_json(raw)


def save_game(*, r: redis.Redis, player_id: str, game: SnakeGame) -> None:
    r.set(_game_key(player_id), game.model_dump_json())
