from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from snakecalc.api.models import Position, SnakeGame
from snakecalc.core.seeds import SEED_MASK, RandomSeedSource, rehash

logger = logging.getLogger(__name__)

MAX_APPLE_ATTEMPTS = 32
APPLE_FALLBACK = Position(x=0, y=0)


def candidate_for(seed: int, *, width: int, height: int) -> Position:
    return Position(x=seed % width, y=(seed >> 8) % height)


def _colliding_index(pos: Position, body: Sequence[Position]) -> int | None:
    for idx, cell in enumerate(body):
        if cell == pos:
            return idx
    return None


def place_apple(*, seed: int, width: int, height: int, body: Sequence[Position]) -> Position:
    """Pick an apple cell from `seed`, rehashing on every collision with the body.

    Gives up after MAX_APPLE_ATTEMPTS and returns APPLE_FALLBACK, which may sit on
    the snake. That only happens on a nearly full board.
    """

    seed &= SEED_MASK
    for _ in range(MAX_APPLE_ATTEMPTS):
        pos = candidate_for(seed, width=width, height=height)
        hit = _colliding_index(pos, body)
        if hit is None:
            return pos
        seed = rehash(seed, hit)

    logger.warning(
        "apple placement exhausted %d attempts on %dx%d board (body=%d); using fallback %s",
        MAX_APPLE_ATTEMPTS,
        width,
        height,
        len(body),
        (APPLE_FALLBACK.x, APPLE_FALLBACK.y),
    )
    return APPLE_FALLBACK


@dataclass(frozen=True, slots=True)
class ApplePlacer:
    """Binds a seed source to one player so the engine can ask for apples."""

    seeds: RandomSeedSource
    player_id: str

    def spawn(self, game: SnakeGame) -> Position:
        seed = self.seeds.seed(player_id=self.player_id, score=game.score, body_length=len(game.body))
        return place_apple(seed=seed, width=game.width, height=game.height, body=game.body)
