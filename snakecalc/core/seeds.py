from __future__ import annotations

import hashlib
import random
import time
from collections.abc import Iterable
from typing import Protocol

SEED_BITS = 256
SEED_MASK = (1 << SEED_BITS) - 1


def _word(value: int) -> bytes:
    return (value & SEED_MASK).to_bytes(SEED_BITS // 8, "big")


def rehash(seed: int, index: int) -> int:
    """Derive the next seed from a previous one and a body index.

    SHA-256 over the two values packed as 32-byte big-endian words.
    """

    digest = hashlib.sha256(_word(seed) + _word(index)).digest()
    return int.from_bytes(digest, "big")


class RandomSeedSource(Protocol):
    def seed(self, *, player_id: str, score: int, body_length: int) -> int:  # pragma: no cover
        ...


class SystemSeedSource:
    """Seeds that a player cannot predict ahead of time.

    Mixes OS entropy with the clock and the caller's game context. Not meant to be
    cryptographically strong.
    """

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def seed(self, *, player_id: str, score: int, body_length: int) -> int:
        material = b"".join(
            [
                _word(self._rng.getrandbits(SEED_BITS)),
                _word(time.time_ns()),
                player_id.encode("utf-8"),
                _word(score),
                _word(body_length),
            ]
        )
        return int.from_bytes(hashlib.sha256(material).digest(), "big")


class SequenceSeedSource:
    """Hands out a fixed list of seeds in order, then keeps repeating the last one.

    Used by tests and for replaying a recorded game.
    """

    def __init__(self, seeds: Iterable[int]) -> None:
        self._seeds = [s & SEED_MASK for s in seeds]
        if not self._seeds:
            raise ValueError("SequenceSeedSource needs at least one seed")
        self._next = 0
        self.calls: list[tuple[str, int, int]] = []

    def seed(self, *, player_id: str, score: int, body_length: int) -> int:
        self.calls.append((player_id, score, body_length))
        idx = min(self._next, len(self._seeds) - 1)
        self._next += 1
        return self._seeds[idx]
