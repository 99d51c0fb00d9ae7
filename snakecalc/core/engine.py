from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from snakecalc.api.models import Direction, Position, SnakeGame, is_opposite
from snakecalc.errors import EmptySnakeError


class AppleSpawner(Protocol):
    def spawn(self, game: SnakeGame) -> Position:  # pragma: no cover
        ...


@dataclass(frozen=True, slots=True)
class StepResult:
    alive: bool
    new_head: Position
    ate_apple: bool
    # Set only when the step consumed an apple and a replacement was placed.
    spawned_apple: Position | None = None


def _hits_wall(head: Position, direction: Direction, *, width: int, height: int) -> bool:
    if direction == Direction.up:
        return head.y == 0
    if direction == Direction.down:
        return head.y + 1 == height
    if direction == Direction.left:
        return head.x == 0
    return head.x + 1 == width


def _advance(head: Position, direction: Direction) -> Position:
    if direction == Direction.up:
        return Position(x=head.x, y=head.y - 1)
    if direction == Direction.down:
        return Position(x=head.x, y=head.y + 1)
    if direction == Direction.left:
        return Position(x=head.x - 1, y=head.y)
    return Position(x=head.x + 1, y=head.y)


def step(game: SnakeGame, requested: Direction, *, placer: AppleSpawner) -> StepResult:
    """Advance `game` by one tick in place.

    Death paths leave `body`, `apple` and `score` untouched but keep the direction
    update. Flipping `active` is the caller's job.
    """

    if not game.body:
        raise EmptySnakeError("Snake has no segments")

    if not is_opposite(requested, game.direction):
        game.direction = requested

    head = game.head
    if _hits_wall(head, game.direction, width=game.width, height=game.height):
        # No off-board coordinate exists, so report the clamped head.
        return StepResult(alive=False, new_head=head, ate_apple=False)

    new_head = _advance(head, game.direction)
    # The tail has not moved yet, so it still counts.
    if new_head in game.body:
        return StepResult(alive=False, new_head=new_head, ate_apple=False)

    game.body.append(new_head)

    if new_head == game.apple:
        game.score += 1
        game.apple = placer.spawn(game)
        return StepResult(alive=True, new_head=new_head, ate_apple=True, spawned_apple=game.apple)

    game.body.pop(0)
    return StepResult(alive=True, new_head=new_head, ate_apple=False)
