from __future__ import annotations

import pytest

from snakecalc.api.models import Direction, Position, SnakeGame, is_opposite
from snakecalc.core.engine import step
from snakecalc.errors import EmptySnakeError


class _StubPlacer:
    def __init__(self, apple: Position) -> None:
        self.apple = apple
        self.seen: list[tuple[int, int]] = []

    def spawn(self, game: SnakeGame) -> Position:
        self.seen.append((game.score, len(game.body)))
        return self.apple


def _p(x: int, y: int) -> Position:
    return Position(x=x, y=y)


def _game(
    cells: list[tuple[int, int]],
    *,
    direction: Direction = Direction.right,
    apple: tuple[int, int] = (9, 9),
    width: int = 10,
    height: int = 10,
) -> SnakeGame:
    return SnakeGame(
        width=width,
        height=height,
        direction=direction,
        body=[_p(x, y) for x, y in cells],
        apple=_p(*apple),
        score=0,
        active=True,
    )


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        (Direction.up, Direction.down, True),
        (Direction.down, Direction.up, True),
        (Direction.left, Direction.right, True),
        (Direction.right, Direction.left, True),
        (Direction.up, Direction.left, False),
        (Direction.right, Direction.down, False),
        (Direction.up, Direction.up, False),
    ],
)
def test_is_opposite(a: Direction, b: Direction, expected: bool) -> None:
    assert is_opposite(a, b) is expected
    assert is_opposite(b, a) is expected


def test_reverse_request_is_ignored() -> None:
    game = _game([(3, 5), (4, 5), (5, 5)])
    res = step(game, Direction.left, placer=_StubPlacer(_p(0, 0)))

    assert game.direction == Direction.right
    assert res.alive is True
    assert res.new_head == _p(6, 5)
    assert game.body == [_p(4, 5), _p(5, 5), _p(6, 5)]


@pytest.mark.parametrize(
    ("requested", "expected_head"),
    [
        (Direction.up, (5, 4)),
        (Direction.down, (5, 6)),
        (Direction.right, (6, 5)),
    ],
)
def test_turns_and_straight_moves(requested: Direction, expected_head: tuple[int, int]) -> None:
    game = _game([(3, 5), (4, 5), (5, 5)])
    res = step(game, requested, placer=_StubPlacer(_p(0, 0)))

    assert game.direction == requested
    assert res.alive is True
    assert res.ate_apple is False
    assert res.new_head == _p(*expected_head)
    assert game.head == _p(*expected_head)


def test_plain_step_drops_tail_and_keeps_length() -> None:
    game = _game([(2, 2), (3, 2), (4, 2), (4, 3)], direction=Direction.down)
    step(game, Direction.down, placer=_StubPlacer(_p(0, 0)))

    assert game.body == [_p(3, 2), _p(4, 2), _p(4, 3), _p(4, 4)]
    assert game.score == 0
    assert game.apple == _p(9, 9)


def test_wall_death_on_right_edge_leaves_body_alone() -> None:
    game = _game([(7, 5), (8, 5), (9, 5)])
    before = list(game.body)

    res = step(game, Direction.right, placer=_StubPlacer(_p(0, 0)))

    assert res.alive is False
    assert res.ate_apple is False
    assert res.new_head == _p(9, 5)
    assert game.body == before
    assert game.score == 0


@pytest.mark.parametrize(
    ("cells", "heading", "requested"),
    [
        ([(5, 2), (5, 1), (5, 0)], Direction.up, Direction.up),
        ([(5, 7), (5, 8), (5, 9)], Direction.down, Direction.down),
        ([(2, 5), (1, 5), (0, 5)], Direction.left, Direction.left),
        # Turning into the wall counts too.
        ([(3, 0), (4, 0), (5, 0)], Direction.right, Direction.up),
    ],
)
def test_wall_death_each_edge(cells: list[tuple[int, int]], heading: Direction, requested: Direction) -> None:
    game = _game(cells, direction=heading)
    before = list(game.body)

    res = step(game, requested, placer=_StubPlacer(_p(0, 0)))

    assert res.alive is False
    assert res.new_head == before[-1]
    assert game.body == before
    # The turn itself still sticks.
    assert game.direction == requested


def test_self_collision_with_inner_segment() -> None:
    # Head at (3, 3) heading left; turning up runs into (3, 2), the second segment.
    game = _game([(2, 2), (3, 2), (4, 2), (4, 3), (3, 3)], direction=Direction.left)
    before = list(game.body)

    res = step(game, Direction.up, placer=_StubPlacer(_p(0, 0)))

    assert res.alive is False
    assert res.new_head == _p(3, 2)
    assert res.ate_apple is False
    assert game.body == before


def test_moving_onto_current_tail_is_fatal() -> None:
    # The tail has not moved yet when the collision check runs.
    game = _game([(4, 4), (5, 4), (5, 5), (4, 5)], direction=Direction.left)
    before = list(game.body)

    res = step(game, Direction.up, placer=_StubPlacer(_p(0, 0)))

    assert res.alive is False
    assert res.new_head == _p(4, 4)
    assert game.body == before


def test_eating_apple_grows_and_respawns() -> None:
    game = _game([(3, 5), (4, 5), (5, 5)], apple=(6, 5))
    placer = _StubPlacer(_p(1, 1))

    res = step(game, Direction.right, placer=placer)

    assert res.alive is True
    assert res.ate_apple is True
    assert res.spawned_apple == _p(1, 1)
    assert game.body == [_p(3, 5), _p(4, 5), _p(5, 5), _p(6, 5)]
    assert game.score == 1
    assert game.apple == _p(1, 1)
    # Respawn happens after the score bump and the new head.
    assert placer.seen == [(1, 4)]


def test_empty_snake_is_rejected() -> None:
    game = _game([])
    with pytest.raises(EmptySnakeError):
        step(game, Direction.up, placer=_StubPlacer(_p(0, 0)))
