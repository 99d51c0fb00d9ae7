from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

import redis

from snakecalc.api.models import (
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    CalculateRequest,
    Direction,
    MoveRequest,
    Operation,
    Position,
    SnakeGame,
    StartGameRequest,
)
from snakecalc.core.apples import ApplePlacer
from snakecalc.core.calculator import apply_boost, evaluate
from snakecalc.core.engine import StepResult, step
from snakecalc.core.events import GameEvent
from snakecalc.core.seeds import RandomSeedSource
from snakecalc.errors import GameNotActiveError, InvalidBoardSizeError
from snakecalc.fsm import GameFSM
from snakecalc.game_store import get_game, save_game
from snakecalc.lock import player_lock
from snakecalc.streams import publish_events

logger = logging.getLogger(__name__)

ActionName = Literal["start", "move", "boost"]

INITIAL_SNAKE_LENGTH = 3


@dataclass(frozen=True, slots=True)
class ActionResult:
    game: SnakeGame
    events: list[GameEvent]
    event_ids: list[str]


@dataclass(frozen=True, slots=True)
class MoveOutcome(ActionResult):
    step: StepResult


@dataclass(frozen=True, slots=True)
class BoostOutcome(ActionResult):
    result: int
    bonus: int


def validate_board_size(*, width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if value < MIN_BOARD_SIZE or value > MAX_BOARD_SIZE:
            raise InvalidBoardSizeError(
                f"{name} must be between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE} (got {value})"
            )


def initial_body(*, width: int, height: int) -> list[Position]:
    # width >= MIN_BOARD_SIZE keeps cx - 1 on the board.
    cx, cy = width // 2, height // 2
    return [Position(x=cx - 1 + i, y=cy) for i in range(INITIAL_SNAKE_LENGTH)]


def _apple_event(*, player_id: str, apple: Position) -> GameEvent:
    return GameEvent.now(type="APPLE_SPAWNED", player_id=player_id, payload={"x": apple.x, "y": apple.y})


def start_game(*, r: redis.Redis, player_id: str, width: int, height: int, seeds: RandomSeedSource) -> ActionResult:
    """Start (or restart) a player's board.

    Any existing record is discarded, running or not. Board size is checked before
    anything is read or written.
    """

    validate_board_size(width=width, height=height)

    with player_lock(r=r, player_id=player_id):
        previous = get_game(r=r, player_id=player_id)
        fsm = GameFSM(previous)
        if fsm.is_running:
            logger.info("player=%s restarting a running game (score=%d)", player_id, previous.score)
        fsm.started()

        game = SnakeGame(
            width=width,
            height=height,
            direction=Direction.right,
            body=initial_body(width=width, height=height),
            score=0,
            active=fsm.is_running,
        )
        game.apple = ApplePlacer(seeds=seeds, player_id=player_id).spawn(game)

        save_game(r=r, player_id=player_id, game=game)

        events = [
            GameEvent.now(type="GAME_STARTED", player_id=player_id, payload={"width": width, "height": height}),
            _apple_event(player_id=player_id, apple=game.apple),
        ]
        ids = publish_events(r=r, events=events)

    logger.info("player=%s started %dx%d game, apple=(%d,%d)", player_id, width, height, game.apple.x, game.apple.y)
    return ActionResult(game=game, events=events, event_ids=ids)


def move(*, r: redis.Redis, player_id: str, direction: Direction, seeds: RandomSeedSource) -> MoveOutcome:
    """Advance a player's running game by one tick.

    The record loaded from the store is a private copy; it is only written back
    once the step has fully succeeded.
    """

    with player_lock(r=r, player_id=player_id):
        game = get_game(r=r, player_id=player_id)
        fsm = GameFSM(game)
        if not fsm.is_running:
            raise GameNotActiveError("Game is not active")

        result = step(game, direction, placer=ApplePlacer(seeds=seeds, player_id=player_id))

        if not result.alive:
            fsm.died()
            fsm.sync_phase_to_model()

        save_game(r=r, player_id=player_id, game=game)

        events: list[GameEvent] = []
        if result.spawned_apple is not None:
            events.append(_apple_event(player_id=player_id, apple=result.spawned_apple))
        if result.alive:
            events.append(
                GameEvent.now(
                    type="GAME_UPDATED",
                    player_id=player_id,
                    payload={
                        "head_x": result.new_head.x,
                        "head_y": result.new_head.y,
                        "score": game.score,
                        "ate_apple": result.ate_apple,
                    },
                )
            )
        else:
            events.append(
                GameEvent.now(
                    type="GAME_OVER",
                    player_id=player_id,
                    payload={"final_score": game.score, "head_x": result.new_head.x, "head_y": result.new_head.y},
                )
            )
        ids = publish_events(r=r, events=events)

    if not result.alive:
        logger.info("player=%s snake died at (%d,%d) with score %d", player_id, result.new_head.x, result.new_head.y, game.score)
    return MoveOutcome(game=game, events=events, event_ids=ids, step=result)


def calculate(left: int, right: int, op: Operation) -> int:
    """Pure calculator; never touches any player's record."""

    return evaluate(left, right, op)


def calculate_and_boost(*, r: redis.Redis, player_id: str, left: int, right: int, op: Operation) -> BoostOutcome:
    with player_lock(r=r, player_id=player_id):
        game = get_game(r=r, player_id=player_id)
        result, bonus = apply_boost(game, left, right, op)

        # Nothing to write for a zero bonus; this also avoids creating records for
        # players who never started a game.
        if bonus:
            save_game(r=r, player_id=player_id, game=game)

        # Published for every boost, bonus or not, so the stream records each calculation.
        events = [
            GameEvent.now(
                type="CALCULATOR_USED",
                player_id=player_id,
                payload={"left": left, "right": right, "op": op.value, "result": result, "bonus": bonus},
            )
        ]
        ids = publish_events(r=r, events=events)

    if bonus:
        logger.info("player=%s calculator bonus +%d (score=%d)", player_id, bonus, game.score)
    return BoostOutcome(game=game, events=events, event_ids=ids, result=result, bonus=bonus)


def get_game_meta(*, r: redis.Redis, player_id: str) -> SnakeGame:
    return get_game(r=r, player_id=player_id)


def get_body(*, r: redis.Redis, player_id: str) -> list[Position]:
    return list(get_game(r=r, player_id=player_id).body)


def dispatch_action(
    *,
    r: redis.Redis,
    player_id: str,
    action: ActionName,
    payload: dict[str, Any],
    seeds: RandomSeedSource,
) -> ActionResult:
    """Single entry point for scripted players and the generic HTTP route.

    Payloads are validated with the same request models as the typed routes;
    pydantic's ValidationError is a ValueError, like every other rejection here.
    """

    if action == "start":
        req = StartGameRequest.model_validate(payload)
        return start_game(r=r, player_id=player_id, width=req.width, height=req.height, seeds=seeds)
    if action == "move":
        mv = MoveRequest.model_validate(payload)
        return move(r=r, player_id=player_id, direction=mv.direction, seeds=seeds)
    if action == "boost":
        calc = CalculateRequest.model_validate(payload)
        return calculate_and_boost(r=r, player_id=player_id, left=calc.left, right=calc.right, op=calc.op)
    raise ValueError(f"Unknown action: {action}")
