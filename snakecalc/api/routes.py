from __future__ import annotations

from typing import Any

import redis
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from snakecalc.actions import (
    ActionName,
    calculate,
    calculate_and_boost,
    dispatch_action,
    get_body,
    get_game_meta,
    move,
    start_game,
)
from snakecalc.api.deps import get_redis, get_seed_source
from snakecalc.api.models import (
    BodyResponse,
    BoostResponse,
    CalculateRequest,
    CalculateResponse,
    GameMeta,
    MoveRequest,
    MoveResult,
    StartGameRequest,
)
from snakecalc.core.seeds import RandomSeedSource
from snakecalc.errors import GameNotActiveError, PlayerBusyError
from snakecalc.streams import EventStream, read_events
from snakecalc.websocket_hub import hub

router = APIRouter()


def _http_error(e: ValueError) -> HTTPException:
    if isinstance(e, (GameNotActiveError, PlayerBusyError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.websocket("/ws/player/{player_id}")
async def player_updates_ws(websocket: WebSocket, player_id: str) -> None:
    await hub.connect(player_id, websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(player_id, websocket)
    except Exception:
        await hub.disconnect(player_id, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/players/{player_id}/game", response_model=GameMeta, status_code=status.HTTP_201_CREATED)
async def start_game_route(
    player_id: str,
    payload: StartGameRequest,
    r: redis.Redis = Depends(get_redis),
    seeds: RandomSeedSource = Depends(get_seed_source),
) -> GameMeta:
    try:
        result = start_game(r=r, player_id=player_id, width=payload.width, height=payload.height, seeds=seeds)
    except ValueError as e:
        raise _http_error(e) from e

    await hub.broadcast_events(player_id, result.events)
    return GameMeta.from_game(result.game)


@router.get("/players/{player_id}/game", response_model=GameMeta)
async def get_game_meta_route(player_id: str, r: redis.Redis = Depends(get_redis)) -> GameMeta:
    return GameMeta.from_game(get_game_meta(r=r, player_id=player_id))


@router.get("/players/{player_id}/game/body", response_model=BodyResponse)
async def get_body_route(player_id: str, r: redis.Redis = Depends(get_redis)) -> BodyResponse:
    return BodyResponse(player_id=player_id, body=get_body(r=r, player_id=player_id))


@router.post("/players/{player_id}/game/move", response_model=MoveResult)
async def move_route(
    player_id: str,
    payload: MoveRequest,
    r: redis.Redis = Depends(get_redis),
    seeds: RandomSeedSource = Depends(get_seed_source),
) -> MoveResult:
    try:
        result = move(r=r, player_id=player_id, direction=payload.direction, seeds=seeds)
    except ValueError as e:
        raise _http_error(e) from e

    await hub.broadcast_events(player_id, result.events)
    return MoveResult(alive=result.step.alive, new_head=result.step.new_head, ate_apple=result.step.ate_apple)


@router.post("/players/{player_id}/calculate", response_model=BoostResponse)
async def calculate_and_boost_route(
    player_id: str,
    payload: CalculateRequest,
    r: redis.Redis = Depends(get_redis),
) -> BoostResponse:
    try:
        result = calculate_and_boost(r=r, player_id=player_id, left=payload.left, right=payload.right, op=payload.op)
    except ValueError as e:
        raise _http_error(e) from e

    await hub.broadcast_events(player_id, result.events)
    return BoostResponse(result=result.result, bonus=result.bonus)


@router.post("/calculate", response_model=CalculateResponse)
async def calculate_route(payload: CalculateRequest) -> CalculateResponse:
    try:
        value = calculate(payload.left, payload.right, payload.op)
    except ValueError as e:
        raise _http_error(e) from e
    return CalculateResponse(result=value)


@router.post("/players/{player_id}/actions/{action}", response_model=GameMeta)
async def generic_action_route(
    player_id: str,
    action: str,
    body: dict[str, Any],
    r: redis.Redis = Depends(get_redis),
    seeds: RandomSeedSource = Depends(get_seed_source),
) -> GameMeta:
    try:
        if action not in {"start", "move", "boost"}:
            raise ValueError(f"Unknown action: {action}")
        act: ActionName = action  # type: ignore[assignment]
        result = dispatch_action(r=r, player_id=player_id, action=act, payload=body, seeds=seeds)
    except ValueError as e:
        raise _http_error(e) from e

    await hub.broadcast_events(player_id, result.events)
    return GameMeta.from_game(result.game)


@router.get("/players/{player_id}/events")
async def get_player_events_route(
    player_id: str,
    count: int = 20,
    start: str = "-",
    end: str = "+",
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    """Debug endpoint: read a player's event stream.

    Intended for local/dev testing when redis-cli isn't available.
    """

    if count < 1 or count > 200:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 200")

    try:
        entries = read_events(r=r, player_id=player_id, count=count, start=start, end=end)
    except redis.ResponseError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    messages = [{"id": mid, "fields": fields} for mid, fields in entries]
    return {"player_id": player_id, "stream": EventStream(player_id=player_id).key, "messages": messages}
