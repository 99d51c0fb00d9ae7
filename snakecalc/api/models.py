from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

MIN_BOARD_SIZE = 4
MAX_BOARD_SIZE = 32


class Direction(StrEnum):
    # Declaration order matters: `up` is the zero value of a never-started record.
    up = "up"
    down = "down"
    left = "left"
    right = "right"


_OPPOSITES: dict[Direction, Direction] = {
    Direction.up: Direction.down,
    Direction.down: Direction.up,
    Direction.left: Direction.right,
    Direction.right: Direction.left,
}


def is_opposite(a: Direction, b: Direction) -> bool:
    return _OPPOSITES[a] == b


class Operation(StrEnum):
    add = "add"
    subtract = "subtract"
    multiply = "multiply"
    divide = "divide"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


class SnakeGame(BaseModel):
    """One player's board.

    The default-constructed value doubles as the record returned for identities
    that never started a game.
    """

    width: int = 0
    height: int = 0
    direction: Direction = Direction.up

    # Tail first, head last.
    body: list[Position] = Field(default_factory=list)

    apple: Position = Field(default_factory=lambda: Position(x=0, y=0))
    score: int = Field(0, ge=0)
    active: bool = False

    @property
    def head(self) -> Position:
        return self.body[-1]


class StartGameRequest(BaseModel):
    # u8 on the wire; the board-size rule itself is enforced by the lifecycle.
    width: int = Field(..., ge=0, le=255)
    height: int = Field(..., ge=0, le=255)


class MoveRequest(BaseModel):
    direction: Direction


class CalculateRequest(BaseModel):
    left: int
    right: int
    op: Operation


class GameMeta(BaseModel):
    width: int
    height: int
    direction: Direction
    apple: Position
    score: int
    active: bool

    @classmethod
    def from_game(cls, game: SnakeGame) -> "GameMeta":
        return cls(
            width=game.width,
            height=game.height,
            direction=game.direction,
            apple=game.apple,
            score=game.score,
            active=game.active,
        )


class BodyResponse(BaseModel):
    player_id: str
    body: list[Position]


class MoveResult(BaseModel):
    alive: bool
    new_head: Position
    ate_apple: bool


class CalculateResponse(BaseModel):
    result: int


class BoostResponse(BaseModel):
    result: int
    bonus: int
