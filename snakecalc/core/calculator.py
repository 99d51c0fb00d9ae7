from __future__ import annotations

from snakecalc.api.models import Operation, SnakeGame
from snakecalc.errors import ArithmeticOverflowError, DivisionByZeroError

# Signed 256-bit; anything outside fails rather than wrapping.
INT_BITS = 256
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1

BONUS_MODULUS = 5


def _check_range(value: int, *, what: str) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise ArithmeticOverflowError(f"{what} does not fit in a signed {INT_BITS}-bit integer")
    return value


def _divide(left: int, right: int) -> int:
    if right == 0:
        raise DivisionByZeroError("Division by zero")
    # Truncate toward zero, not floor.
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def evaluate(left: int, right: int, op: Operation) -> int:
    _check_range(left, what="left operand")
    _check_range(right, what="right operand")

    if op == Operation.add:
        result = left + right
    elif op == Operation.subtract:
        result = left - right
    elif op == Operation.multiply:
        result = left * right
    elif op == Operation.divide:
        result = _divide(left, right)
    else:
        raise ValueError(f"Unknown operation: {op}")

    return _check_range(result, what="result")


def bonus_for(result: int) -> int:
    if result == 0:
        return 0
    return (abs(result) % BONUS_MODULUS) + 1


def apply_boost(game: SnakeGame, left: int, right: int, op: Operation) -> tuple[int, int]:
    """Evaluate and, if the game is running, add the folded bonus to its score.

    Returns `(result, bonus)`; `bonus` is 0 whenever the score was left alone.
    """

    result = evaluate(left, right, op)
    bonus = bonus_for(result) if game.active else 0
    game.score += bonus
    return result, bonus
