from __future__ import annotations


class SnakeCalcError(ValueError):
    """Base class for failures reported back to the caller.

    None of these leave partial state behind; the caller decides whether to retry.
    """


class InvalidBoardSizeError(SnakeCalcError):
    pass


class GameNotActiveError(SnakeCalcError):
    pass


class DivisionByZeroError(SnakeCalcError):
    pass


class ArithmeticOverflowError(SnakeCalcError):
    pass


class PlayerBusyError(SnakeCalcError):
    pass


class EmptySnakeError(RuntimeError):
    """Raised when a step is attempted on a snake with no segments.

    The lifecycle never commits an active game with an empty body, so seeing this
    means a stored record is corrupt.
    """
