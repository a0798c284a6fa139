"""Exception types raised by the rules engine."""


class EngineError(ValueError):
    """Base class for every error the engine raises."""


class UnknownGameError(EngineError):
    """Game id does not name one of the supported games."""


class MissingSeedError(EngineError):
    """A dice or shuffle game was created without a seed."""


class InvalidSeedError(EngineError):
    """Seed is not a non-negative integer."""


class InvalidPlayerCountError(EngineError):
    """Player count is outside the range the game supports."""


class MoveDecodeError(EngineError):
    """A wire-format move payload is malformed."""


class IllegalMoveError(EngineError):
    """Strict apply received a move that validate_move rejects."""


class UnsupportedOperationError(EngineError):
    """Operation does not apply to the given game (e.g. dice for chess)."""


class ReplayMismatchError(EngineError):
    """A recorded match log does not reproduce on replay."""

    def __init__(self, ply: int, message: str) -> None:
        super().__init__(f"ply {ply}: {message}")
        self.ply = ply


class InvalidDiceError(EngineError):
    """Dice values are out of range or the wrong count for the game."""
