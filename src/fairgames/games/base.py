"""Types shared by every rule module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from fairgames.errors import InvalidPlayerCountError, MissingSeedError, UnknownGameError
from fairgames.rng import check_seed

# winner_index of a drawn (or otherwise winnerless) terminal state
DRAW = -1

Square = Tuple[int, int]


class GameId(IntEnum):
    """Game identifiers used on the wire and in match logs."""

    CHESS = 1
    DOMINOES = 2
    BACKGAMMON = 3
    CHECKERS = 4
    LUDO = 5

    @classmethod
    def coerce(cls, value: Any) -> "GameId":
        """Turn an int (or GameId) into a GameId, rejecting anything else."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise UnknownGameError(f"Unknown game ID: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise UnknownGameError(f"Unknown game ID: {value!r}") from None


@dataclass(frozen=True)
class GameResult:
    """Terminal check outcome.

    winner_index is None while the game is still running and DRAW for a
    finished game without a winner.
    """

    ended: bool
    winner_index: Optional[int] = None

    @property
    def is_draw(self) -> bool:
        return self.ended and self.winner_index == DRAW

    def to_dict(self) -> Dict[str, Any]:
        """Settlement handoff payload."""
        return {"ended": self.ended, "winnerIndex": self.winner_index}


ONGOING = GameResult(ended=False, winner_index=None)


def won_by(player: int) -> GameResult:
    return GameResult(ended=True, winner_index=player)


def drawn() -> GameResult:
    return GameResult(ended=True, winner_index=DRAW)


def check_player_count(game: str, player_count: int, low: int, high: int) -> int:
    """Validate player count against the inclusive range [low, high]."""
    if isinstance(player_count, bool) or not isinstance(player_count, int):
        raise InvalidPlayerCountError(
            f"{game} player count must be an integer, got {player_count!r}"
        )
    if not low <= player_count <= high:
        if low == high:
            expected = f"exactly {low}"
        else:
            expected = f"between {low} and {high}"
        raise InvalidPlayerCountError(
            f"{game} needs {expected} players, got {player_count}"
        )
    return player_count


def require_seed(game: str, seed: Optional[int]) -> int:
    """Fail loudly when a dice or shuffle game is created without a seed."""
    if seed is None:
        raise MissingSeedError(
            f"{game} requires a seed for fair randomness; derive it from the "
            "commit-reveal final seed before starting the match"
        )
    return check_seed(seed)


def other(player: int) -> int:
    """Opponent of a two-player seat."""
    return 1 - player
