"""Match configuration."""

import os
from dataclasses import dataclass, field
from typing import Optional

from fairgames.engine import RULES, SEEDED_GAMES
from fairgames.errors import MissingSeedError
from fairgames.games.base import GameId, check_player_count
from fairgames.rng import check_seed

DEFAULT_MAX_PLIES = 2000
MAX_PLIES_ENV = "FAIRGAMES_MAX_PLIES"


def default_max_plies() -> int:
    """Ply cap from FAIRGAMES_MAX_PLIES, else DEFAULT_MAX_PLIES."""
    raw = os.environ.get(MAX_PLIES_ENV)
    if raw is None or raw.strip() == "":
        return DEFAULT_MAX_PLIES
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{MAX_PLIES_ENV} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{MAX_PLIES_ENV} must be positive, got {value}")
    return value


@dataclass
class MatchConfig:
    """Everything needed to start a reproducible match."""

    game_id: GameId
    player_count: int = 2
    seed: Optional[int] = None
    max_plies: int = field(default_factory=default_max_plies)
    strict: bool = True  # re-validate every move in apply_move

    def __post_init__(self):
        """Coerce the game id and fail early on bad counts or seeds."""
        self.game_id = GameId.coerce(self.game_id)
        check_player_count(
            self.game_id.name.title(), self.player_count, *RULES[self.game_id].PLAYER_RANGE
        )
        if self.seed is not None:
            check_seed(self.seed)
        elif self.game_id in SEEDED_GAMES:
            raise MissingSeedError(f"{self.game_id.name.title()} requires a seed")
        if self.max_plies <= 0:
            raise ValueError(f"max_plies must be positive, got {self.max_plies}")
