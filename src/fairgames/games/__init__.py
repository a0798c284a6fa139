"""Rule modules, one per supported game."""

from fairgames.games import backgammon, checkers, chess, dominoes, ludo
from fairgames.games.base import DRAW, ONGOING, GameId, GameResult

__all__ = [
    "DRAW",
    "ONGOING",
    "GameId",
    "GameResult",
    "backgammon",
    "checkers",
    "chess",
    "dominoes",
    "ludo",
]
