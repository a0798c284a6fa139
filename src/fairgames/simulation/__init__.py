"""Self-play simulation."""

from fairgames.simulation.players import FirstMovePlayer, Player, RandomPlayer
from fairgames.simulation.runner import MatchResult, MatchRunner, random_players

__all__ = [
    "FirstMovePlayer",
    "MatchResult",
    "MatchRunner",
    "Player",
    "RandomPlayer",
    "random_players",
]
