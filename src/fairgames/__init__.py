"""Deterministic rules engine for Chess, Checkers, Backgammon, Ludo and Dominoes."""

from fairgames.dice import roll_dice, set_dice
from fairgames.engine import apply_move, init_game, is_terminal, legal_moves, validate_move
from fairgames.games.base import DRAW, GameId, GameResult

__version__ = "0.1.0"

__all__ = [
    "DRAW",
    "GameId",
    "GameResult",
    "apply_move",
    "init_game",
    "is_terminal",
    "legal_moves",
    "roll_dice",
    "set_dice",
    "validate_move",
]
