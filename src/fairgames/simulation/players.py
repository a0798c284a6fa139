"""Automated players for self-play."""

from abc import ABC, abstractmethod
from typing import Any, List

from fairgames.rng import check_seed, lcg_next


class Player(ABC):
    """Base class for automated players."""

    @abstractmethod
    def choose_move(self, state: Any, legal_moves: List[Any]) -> Any:
        """Choose one of legal_moves."""
        pass


class RandomPlayer(Player):
    """Player that chooses uniformly from legal moves.

    Draws from its own LCG stream instead of the random module, so a match
    between seeded RandomPlayers is reproducible on any implementation of
    the generator.
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed = check_seed(seed)

    def choose_move(self, state: Any, legal_moves: List[Any]) -> Any:
        if not legal_moves:
            raise ValueError("No legal moves available")
        value, self.seed = lcg_next(self.seed)
        return legal_moves[value % len(legal_moves)]


class FirstMovePlayer(Player):
    """Always plays the first legal move; handy for fixed test lines."""

    def choose_move(self, state: Any, legal_moves: List[Any]) -> Any:
        if not legal_moves:
            raise ValueError("No legal moves available")
        return legal_moves[0]
