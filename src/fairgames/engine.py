"""Single entry point routing every call to the matching rule module.

Callers hold the game id next to the state and pass both in; the engine
keeps no state of its own, so any number of matches can share it.
"""

from __future__ import annotations

import logging
from types import ModuleType
from typing import Any, Dict, List, Optional

from fairgames.errors import IllegalMoveError
from fairgames.games import backgammon, checkers, chess, dominoes, ludo
from fairgames.games.base import GameId, GameResult

logger = logging.getLogger(__name__)

RULES: Dict[GameId, ModuleType] = {
    GameId.CHESS: chess,
    GameId.DOMINOES: dominoes,
    GameId.BACKGAMMON: backgammon,
    GameId.CHECKERS: checkers,
    GameId.LUDO: ludo,
}

#: Games whose initial state depends on the seed
SEEDED_GAMES = frozenset((GameId.DOMINOES, GameId.BACKGAMMON, GameId.LUDO))


def rules_for(game_id: Any) -> ModuleType:
    """Rule module for a game id, raising UnknownGameError for anything else."""
    return RULES[GameId.coerce(game_id)]


def init_game(game_id: Any, player_count: int, seed: Optional[int] = None) -> Any:
    """Create the starting state.

    Raises:
        UnknownGameError: game_id is not 1..5.
        MissingSeedError: Dominoes, Backgammon or Ludo without a seed.
        InvalidPlayerCountError: player_count outside the game's range.
    """
    game = GameId.coerce(game_id)
    state = RULES[game].init_state(player_count, seed)
    logger.debug("init %s players=%d seed=%s", game.name, player_count, seed)
    return state


def legal_moves(game_id: Any, state: Any) -> List[Any]:
    return rules_for(game_id).legal_moves(state)


def validate_move(game_id: Any, state: Any, move: Any, player_index: int) -> bool:
    """True exactly when move is in legal_moves and it is player_index's turn."""
    return rules_for(game_id).validate_move(state, move, player_index)


def apply_move(game_id: Any, state: Any, move: Any, strict: bool = False) -> Any:
    """Apply a move and return the new state.

    Without strict the move is trusted to have passed validate_move; with
    strict it is checked here first and an illegal move raises
    IllegalMoveError instead of producing an undefined state.
    """
    game = GameId.coerce(game_id)
    rules = RULES[game]
    if strict and not rules.validate_move(state, move, state.turn):
        raise IllegalMoveError(f"Illegal {game.name.lower()} move for player {state.turn}: {move!r}")
    new_state = rules.apply_move(state, move)
    logger.debug("%s player %d played %r", game.name, state.turn, move)
    return new_state


def is_terminal(game_id: Any, state: Any) -> GameResult:
    game = GameId.coerce(game_id)
    result = RULES[game].is_terminal(state)
    if result.ended:
        logger.debug("%s ended, winner_index=%d", game.name, result.winner_index)
    return result


def current_player(game_id: Any, state: Any) -> int:
    """Index of the player whose move (or roll) is next."""
    rules_for(game_id)
    return state.turn
