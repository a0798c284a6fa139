"""Dice bridge for the games that roll before moving.

Backgammon rolls two dice and Ludo one. roll_dice draws from the seed
stored in the state and hands back a state carrying the advanced seed;
set_dice then installs the values. The two steps are separate so an
externally agreed roll can be installed without touching the seed.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Sequence, Tuple

from fairgames import rng
from fairgames.errors import InvalidDiceError, UnsupportedOperationError
from fairgames.games import backgammon, ludo
from fairgames.games.base import GameId

logger = logging.getLogger(__name__)

DICE_RULES = {
    GameId.BACKGAMMON: (backgammon, 2),
    GameId.LUDO: (ludo, 1),
}


def uses_dice(game_id: Any) -> bool:
    return GameId.coerce(game_id) in DICE_RULES


def _dice_rules(game_id: Any):
    game = GameId.coerce(game_id)
    if game not in DICE_RULES:
        raise UnsupportedOperationError(f"{game.name.title()} does not use dice")
    return game, DICE_RULES[game]


def roll_dice(game_id: Any, state: Any) -> Tuple[Tuple[int, ...], Any]:
    """Roll for the side to move.

    Returns:
        (dice, state) where state is unchanged except for its seed.
    """
    game, (_, count) = _dice_rules(game_id)
    dice, seed = rng.roll_dice(state.seed, count)
    logger.debug("%s player %d rolled %s", game.name, state.turn, dice)
    return dice, replace(state, seed=seed)


def set_dice(game_id: Any, state: Any, dice: Sequence[int]) -> Any:
    """Install dice values on the state.

    A roll that leaves the player without a legal move passes the turn.

    Raises:
        InvalidDiceError: Wrong number of dice or a value outside 1..6.
    """
    game, (rules, count) = _dice_rules(game_id)
    dice = tuple(dice)
    if len(dice) != count:
        raise InvalidDiceError(f"{game.name.title()} expects {count} dice, got {len(dice)}")
    for value in dice:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= rng.DIE_FACES:
            raise InvalidDiceError(f"Die value out of range: {value!r}")
    return rules.set_dice(state, dice)


def roll_and_set(game_id: Any, state: Any) -> Tuple[Tuple[int, ...], Any]:
    """roll_dice followed by set_dice, as a single turn step."""
    dice, rolled = roll_dice(game_id, state)
    return dice, set_dice(game_id, rolled, dice)


def needs_roll(game_id: Any, state: Any) -> bool:
    """True when the side to move must roll before any move is legal."""
    game = GameId.coerce(game_id)
    if game == GameId.BACKGAMMON:
        return not state.remaining_dice
    if game == GameId.LUDO:
        return state.dice is None
    return False
