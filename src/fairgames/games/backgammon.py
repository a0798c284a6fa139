"""Backgammon rules (no doubling cube).

Points are indexed 0..23 and hold signed checker counts: negative for
player 0, positive for player 1. Player 0 moves from high points to low
and bears off below point 0; player 1 moves the other way and bears off
above point 23.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from fairgames.games.base import ONGOING, GameResult, check_player_count, other, require_seed, won_by
from fairgames.rng import roll_dice

BAR = "bar"
OFF = "off"

POINTS = 24
CHECKERS_PER_PLAYER = 15
PLAYER_RANGE = (2, 2)

#: Sign of a player's checkers on the points
STONE = (-1, 1)
#: Direction of travel along the point indices
DIRECTION = (-1, 1)
#: Inclusive home board range per player
HOME = ((0, 5), (18, 23))

#: (point index, checkers) for each player's starting layout
DEFAULT_POSITIONS = (
    ((23, 2), (12, 5), (7, 3), (5, 5)),
    ((0, 2), (11, 5), (16, 3), (18, 5)),
)

Location = Union[int, str]


@dataclass(frozen=True)
class BackgammonState:
    """Immutable backgammon position, including the dice in play."""

    points: Tuple[int, ...]
    bar: Tuple[int, int]
    borne_off: Tuple[int, int]
    turn: int
    dice: Optional[Tuple[int, int]]
    remaining_dice: Tuple[int, ...]
    move_count: int
    seed: int

    def checkers_on(self, point: int, player: int) -> int:
        """Number of player's checkers on a point."""
        count = self.points[point] * STONE[player]
        return count if count > 0 else 0


@dataclass(frozen=True)
class BackgammonMove:
    """Move one checker by one die; from may be 'bar', to may be 'off'."""

    from_point: Location
    to_point: Location
    die: int


def init_state(player_count: int = 2, seed: Optional[int] = None) -> BackgammonState:
    """Standard layout; an opening roll picks the first player.

    The higher opening die starts; a tie goes to player 0. The seed used by
    the opening roll is stored so the match's first real roll continues the
    same stream.
    """
    check_player_count("Backgammon", player_count, *PLAYER_RANGE)
    seed = require_seed("Backgammon", seed)

    points = [0] * POINTS
    for player, layout in enumerate(DEFAULT_POSITIONS):
        for point, count in layout:
            points[point] = count * STONE[player]

    (first, second), seed = roll_dice(seed, 2)
    first_player = 1 if second > first else 0

    return BackgammonState(
        points=tuple(points),
        bar=(0, 0),
        borne_off=(0, 0),
        turn=first_player,
        dice=None,
        remaining_dice=(),
        move_count=0,
        seed=seed,
    )


def _unique(dice: Sequence[int]) -> List[int]:
    seen: List[int] = []
    for die in dice:
        if die not in seen:
            seen.append(die)
    return seen


def _can_land(state: BackgammonState, point: int, player: int) -> bool:
    return state.checkers_on(point, other(player)) <= 1


def _entry_point(player: int, die: int) -> int:
    return POINTS - die if player == 0 else die - 1


def all_home(state: BackgammonState, player: int) -> bool:
    """True when every checker still in play is in the home board."""
    if state.bar[player] > 0:
        return False
    low, high = HOME[player]
    return not any(
        state.checkers_on(point, player) > 0
        for point in range(POINTS)
        if not low <= point <= high
    )


def _bear_off_allowed(state: BackgammonState, point: int, die: int, player: int) -> bool:
    if player == 0:
        target = point - die
        if point > 5 or target >= 0:
            return False
        farther = range(point + 1, 6)
        exact = target == -1
    else:
        target = point + die
        if point < 18 or target < POINTS:
            return False
        farther = range(18, point)
        exact = target == POINTS
    if exact:
        return True
    # A higher die bears off only the checker farthest from home
    return not any(state.checkers_on(p, player) > 0 for p in farther)


def legal_moves(state: BackgammonState) -> List[BackgammonMove]:
    """Legal single-die moves for the side to move."""
    if not state.remaining_dice:
        return []
    player = state.turn
    dice = _unique(state.remaining_dice)
    moves: List[BackgammonMove] = []

    if state.bar[player] > 0:
        for die in dice:
            entry = _entry_point(player, die)
            if _can_land(state, entry, player):
                moves.append(BackgammonMove(BAR, entry, die))
        return moves

    bearing_off = all_home(state, player)
    for point in range(POINTS):
        if state.checkers_on(point, player) == 0:
            continue
        for die in dice:
            target = point + die * DIRECTION[player]
            if 0 <= target < POINTS and _can_land(state, target, player):
                moves.append(BackgammonMove(point, target, die))
            if bearing_off and _bear_off_allowed(state, point, die, player):
                moves.append(BackgammonMove(point, OFF, die))
    return moves


def validate_move(state: BackgammonState, move: BackgammonMove, player_index: int) -> bool:
    if state.turn != player_index:
        return False
    return move in legal_moves(state)


def apply_move(state: BackgammonState, move: BackgammonMove) -> BackgammonState:
    """Move one checker and consume its die.

    The turn stays with the mover while dice remain and a legal move
    exists; otherwise it passes and the dice are cleared.
    """
    player = state.turn
    opponent = other(player)
    points = list(state.points)
    bar = list(state.bar)
    borne_off = list(state.borne_off)

    if move.from_point == BAR:
        bar[player] -= 1
    else:
        points[move.from_point] -= STONE[player]

    if move.to_point == OFF:
        borne_off[player] += 1
    else:
        if points[move.to_point] == STONE[opponent]:
            points[move.to_point] = 0
            bar[opponent] += 1
        points[move.to_point] += STONE[player]

    remaining = list(state.remaining_dice)
    remaining.remove(move.die)

    moved = replace(
        state,
        points=tuple(points),
        bar=(bar[0], bar[1]),
        borne_off=(borne_off[0], borne_off[1]),
        remaining_dice=tuple(remaining),
        move_count=state.move_count + 1,
    )
    if remaining and legal_moves(moved):
        return moved
    return end_turn(moved)


def end_turn(state: BackgammonState) -> BackgammonState:
    """Pass the turn and clear the dice."""
    return replace(state, turn=other(state.turn), dice=None, remaining_dice=())


def set_dice(state: BackgammonState, dice: Sequence[int]) -> BackgammonState:
    """Install a roll; doubles give four moves.

    A roll that leaves the player without any legal move forfeits the turn.
    """
    first, second = dice
    remaining = (first,) * 4 if first == second else (first, second)
    rolled = replace(state, dice=(first, second), remaining_dice=remaining)
    if not legal_moves(rolled):
        return end_turn(rolled)
    return rolled


def is_terminal(state: BackgammonState) -> GameResult:
    """First side to bear off all fifteen checkers wins."""
    for player in (0, 1):
        if state.borne_off[player] == CHECKERS_PER_PLAYER:
            return won_by(player)
    return ONGOING
