"""Ludo rules for two to four players.

Token positions are relative to their owner's start square: -1 is base,
0..51 the shared main track, 52..56 the private home column and 57 home.
Captures and safe squares are evaluated on absolute main-track squares.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from fairgames.games.base import ONGOING, GameResult, check_player_count, require_seed, won_by

TOKENS_PER_PLAYER = 4
PLAYER_RANGE = (2, 4)
BASE = -1
TRACK_LENGTH = 52
HOME = 57
EXIT_ROLL = 6
MAX_CONSECUTIVE_SIXES = 3

START_SQUARES = (0, 13, 26, 39)
SAFE_SQUARES = frozenset((0, 8, 13, 21, 26, 34, 39, 47))


@dataclass(frozen=True)
class LudoState:
    """Immutable Ludo position; tokens[player][token] is a relative position."""

    tokens: Tuple[Tuple[int, ...], ...]
    turn: int
    dice: Optional[int]
    consecutive_sixes: int
    player_count: int
    move_count: int
    seed: int


@dataclass(frozen=True)
class LudoMove:
    """Move a token by the die; steps == 0 means leaving base."""

    token_index: int
    steps: int


def init_state(player_count: int, seed: Optional[int] = None) -> LudoState:
    """All tokens in base; player 0 rolls first."""
    check_player_count("Ludo", player_count, *PLAYER_RANGE)
    seed = require_seed("Ludo", seed)
    return LudoState(
        tokens=tuple((BASE,) * TOKENS_PER_PLAYER for _ in range(player_count)),
        turn=0,
        dice=None,
        consecutive_sixes=0,
        player_count=player_count,
        move_count=0,
        seed=seed,
    )


def absolute_square(player: int, position: int) -> Optional[int]:
    """Main-track square for a relative position, None off the main track."""
    if position < 0 or position >= TRACK_LENGTH:
        return None
    return (START_SQUARES[player] + position) % TRACK_LENGTH


def _occupies(player: int, position: int, other_player: int, other_position: int) -> bool:
    """True if two tokens would stand on the same square."""
    if position < 0 or other_position < 0:
        return False
    if position >= TRACK_LENGTH or other_position >= TRACK_LENGTH:
        # Home column squares are private to their owner
        return player == other_player and position == other_position
    return absolute_square(player, position) == absolute_square(other_player, other_position)


def legal_moves(state: LudoState) -> List[LudoMove]:
    """Moves for the rolled die, in token order; empty before a roll."""
    if state.dice is None:
        return []
    player = state.turn
    die = state.dice
    own = state.tokens[player]
    moves: List[LudoMove] = []

    for index, position in enumerate(own):
        if position == HOME:
            continue
        if position == BASE:
            if die == EXIT_ROLL:
                moves.append(LudoMove(index, 0))
            continue
        target = position + die
        if target > HOME:
            continue
        blocked = any(
            other_index != index and other_position != HOME
            and _occupies(player, target, player, other_position)
            for other_index, other_position in enumerate(own)
        )
        if not blocked:
            moves.append(LudoMove(index, die))
    return moves


def validate_move(state: LudoState, move: LudoMove, player_index: int) -> bool:
    if state.turn != player_index:
        return False
    return move in legal_moves(state)


def apply_move(state: LudoState, move: LudoMove) -> LudoState:
    """Move a token, resolve captures and decide who rolls next.

    A six or a capture earns another roll, except on the third six in a
    row, which sends the moved token back to base and ends the turn.
    """
    player = state.turn
    tokens = [list(t) for t in state.tokens]
    position = tokens[player][move.token_index]
    landing = 0 if position == BASE else position + move.steps
    tokens[player][move.token_index] = landing

    captured = False
    square = absolute_square(player, landing)
    if square is not None and square not in SAFE_SQUARES:
        for opponent in range(state.player_count):
            if opponent == player:
                continue
            for index, other_position in enumerate(tokens[opponent]):
                if absolute_square(opponent, other_position) == square:
                    tokens[opponent][index] = BASE
                    captured = True

    rolled_six = state.dice == EXIT_ROLL
    sixes = state.consecutive_sixes + 1 if rolled_six else 0
    if sixes >= MAX_CONSECUTIVE_SIXES:
        tokens[player][move.token_index] = BASE

    extra_turn = (rolled_six or captured) and sixes < MAX_CONSECUTIVE_SIXES
    return replace(
        state,
        tokens=tuple(tuple(t) for t in tokens),
        turn=player if extra_turn else _next_player(state, player),
        dice=None,
        consecutive_sixes=sixes if extra_turn else 0,
        move_count=state.move_count + 1,
    )


def _next_player(state: LudoState, player: int) -> int:
    return (player + 1) % state.player_count


def set_dice(state: LudoState, dice: Sequence[int]) -> LudoState:
    """Install a roll; a roll with no legal move passes the turn."""
    rolled = replace(state, dice=dice[0])
    if legal_moves(rolled):
        return rolled
    return replace(rolled, turn=_next_player(state, state.turn), dice=None, consecutive_sixes=0)


def is_terminal(state: LudoState) -> GameResult:
    """First player with every token home wins."""
    for player, tokens in enumerate(state.tokens):
        if all(position == HOME for position in tokens):
            return won_by(player)
    return ONGOING
