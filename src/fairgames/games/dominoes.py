"""Draw dominoes with a double-six set for two to four players.

The seed is consumed once, in init_state, to shuffle and deal. Drawing
takes the next tile off the already shuffled boneyard, so no further
randomness is needed during play.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from fairgames.games.base import ONGOING, GameResult, check_player_count, require_seed, won_by
from fairgames.rng import shuffle

MOVE_DRAW = -1
MOVE_PASS = -2

LEFT = "left"
RIGHT = "right"

TILES_PER_HAND = 7
PLAYER_RANGE = (2, 4)
HIGHEST_PIP = 6

#: End value of an empty line of play
NO_END = -1

Tile = Tuple[int, int]


def full_set() -> Tuple[Tile, ...]:
    """The 28 tiles of a double-six set in canonical order."""
    return tuple((low, high) for low in range(HIGHEST_PIP + 1) for high in range(low, HIGHEST_PIP + 1))


@dataclass(frozen=True)
class DominoesState:
    """Immutable dominoes position.

    line holds the tiles in play from left to right, each oriented so that
    adjacent halves match.
    """

    hands: Tuple[Tuple[Tile, ...], ...]
    line: Tuple[Tile, ...]
    boneyard: Tuple[Tile, ...]
    turn: int
    left_end: int
    right_end: int
    passed: Tuple[bool, ...]
    player_count: int
    move_count: int
    seed: int


@dataclass(frozen=True)
class DominoesMove:
    """Play hand tile tile_index at an end; -1 draws, -2 passes."""

    tile_index: int
    end: str = LEFT
    flip: bool = False

    def __post_init__(self) -> None:
        # end and flip carry no meaning for DRAW and PASS
        if self.tile_index < 0:
            object.__setattr__(self, "end", LEFT)
            object.__setattr__(self, "flip", False)

    @property
    def is_draw(self) -> bool:
        return self.tile_index == MOVE_DRAW

    @property
    def is_pass(self) -> bool:
        return self.tile_index == MOVE_PASS


DRAW_MOVE = DominoesMove(MOVE_DRAW)
PASS_MOVE = DominoesMove(MOVE_PASS)


def init_state(player_count: int, seed: Optional[int] = None) -> DominoesState:
    """Shuffle with the seed, deal seven tiles each and pick the opener.

    The holder of the highest double opens; player 0 opens if nobody was
    dealt a double.
    """
    check_player_count("Dominoes", player_count, *PLAYER_RANGE)
    seed = require_seed("Dominoes", seed)
    tiles, seed = shuffle(seed, full_set())

    hands = tuple(
        tiles[p * TILES_PER_HAND:(p + 1) * TILES_PER_HAND] for p in range(player_count)
    )
    boneyard = tiles[player_count * TILES_PER_HAND:]

    opener = 0
    highest_double = -1
    for player, hand in enumerate(hands):
        for low, high in hand:
            if low == high and low > highest_double:
                highest_double = low
                opener = player

    return DominoesState(
        hands=hands,
        line=(),
        boneyard=boneyard,
        turn=opener,
        left_end=NO_END,
        right_end=NO_END,
        passed=(False,) * player_count,
        player_count=player_count,
        move_count=0,
        seed=seed,
    )


def _playable(state: DominoesState, player: int) -> List[DominoesMove]:
    hand = state.hands[player]
    moves: List[DominoesMove] = []
    if not state.line:
        for index, (low, high) in enumerate(hand):
            moves.append(DominoesMove(index, LEFT, False))
            if low != high:
                moves.append(DominoesMove(index, LEFT, True))
        return moves

    for index, (first, second) in enumerate(hand):
        # On the left the tile's right half must touch the left end
        if first == state.left_end:
            moves.append(DominoesMove(index, LEFT, True))
        if second == state.left_end:
            moves.append(DominoesMove(index, LEFT, False))
        if first == state.right_end:
            moves.append(DominoesMove(index, RIGHT, False))
        if second == state.right_end:
            moves.append(DominoesMove(index, RIGHT, True))
    return moves


def legal_moves(state: DominoesState) -> List[DominoesMove]:
    """Tile plays; otherwise a single DRAW, or PASS once the boneyard is empty."""
    moves = _playable(state, state.turn)
    if moves:
        return moves
    return [DRAW_MOVE] if state.boneyard else [PASS_MOVE]


def validate_move(state: DominoesState, move: DominoesMove, player_index: int) -> bool:
    if state.turn != player_index:
        return False
    return move in legal_moves(state)


def _next_player(state: DominoesState) -> int:
    return (state.turn + 1) % state.player_count


def apply_move(state: DominoesState, move: DominoesMove) -> DominoesState:
    """Play, draw or pass. Drawing keeps the turn; the others advance it."""
    player = state.turn
    if move.is_pass:
        passed = list(state.passed)
        passed[player] = True
        return replace(
            state,
            turn=_next_player(state),
            passed=tuple(passed),
            move_count=state.move_count + 1,
        )

    cleared = (False,) * state.player_count
    hands = list(state.hands)
    if move.is_draw:
        hands[player] = hands[player] + state.boneyard[:1]
        return replace(
            state,
            hands=tuple(hands),
            boneyard=state.boneyard[1:],
            passed=cleared,
            move_count=state.move_count + 1,
        )

    hand = hands[player]
    tile = hand[move.tile_index]
    hands[player] = hand[:move.tile_index] + hand[move.tile_index + 1:]
    placed = (tile[1], tile[0]) if move.flip else tile

    left_end, right_end = state.left_end, state.right_end
    if not state.line:
        line = (placed,)
        left_end, right_end = placed
    elif move.end == LEFT:
        line = (placed,) + state.line
        left_end = placed[0]
    else:
        line = state.line + (placed,)
        right_end = placed[1]

    return replace(
        state,
        hands=tuple(hands),
        line=line,
        turn=_next_player(state),
        left_end=left_end,
        right_end=right_end,
        passed=cleared,
        move_count=state.move_count + 1,
    )


def pip_count(hand: Tuple[Tile, ...]) -> int:
    return sum(low + high for low, high in hand)


def is_blocked(state: DominoesState) -> bool:
    """Nobody can play a tile and nothing is left to draw."""
    if state.boneyard:
        return False
    return not any(_playable(state, player) for player in range(state.player_count))


def is_terminal(state: DominoesState) -> GameResult:
    """Empty hand wins; a blocked game goes to the lowest pip count."""
    for player, hand in enumerate(state.hands):
        if not hand:
            return won_by(player)
    if is_blocked(state):
        pips = [pip_count(hand) for hand in state.hands]
        # min() keeps the first (lowest) seat on ties
        return won_by(min(range(state.player_count), key=lambda p: pips[p]))
    return ONGOING
