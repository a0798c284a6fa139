"""Tests for dominoes rules."""

from collections import Counter

import pytest

from fairgames.errors import InvalidPlayerCountError, MissingSeedError
from fairgames.games import dominoes
from fairgames.games.dominoes import (
    DRAW_MOVE,
    LEFT,
    PASS_MOVE,
    RIGHT,
    DominoesMove,
    DominoesState,
)


def _state(hands, line=(), boneyard=(), turn=0):
    if line:
        left_end, right_end = line[0][0], line[-1][1]
    else:
        left_end = right_end = dominoes.NO_END
    return DominoesState(
        hands=tuple(tuple(h) for h in hands),
        line=tuple(line),
        boneyard=tuple(boneyard),
        turn=turn,
        left_end=left_end,
        right_end=right_end,
        passed=(False,) * len(hands),
        player_count=len(hands),
        move_count=0,
        seed=1,
    )


def _deal(state):
    return state.hands, state.boneyard


class TestDeal:
    def test_full_set(self):
        tiles = dominoes.full_set()
        assert len(tiles) == 28
        assert len(set(tiles)) == 28

    @pytest.mark.parametrize("count,boneyard", [(2, 14), (3, 7), (4, 0)])
    def test_seven_tiles_each(self, count, boneyard):
        state = dominoes.init_state(count, seed=77)
        assert all(len(hand) == 7 for hand in state.hands)
        assert len(state.boneyard) == boneyard
        dealt = [tile for hand in state.hands for tile in hand] + list(state.boneyard)
        assert Counter(dealt) == Counter(dominoes.full_set())

    def test_same_seed_same_deal(self):
        assert dominoes.init_state(2, seed=31337) == dominoes.init_state(2, seed=31337)

    def test_adjacent_seeds_deal_differently(self):
        assert _deal(dominoes.init_state(2, seed=1)) != _deal(dominoes.init_state(2, seed=2))

    @pytest.mark.parametrize("bit", range(31))
    def test_single_bit_flip_changes_deal(self, bit):
        seed = 0x2468ACE
        flipped = seed ^ (1 << bit)
        assert _deal(dominoes.init_state(2, seed=seed)) != _deal(dominoes.init_state(2, seed=flipped))

    def test_many_seeds_give_distinct_deals(self):
        deals = {_deal(dominoes.init_state(2, seed=s)) for s in range(50)}
        assert len(deals) == 50

    def test_seeds_equal_modulo_generator_period_deal_alike(self):
        assert _deal(dominoes.init_state(2, seed=5)) == _deal(dominoes.init_state(2, seed=5 + 2**31))

    def test_highest_double_opens(self):
        for seed in range(20):
            state = dominoes.init_state(3, seed=seed)
            doubles = [
                (low, player)
                for player, hand in enumerate(state.hands)
                for low, high in hand
                if low == high
            ]
            expected = max(doubles)[1] if doubles else 0
            assert state.turn == expected

    def test_seed_required(self):
        with pytest.raises(MissingSeedError):
            dominoes.init_state(2)

    def test_player_count(self):
        with pytest.raises(InvalidPlayerCountError):
            dominoes.init_state(5, seed=1)


class TestMoves:
    def test_first_move_either_orientation(self):
        state = _state([[(1, 2), (3, 3)], [(0, 0)]])
        assert dominoes.legal_moves(state) == [
            DominoesMove(0, LEFT, False),
            DominoesMove(0, LEFT, True),
            DominoesMove(1, LEFT, False),
        ]

    def test_first_tile_sets_both_ends(self):
        state = _state([[(1, 2), (3, 3)], [(0, 0)]])
        after = dominoes.apply_move(state, DominoesMove(0, LEFT, True))
        assert after.line == ((2, 1),)
        assert (after.left_end, after.right_end) == (2, 1)
        assert after.turn == 1

    def test_matching_ends(self):
        state = _state([[(5, 6), (1, 3), (2, 2)], [(0, 0)]], line=[(3, 5)])
        assert dominoes.legal_moves(state) == [
            DominoesMove(0, RIGHT, False),
            DominoesMove(1, LEFT, False),
        ]

    def test_play_left(self):
        state = _state([[(5, 6), (1, 3), (2, 2)], [(0, 0)]], line=[(3, 5)])
        after = dominoes.apply_move(state, DominoesMove(1, LEFT, False))
        assert after.line == ((1, 3), (3, 5))
        assert after.left_end == 1
        assert after.hands[0] == ((5, 6), (2, 2))

    def test_flip_on_left(self):
        state = _state([[(3, 6)], [(0, 0)]], line=[(3, 5)])
        assert dominoes.legal_moves(state) == [DominoesMove(0, LEFT, True)]
        after = dominoes.apply_move(state, DominoesMove(0, LEFT, True))
        assert after.line[0] == (6, 3)
        assert after.left_end == 6

    def test_play_right_with_flip(self):
        state = _state([[(4, 5)], [(0, 0)]], line=[(3, 5)])
        after = dominoes.apply_move(state, DominoesMove(0, RIGHT, True))
        assert after.line == ((3, 5), (5, 4))
        assert after.right_end == 4

    def test_double_accepts_either_flip(self):
        """A double on a matching end may be sent with flip true or false."""
        state = _state([[(5, 5)], [(0, 0)]], line=[(3, 5)])
        assert dominoes.legal_moves(state) == [
            DominoesMove(0, RIGHT, False),
            DominoesMove(0, RIGHT, True),
        ]
        placed = {
            dominoes.apply_move(state, move).line for move in dominoes.legal_moves(state)
        }
        assert placed == {((3, 5), (5, 5))}

    def test_double_on_left_end(self):
        state = _state([[(3, 3)], [(0, 0)]], line=[(3, 5)])
        assert dominoes.legal_moves(state) == [
            DominoesMove(0, LEFT, True),
            DominoesMove(0, LEFT, False),
        ]
        assert dominoes.validate_move(state, DominoesMove(0, LEFT, False), 0)
        after = dominoes.apply_move(state, DominoesMove(0, LEFT, False))
        assert after.line == ((3, 3), (3, 5))
        assert after.left_end == 3

    def test_draw_when_stuck(self):
        state = _state([[(6, 6)], [(0, 0)]], line=[(3, 5)], boneyard=[(1, 1), (2, 4)])
        assert dominoes.legal_moves(state) == [DRAW_MOVE]
        after = dominoes.apply_move(state, DRAW_MOVE)
        assert after.hands[0] == ((6, 6), (1, 1))
        assert after.boneyard == ((2, 4),)
        assert after.turn == 0

    def test_pass_when_boneyard_empty(self):
        state = _state([[(6, 6)], [(0, 5)]], line=[(3, 5)])
        assert dominoes.legal_moves(state) == [PASS_MOVE]
        after = dominoes.apply_move(state, PASS_MOVE)
        assert after.turn == 1
        assert after.passed == (True, False)

    def test_draw_and_pass_ignore_end_and_flip(self):
        assert DominoesMove(dominoes.MOVE_DRAW, RIGHT, True) == DRAW_MOVE
        state = _state([[(6, 6)], [(0, 0)]], line=[(3, 5)], boneyard=[(1, 1)])
        assert dominoes.validate_move(state, DominoesMove(-1, RIGHT, True), 0)

    def test_wrong_player_rejected(self):
        state = _state([[(5, 6)], [(0, 0)]], line=[(3, 5)])
        assert not dominoes.validate_move(state, DominoesMove(0, RIGHT, False), 1)


class TestTerminal:
    def test_empty_hand_wins(self):
        state = _state([[(5, 6)], [(0, 0), (1, 1)]], line=[(3, 5)])
        after = dominoes.apply_move(state, DominoesMove(0, RIGHT, False))
        result = dominoes.is_terminal(after)
        assert result.ended and result.winner_index == 0

    def test_blocked_game_lowest_pips(self):
        state = _state([[(6, 6)], [(0, 1)]], line=[(3, 5)])
        assert dominoes.is_blocked(state)
        assert dominoes.is_terminal(state).winner_index == 1

    def test_blocked_tie_goes_to_lower_seat(self):
        state = _state([[(0, 1)], [(1, 0)], [(6, 6)]], line=[(3, 5)])
        assert dominoes.is_terminal(state).winner_index == 0

    def test_not_blocked_while_boneyard_has_tiles(self):
        state = _state([[(6, 6)], [(0, 1)]], line=[(3, 5)], boneyard=[(2, 2)])
        assert not dominoes.is_terminal(state).ended
