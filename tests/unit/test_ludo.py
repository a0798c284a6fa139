"""Tests for Ludo rules."""

import pytest

from fairgames.errors import InvalidPlayerCountError, MissingSeedError
from fairgames.games import ludo
from fairgames.games.ludo import BASE, HOME, LudoMove, LudoState


def _state(tokens, turn=0, dice=None, consecutive_sixes=0):
    return LudoState(
        tokens=tuple(tuple(t) for t in tokens),
        turn=turn,
        dice=dice,
        consecutive_sixes=consecutive_sixes,
        player_count=len(tokens),
        move_count=0,
        seed=1,
    )


class TestSetup:
    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_all_tokens_in_base(self, count):
        state = ludo.init_state(count, seed=9)
        assert state.tokens == ((BASE,) * 4,) * count
        assert state.turn == 0
        assert state.seed == 9

    def test_seed_required(self):
        with pytest.raises(MissingSeedError):
            ludo.init_state(2)

    @pytest.mark.parametrize("count", [1, 5])
    def test_player_count_range(self, count):
        with pytest.raises(InvalidPlayerCountError):
            ludo.init_state(count, seed=1)

    def test_absolute_squares(self):
        assert ludo.absolute_square(0, 0) == 0
        assert ludo.absolute_square(1, 0) == 13
        assert ludo.absolute_square(3, 20) == 7
        assert ludo.absolute_square(0, 52) is None
        assert ludo.absolute_square(0, BASE) is None


class TestLeavingBase:
    def test_needs_a_six(self):
        """Any roll but six leaves a fresh player without moves."""
        state = ludo.init_state(2, seed=1)
        after = ludo.set_dice(state, (5,))
        assert after.turn == 1
        assert after.dice is None

    def test_six_offers_every_token(self):
        state = ludo.set_dice(ludo.init_state(2, seed=1), (6,))
        assert ludo.legal_moves(state) == [LudoMove(i, 0) for i in range(4)]

    def test_six_earns_another_roll(self):
        state = ludo.set_dice(ludo.init_state(2, seed=1), (6,))
        after = ludo.apply_move(state, LudoMove(0, 0))
        assert after.tokens[0] == (0, BASE, BASE, BASE)
        assert after.turn == 0
        assert after.dice is None
        assert after.consecutive_sixes == 1


class TestMoves:
    def test_no_moves_before_roll(self):
        assert ludo.legal_moves(_state([(4, BASE, BASE, BASE), (BASE,) * 4])) == []

    def test_capture_sends_token_home_and_grants_roll(self):
        state = _state([(4, BASE, BASE, BASE), (45, BASE, BASE, BASE)], dice=2)
        assert ludo.legal_moves(state) == [LudoMove(0, 2)]
        after = ludo.apply_move(state, LudoMove(0, 2))
        assert after.tokens[0][0] == 6
        assert after.tokens[1][0] == BASE
        assert after.turn == 0

    def test_no_capture_on_safe_square(self):
        state = _state([(6, BASE, BASE, BASE), (47, BASE, BASE, BASE)], dice=2)
        after = ludo.apply_move(state, LudoMove(0, 2))
        assert ludo.absolute_square(0, 8) in ludo.SAFE_SQUARES
        assert after.tokens[1][0] == 47
        assert after.turn == 1

    def test_own_token_blocks(self):
        state = _state([(3, 5, BASE, BASE), (BASE,) * 4], dice=2)
        assert ludo.legal_moves(state) == [LudoMove(1, 2)]

    def test_exact_roll_needed_for_home(self):
        state = _state([(55, BASE, BASE, BASE), (BASE,) * 4], dice=3)
        assert ludo.legal_moves(state) == []
        state = _state([(55, BASE, BASE, BASE), (BASE,) * 4], dice=2)
        after = ludo.apply_move(state, LudoMove(0, 2))
        assert after.tokens[0][0] == HOME

    def test_home_column_is_private(self):
        """Tokens of different players in their home columns never collide."""
        state = _state([(50, BASE, BASE, BASE), (54, BASE, BASE, BASE)], dice=4)
        after = ludo.apply_move(state, LudoMove(0, 4))
        assert after.tokens == ((54, BASE, BASE, BASE), (54, BASE, BASE, BASE))

    def test_third_six_sends_token_back(self):
        state = _state([(10, BASE, BASE, BASE), (BASE,) * 4], dice=6, consecutive_sixes=2)
        after = ludo.apply_move(state, LudoMove(0, 6))
        assert after.tokens[0][0] == BASE
        assert after.turn == 1
        assert after.consecutive_sixes == 0

    def test_wrong_player_rejected(self):
        state = _state([(10, BASE, BASE, BASE), (BASE,) * 4], dice=3)
        assert not ludo.validate_move(state, LudoMove(0, 3), 1)
        assert ludo.validate_move(state, LudoMove(0, 3), 0)

    def test_turn_rotates_through_four_players(self):
        state = _state([(10, BASE, BASE, BASE)] + [(BASE,) * 4] * 3, turn=3)
        after = ludo.set_dice(state, (1,))
        assert after.turn == 0


class TestTerminal:
    def test_all_home_wins(self):
        state = _state([(HOME, HOME, HOME, 56), (BASE,) * 4], dice=1)
        after = ludo.apply_move(state, LudoMove(3, 1))
        result = ludo.is_terminal(after)
        assert result.ended and result.winner_index == 0

    def test_fresh_game_ongoing(self):
        assert not ludo.is_terminal(ludo.init_state(4, seed=1)).ended
