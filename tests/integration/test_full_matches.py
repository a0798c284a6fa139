"""Integration tests: complete seeded matches through the facade."""

import pytest

from fairgames.config import MatchConfig
from fairgames.games.base import DRAW
from fairgames.replay import MatchLog, replay
from fairgames.simulation import MatchRunner, random_players


@pytest.mark.parametrize("game_id,players,seed,max_plies", [
    (2, 2, 1, 300),
    (2, 4, 2, 300),
    (3, 2, 3, 1500),
    (4, 2, 4, 400),
    (5, 2, 5, 2000),
    (5, 4, 6, 2000),
    (1, 2, 7, 300),
])
def test_match_runs_and_replays(game_id, players, seed, max_plies):
    """A full match stays within the cap, names a valid winner and replays from JSON."""
    config = MatchConfig(game_id=game_id, player_count=players, seed=seed, max_plies=max_plies)
    outcome = MatchRunner().simulate(config, random_players(players, seed=seed))

    assert outcome.plies <= max_plies
    if outcome.result.ended:
        assert outcome.result.winner_index in list(range(players)) + [DRAW]

    log = MatchLog.from_json(outcome.log.to_json())
    replayed = replay(log)
    assert replayed.result == outcome.result
    assert replayed.hashes[-1] == outcome.log.entries[-1].state_hash


def test_dominoes_always_finishes():
    """Dominoes cannot loop: every ply plays, draws or passes toward a block."""
    for seed in range(5):
        config = MatchConfig(game_id=2, player_count=3, seed=seed, max_plies=500)
        outcome = MatchRunner().simulate(config, random_players(3, seed=seed))
        assert outcome.result.ended
        assert outcome.result.winner_index in (0, 1, 2)


def test_different_seeds_different_matches():
    logs = set()
    for seed in range(5):
        config = MatchConfig(game_id=3, seed=seed, max_plies=50)
        outcome = MatchRunner().simulate(config, random_players(2, seed=0))
        logs.add(outcome.log.entries[-1].state_hash)
    assert len(logs) == 5
