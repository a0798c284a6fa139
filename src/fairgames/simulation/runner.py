"""Self-play match runner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Sequence

from fairgames import dice as dice_bridge
from fairgames import engine
from fairgames.config import MatchConfig
from fairgames.games.base import GameResult
from fairgames.replay import MatchLog, MatchRecorder
from fairgames.simulation.players import Player, RandomPlayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Result of a simulated match."""

    result: GameResult
    plies: int
    final_state: Any
    log: MatchLog

    @property
    def truncated(self) -> bool:
        """True when the ply cap stopped the match before it ended."""
        return not self.result.ended


class MatchRunner:
    """Drives a match through the engine facade and records it."""

    def simulate(self, config: MatchConfig, players: Sequence[Player]) -> MatchResult:
        """Play until the game ends or config.max_plies plies are recorded.

        A ply is one applied move, or one roll that passed the turn.
        """
        if len(players) != config.player_count:
            raise ValueError(
                f"Need {config.player_count} players, got {len(players)}"
            )
        game_id = config.game_id
        state = engine.init_game(game_id, config.player_count, config.seed)
        recorder = MatchRecorder(config, state)

        result = engine.is_terminal(game_id, state)
        plies = 0
        while not result.ended and plies < config.max_plies:
            player = state.turn
            rolled = None
            if dice_bridge.needs_roll(game_id, state):
                rolled, state = dice_bridge.roll_and_set(game_id, state)
                if dice_bridge.needs_roll(game_id, state):
                    # No legal move for this roll; the turn has passed
                    recorder.record(player, rolled, None, state)
                    plies += 1
                    continue

            moves = engine.legal_moves(game_id, state)
            move = players[player].choose_move(state, moves)
            state = engine.apply_move(game_id, state, move, strict=config.strict)
            recorder.record(player, rolled, move, state)
            plies += 1
            result = engine.is_terminal(game_id, state)

        if result.ended:
            logger.info("%s finished after %d plies: %s", game_id.name, plies, result.to_dict())
        else:
            logger.info("%s stopped at the %d ply cap", game_id.name, config.max_plies)
        return MatchResult(
            result=result,
            plies=plies,
            final_state=state,
            log=recorder.finish(result),
        )


def random_players(count: int, seed: int = 0) -> List[RandomPlayer]:
    """One RandomPlayer per seat, each on its own stream."""
    return [RandomPlayer(seed + seat) for seat in range(count)]
