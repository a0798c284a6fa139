"""CLI command for seeded self-play matches."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from fairgames.config import MatchConfig, default_max_plies
from fairgames.errors import EngineError
from fairgames.games import chess
from fairgames.games.base import GameId
from fairgames.seed import seed_from_hash, shorten_bytes32
from fairgames.serialization import state_hash
from fairgames.simulation import MatchRunner, random_players

logger = logging.getLogger(__name__)

GAME_NAMES = [game.name.lower() for game in GameId]


@click.command()
@click.argument("game", type=click.Choice(GAME_NAMES, case_sensitive=False))
@click.option("-p", "--players", type=int, default=2, help="Number of players")
@click.option("--seed", type=int, default=None, help="Engine seed")
@click.option(
    "--seed-hash",
    default=None,
    help="Finalized commit-reveal bytes32 hash to derive the seed from",
)
@click.option("--player-seed", type=int, default=0, help="Seed for the random players")
@click.option("--max-plies", type=int, default=None, help="Ply cap before the match is stopped")
@click.option("--log", "log_path", type=click.Path(), default=None, help="Write the match log as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    game: str,
    players: int,
    seed: int | None,
    seed_hash: str | None,
    player_seed: int,
    max_plies: int | None,
    log_path: str | None,
    verbose: bool,
):
    """Play a seeded match between random players and print the outcome.

    GAME is one of chess, dominoes, backgammon, checkers or ludo.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    try:
        if seed_hash is not None:
            if seed is not None:
                raise click.UsageError("Use either --seed or --seed-hash, not both")
            seed = seed_from_hash(seed_hash)
        config = MatchConfig(
            game_id=GameId[game.upper()],
            player_count=players,
            seed=seed,
            max_plies=max_plies if max_plies is not None else default_max_plies(),
        )
        outcome = MatchRunner().simulate(config, random_players(players, player_seed))
    except (EngineError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    click.echo(f"Game: {config.game_id.name.title()}")
    click.echo(f"Seed: {config.seed}")
    if seed_hash is not None:
        click.echo(f"Seed hash: {shorten_bytes32(seed_hash)}")
    click.echo(f"Plies: {outcome.plies}")
    if outcome.truncated:
        click.echo("Result: unfinished (ply cap reached)")
    elif outcome.result.is_draw:
        click.echo("Result: draw")
    else:
        click.echo(f"Result: player {outcome.result.winner_index} wins")
    click.echo(f"Final state hash: {state_hash(config.game_id, outcome.final_state)}")
    if config.game_id == GameId.CHESS:
        click.echo(f"FEN: {chess.to_fen(outcome.final_state)}")

    if log_path:
        Path(log_path).write_text(outcome.log.to_json())
        click.echo(f"Log saved to {log_path}")


if __name__ == "__main__":
    main()
