"""CLI command for verifying a recorded match log."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from fairgames.errors import EngineError, ReplayMismatchError
from fairgames.replay import MatchLog, replay

logger = logging.getLogger(__name__)


@click.command()
@click.argument("log_path", type=click.Path(exists=True))
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(log_path: str, verbose: bool):
    """Replay LOG_PATH from its seed and check every recorded state hash."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    try:
        log = MatchLog.from_json(Path(log_path).read_text())
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.error(f"Invalid match log: {e}")
        sys.exit(1)

    try:
        outcome = replay(log)
    except ReplayMismatchError as e:
        click.echo(f"MISMATCH at ply {e.ply}: {e}")
        sys.exit(2)
    except EngineError as e:
        logger.error(str(e))
        sys.exit(1)

    click.echo(f"OK: {outcome.plies} plies of {log.game_id.name.title()} reproduced")
    click.echo(f"Result: {json.dumps(outcome.result.to_dict())}")


if __name__ == "__main__":
    main()
