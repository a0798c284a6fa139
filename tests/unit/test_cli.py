"""Tests for the command line entry points."""

import json

import pytest
from click.testing import CliRunner

from fairgames.cli.replay import main as replay_main
from fairgames.cli.simulate import main as simulate_main


def test_simulate_prints_outcome():
    result = CliRunner().invoke(simulate_main, ["dominoes", "--seed", "3"])
    assert result.exit_code == 0, result.output
    assert "Game: Dominoes" in result.output
    assert "Result:" in result.output
    assert "Final state hash:" in result.output


def test_simulate_chess_prints_fen():
    result = CliRunner().invoke(simulate_main, ["chess", "--max-plies", "2"])
    assert result.exit_code == 0, result.output
    assert "FEN:" in result.output
    assert "unfinished" in result.output


def test_simulate_from_seed_hash():
    seed_hash = "0x00000010" + "00" * 28
    result = CliRunner().invoke(simulate_main, ["ludo", "--seed-hash", seed_hash, "--max-plies", "20"])
    assert result.exit_code == 0, result.output
    assert "Seed: 16" in result.output


def test_missing_seed_fails():
    result = CliRunner().invoke(simulate_main, ["backgammon"])
    assert result.exit_code == 1


def test_bad_player_count_fails():
    result = CliRunner().invoke(simulate_main, ["chess", "--players", "3"])
    assert result.exit_code == 1


def test_written_log_replays(tmp_path):
    log_path = tmp_path / "match.json"
    runner = CliRunner()
    result = runner.invoke(
        simulate_main,
        ["backgammon", "--seed", "9", "--max-plies", "60", "--log", str(log_path)],
    )
    assert result.exit_code == 0, result.output
    assert log_path.exists()

    result = runner.invoke(replay_main, [str(log_path)])
    assert result.exit_code == 0, result.output
    assert "OK: 60 plies of Backgammon reproduced" in result.output


def test_tampered_log_reports_mismatch(tmp_path):
    log_path = tmp_path / "match.json"
    runner = CliRunner()
    runner.invoke(simulate_main, ["ludo", "--seed", "2", "--max-plies", "30", "--log", str(log_path)])
    data = json.loads(log_path.read_text())
    data["entries"][5]["stateHash"] = "f" * 64
    log_path.write_text(json.dumps(data))

    result = runner.invoke(replay_main, [str(log_path)])
    assert result.exit_code == 2
    assert "MISMATCH at ply 6" in result.output


def test_invalid_log_file(tmp_path):
    log_path = tmp_path / "broken.json"
    log_path.write_text("{}")
    result = CliRunner().invoke(replay_main, [str(log_path)])
    assert result.exit_code == 1


@pytest.mark.parametrize(
    "content",
    [
        "[]",
        "5",
        '{"gameId": 5, "playerCount": 2, "initialHash": "", "entries": [{"dice": 5}]}',
    ],
)
def test_wrongly_shaped_log_file(tmp_path, content):
    log_path = tmp_path / "shaped.json"
    log_path.write_text(content)
    result = CliRunner().invoke(replay_main, [str(log_path)])
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
