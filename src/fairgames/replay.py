"""Match logs: recording, JSON round-trip and deterministic replay.

A log holds the game id, player count and seed plus one entry per ply.
A ply is either a move or a roll that left the player without a legal
move (move is None and the turn passed). Every entry stores the dice
rolled immediately before it and the state hash after it, so replaying
from the seed proves that both parties saw the same match.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from fairgames import dice as dice_bridge
from fairgames import engine
from fairgames.config import MatchConfig
from fairgames.errors import EngineError, ReplayMismatchError
from fairgames.games.base import GameId, GameResult
from fairgames.serialization import move_from_wire, move_to_wire, state_hash

logger = logging.getLogger(__name__)

LOG_VERSION = 1


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise ValueError(f"{what} must be a {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class LogEntry:
    """One ply of a recorded match."""

    ply: int
    player: int
    dice: Optional[Tuple[int, ...]]
    move: Optional[Dict[str, Any]]
    state_hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ply": self.ply,
            "player": self.player,
            "dice": list(self.dice) if self.dice is not None else None,
            "move": self.move,
            "stateHash": self.state_hash,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        _expect(data, dict, "log entry")
        dice = data.get("dice")
        if dice is not None:
            _expect(dice, list, "entry dice")
        return cls(
            ply=data["ply"],
            player=data["player"],
            dice=tuple(dice) if dice is not None else None,
            move=data.get("move"),
            state_hash=data["stateHash"],
        )


@dataclass(frozen=True)
class MatchLog:
    """Complete audit record of a match."""

    game_id: GameId
    player_count: int
    seed: Optional[int]
    initial_hash: str
    entries: Tuple[LogEntry, ...] = ()
    result: Optional[GameResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": LOG_VERSION,
            "gameId": int(self.game_id),
            "playerCount": self.player_count,
            "seed": self.seed,
            "initialHash": self.initial_hash,
            "entries": [entry.to_dict() for entry in self.entries],
            "result": self.result.to_dict() if self.result is not None else None,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchLog":
        _expect(data, dict, "match log")
        version = data.get("version", LOG_VERSION)
        if version != LOG_VERSION:
            raise ValueError(f"Unsupported match log version: {version}")
        result = data.get("result")
        if result is not None:
            _expect(result, dict, "result")
        entries = _expect(data.get("entries", []), list, "entries")
        return cls(
            game_id=GameId.coerce(data["gameId"]),
            player_count=data["playerCount"],
            seed=data.get("seed"),
            initial_hash=data["initialHash"],
            entries=tuple(LogEntry.from_dict(e) for e in entries),
            result=GameResult(result["ended"], result["winnerIndex"]) if result else None,
        )

    @classmethod
    def from_json(cls, json_str: str) -> "MatchLog":
        return cls.from_dict(json.loads(json_str))


class MatchRecorder:
    """Builds a MatchLog one ply at a time."""

    def __init__(self, config: MatchConfig, initial_state: Any) -> None:
        self.config = config
        self.initial_hash = state_hash(config.game_id, initial_state)
        self.entries: List[LogEntry] = []

    def record(
        self,
        player: int,
        dice: Optional[Tuple[int, ...]],
        move: Any,
        state_after: Any,
    ) -> LogEntry:
        """Append a ply; move None records a roll that passed the turn."""
        game_id = self.config.game_id
        entry = LogEntry(
            ply=len(self.entries) + 1,
            player=player,
            dice=tuple(dice) if dice is not None else None,
            move=move_to_wire(game_id, move) if move is not None else None,
            state_hash=state_hash(game_id, state_after),
        )
        self.entries.append(entry)
        return entry

    def finish(self, result: Optional[GameResult] = None) -> MatchLog:
        return MatchLog(
            game_id=self.config.game_id,
            player_count=self.config.player_count,
            seed=self.config.seed,
            initial_hash=self.initial_hash,
            entries=tuple(self.entries),
            result=result,
        )


@dataclass
class ReplayResult:
    """Outcome of a successful replay."""

    final_state: Any
    result: GameResult
    plies: int
    hashes: List[str] = field(default_factory=list)


def replay(log: MatchLog) -> ReplayResult:
    """Re-run a logged match from its seed and check every ply.

    Dice are re-rolled through the dice bridge, never taken from the log,
    so a log whose dice disagree with the seed is rejected.

    Raises:
        ReplayMismatchError: The first ply that does not reproduce.
    """
    game_id = log.game_id
    state = engine.init_game(game_id, log.player_count, log.seed)
    if state_hash(game_id, state) != log.initial_hash:
        raise ReplayMismatchError(0, "initial state hash differs")

    hashes: List[str] = []
    for entry in log.entries:
        ply = entry.ply
        if engine.is_terminal(game_id, state).ended:
            raise ReplayMismatchError(ply, "entry recorded after the game ended")
        if state.turn != entry.player:
            raise ReplayMismatchError(ply, f"expected player {state.turn}, log has {entry.player}")

        rolled = None
        if dice_bridge.needs_roll(game_id, state):
            rolled, state = dice_bridge.roll_and_set(game_id, state)
        if rolled != entry.dice:
            raise ReplayMismatchError(ply, f"dice {rolled} differ from logged {entry.dice}")

        if entry.move is None:
            # Only a roll with no legal move may be logged without a move
            if rolled is None or not dice_bridge.needs_roll(game_id, state):
                raise ReplayMismatchError(ply, "missing move")
        else:
            try:
                move = move_from_wire(game_id, entry.move)
                state = engine.apply_move(game_id, state, move, strict=True)
            except EngineError as e:
                raise ReplayMismatchError(ply, str(e)) from e

        digest = state_hash(game_id, state)
        if digest != entry.state_hash:
            raise ReplayMismatchError(ply, "state hash differs")
        hashes.append(digest)

    result = engine.is_terminal(game_id, state)
    if log.result is not None and log.result != result:
        raise ReplayMismatchError(len(log.entries), f"logged result {log.result} but replay gives {result}")
    logger.debug("replayed %d plies of %s", len(log.entries), game_id.name)
    return ReplayResult(final_state=state, result=result, plies=len(log.entries), hashes=hashes)
