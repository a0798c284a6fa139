"""JSON wire format for moves and canonical state hashing.

Moves travel between players as small JSON objects; states are hashed
from a canonical dict (camelCase keys, sorted, no whitespace) so that every
party recording a match computes the same digest for the same position.
"""

import hashlib
import json
from typing import Any, Callable, Dict

from fairgames.errors import MoveDecodeError
from fairgames.games import backgammon, checkers, chess, dominoes, ludo
from fairgames.games.base import GameId


def _int(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MoveDecodeError(f"{key!r} must be an integer, got {value!r}")
    return value


def _square(value: Any, key: str = "square") -> tuple:
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or any(isinstance(v, bool) or not isinstance(v, int) for v in value)
    ):
        raise MoveDecodeError(f"{key!r} must be an [x, y] pair, got {value!r}")
    return tuple(value)


def _location(value: Any, key: str, marker: str) -> Any:
    if value == marker:
        return marker
    if isinstance(value, bool) or not isinstance(value, int):
        raise MoveDecodeError(f"{key!r} must be a point index or {marker!r}, got {value!r}")
    return value


# Chess

def _chess_move_to_wire(move: chess.ChessMove) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "from": list(move.from_square),
        "to": list(move.to_square),
    }
    if move.promotion is not None:
        d["promotion"] = move.promotion
    return d


def _chess_move_from_wire(payload: Dict[str, Any]) -> chess.ChessMove:
    promotion = payload.get("promotion")
    if promotion is not None and promotion not in chess.PROMOTION_PIECES:
        raise MoveDecodeError(f"Unknown promotion piece: {promotion!r}")
    return chess.ChessMove(
        _square(payload.get("from"), "from"),
        _square(payload.get("to"), "to"),
        promotion,
    )


def _chess_state_to_dict(state: chess.ChessState) -> Dict[str, Any]:
    return {
        "board": [
            [None if p is None else {"type": p.kind, "player": p.player} for p in column]
            for column in state.board
        ],
        "turn": state.turn,
        "castling": [
            {"kingSide": rights.king_side, "queenSide": rights.queen_side}
            for rights in state.castling
        ],
        "enPassant": list(state.en_passant) if state.en_passant else None,
        "halfMoveClock": state.half_move_clock,
        "fullMoveNumber": state.full_move_number,
        "kings": [list(square) for square in state.kings],
    }


# Checkers

def _checkers_move_to_wire(move: checkers.CheckersMove) -> Dict[str, Any]:
    return {
        "from": list(move.from_square),
        "to": list(move.to_square),
        "captures": [list(square) for square in move.captures],
    }


def _checkers_move_from_wire(payload: Dict[str, Any]) -> checkers.CheckersMove:
    captures = payload.get("captures", [])
    if not isinstance(captures, list):
        raise MoveDecodeError(f"'captures' must be a list, got {captures!r}")
    return checkers.CheckersMove(
        _square(payload.get("from"), "from"),
        _square(payload.get("to"), "to"),
        tuple(_square(c, "captures") for c in captures),
    )


def _checkers_state_to_dict(state: checkers.CheckersState) -> Dict[str, Any]:
    return {
        "board": [
            [None if p is None else {"player": p.player, "isKing": p.is_king} for p in column]
            for column in state.board
        ],
        "turn": state.turn,
        "mustContinueFrom": list(state.must_continue_from) if state.must_continue_from else None,
        "moveCount": state.move_count,
    }


# Backgammon

def _backgammon_move_to_wire(move: backgammon.BackgammonMove) -> Dict[str, Any]:
    return {"from": move.from_point, "to": move.to_point, "die": move.die}


def _backgammon_move_from_wire(payload: Dict[str, Any]) -> backgammon.BackgammonMove:
    return backgammon.BackgammonMove(
        _location(payload.get("from"), "from", backgammon.BAR),
        _location(payload.get("to"), "to", backgammon.OFF),
        _int(payload, "die"),
    )


def _backgammon_state_to_dict(state: backgammon.BackgammonState) -> Dict[str, Any]:
    return {
        "points": list(state.points),
        "bar": list(state.bar),
        "borneOff": list(state.borne_off),
        "turn": state.turn,
        "dice": list(state.dice) if state.dice else None,
        "remainingDice": list(state.remaining_dice),
        "moveCount": state.move_count,
        "seed": state.seed,
    }


# Ludo

def _ludo_move_to_wire(move: ludo.LudoMove) -> Dict[str, Any]:
    return {"tokenIndex": move.token_index, "steps": move.steps}


def _ludo_move_from_wire(payload: Dict[str, Any]) -> ludo.LudoMove:
    return ludo.LudoMove(_int(payload, "tokenIndex"), _int(payload, "steps"))


def _ludo_state_to_dict(state: ludo.LudoState) -> Dict[str, Any]:
    return {
        "tokens": [list(tokens) for tokens in state.tokens],
        "turn": state.turn,
        "dice": state.dice,
        "consecutiveSixes": state.consecutive_sixes,
        "playerCount": state.player_count,
        "moveCount": state.move_count,
        "seed": state.seed,
    }


# Dominoes

def _dominoes_move_to_wire(move: dominoes.DominoesMove) -> Dict[str, Any]:
    return {"tileIndex": move.tile_index, "end": move.end, "flip": move.flip}


def _dominoes_move_from_wire(payload: Dict[str, Any]) -> dominoes.DominoesMove:
    end = payload.get("end", dominoes.LEFT)
    if end not in (dominoes.LEFT, dominoes.RIGHT):
        raise MoveDecodeError(f"'end' must be 'left' or 'right', got {end!r}")
    flip = payload.get("flip", False)
    if not isinstance(flip, bool):
        raise MoveDecodeError(f"'flip' must be a boolean, got {flip!r}")
    return dominoes.DominoesMove(_int(payload, "tileIndex"), end, flip)


def _dominoes_state_to_dict(state: dominoes.DominoesState) -> Dict[str, Any]:
    return {
        "hands": [[list(tile) for tile in hand] for hand in state.hands],
        "line": [list(tile) for tile in state.line],
        "boneyard": [list(tile) for tile in state.boneyard],
        "turn": state.turn,
        "leftEnd": state.left_end,
        "rightEnd": state.right_end,
        "passed": list(state.passed),
        "playerCount": state.player_count,
        "moveCount": state.move_count,
        "seed": state.seed,
    }


_MOVE_ENCODERS: Dict[GameId, Callable[[Any], Dict[str, Any]]] = {
    GameId.CHESS: _chess_move_to_wire,
    GameId.DOMINOES: _dominoes_move_to_wire,
    GameId.BACKGAMMON: _backgammon_move_to_wire,
    GameId.CHECKERS: _checkers_move_to_wire,
    GameId.LUDO: _ludo_move_to_wire,
}

_MOVE_DECODERS: Dict[GameId, Callable[[Dict[str, Any]], Any]] = {
    GameId.CHESS: _chess_move_from_wire,
    GameId.DOMINOES: _dominoes_move_from_wire,
    GameId.BACKGAMMON: _backgammon_move_from_wire,
    GameId.CHECKERS: _checkers_move_from_wire,
    GameId.LUDO: _ludo_move_from_wire,
}

_STATE_ENCODERS: Dict[GameId, Callable[[Any], Dict[str, Any]]] = {
    GameId.CHESS: _chess_state_to_dict,
    GameId.DOMINOES: _dominoes_state_to_dict,
    GameId.BACKGAMMON: _backgammon_state_to_dict,
    GameId.CHECKERS: _checkers_state_to_dict,
    GameId.LUDO: _ludo_state_to_dict,
}


def move_to_wire(game_id: Any, move: Any) -> Dict[str, Any]:
    """Convert a move to its JSON-serializable wire dict."""
    return _MOVE_ENCODERS[GameId.coerce(game_id)](move)


def move_from_wire(game_id: Any, payload: Any) -> Any:
    """Build a move from a wire dict.

    Raises:
        MoveDecodeError: If the payload is not a dict or has bad fields.
    """
    game = GameId.coerce(game_id)
    if not isinstance(payload, dict):
        raise MoveDecodeError(f"Move payload must be an object, got {type(payload).__name__}")
    return _MOVE_DECODERS[game](payload)


def move_to_json(game_id: Any, move: Any) -> str:
    return json.dumps(move_to_wire(game_id, move))


def move_from_json(game_id: Any, json_str: str) -> Any:
    try:
        payload = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise MoveDecodeError(f"Move is not valid JSON: {e}") from e
    return move_from_wire(game_id, payload)


def state_to_dict(game_id: Any, state: Any) -> Dict[str, Any]:
    """Convert a state to a JSON-serializable dict with camelCase keys."""
    return _STATE_ENCODERS[GameId.coerce(game_id)](state)


def canonical_json(data: Any) -> str:
    """Sorted keys and no whitespace; the input to state_hash."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def state_hash(game_id: Any, state: Any) -> str:
    """SHA-256 hex digest of the canonical state dict."""
    encoded = canonical_json(state_to_dict(game_id, state)).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()

