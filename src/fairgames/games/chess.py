"""Chess rules.

Board is indexed board[x][y] with x the file (0 = a) and y the rank
(0 = rank 1). Player 0 (white) starts on ranks 0-1 and moves towards
rank 7. Threefold repetition and insufficient material are not detected;
players settle those by agreement outside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from fairgames.games.base import (
    ONGOING,
    GameResult,
    Square,
    check_player_count,
    drawn,
    other,
    won_by,
)

PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = "p", "n", "b", "r", "q", "k"
PROMOTION_PIECES = (QUEEN, ROOK, BISHOP, KNIGHT)
BACK_ROW = (ROOK, KNIGHT, BISHOP, QUEEN, KING, BISHOP, KNIGHT, ROOK)

KNIGHT_STEPS = ((2, 1), (2, -1), (-2, 1), (-2, -1), (1, 2), (1, -2), (-1, 2), (-1, -2))
DIAGONALS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ORTHOGONALS = ((1, 0), (-1, 0), (0, 1), (0, -1))
ALL_DIRECTIONS = ORTHOGONALS + DIAGONALS

FIFTY_MOVE_HALF_MOVES = 100
PLAYER_RANGE = (2, 2)


@dataclass(frozen=True)
class Piece:
    """A chess piece; kind is one of p, n, b, r, q, k."""

    kind: str
    player: int


Board = Tuple[Tuple[Optional[Piece], ...], ...]


@dataclass(frozen=True)
class CastlingRights:
    king_side: bool = True
    queen_side: bool = True


@dataclass(frozen=True)
class ChessState:
    """Immutable chess position."""

    board: Board
    turn: int
    castling: Tuple[CastlingRights, CastlingRights]
    en_passant: Optional[Square]
    half_move_clock: int
    full_move_number: int
    kings: Tuple[Square, Square]

    def piece_at(self, x: int, y: int) -> Optional[Piece]:
        if not in_bounds(x, y):
            return None
        return self.board[x][y]


@dataclass(frozen=True)
class ChessMove:
    """From-square, to-square and optional promotion piece."""

    from_square: Square
    to_square: Square
    promotion: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept lists from decoded payloads; equality needs tuples
        object.__setattr__(self, "from_square", tuple(self.from_square))
        object.__setattr__(self, "to_square", tuple(self.to_square))


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < 8 and 0 <= y < 8


def _forward(player: int) -> int:
    return 1 if player == 0 else -1


def _home_row(player: int) -> int:
    return 0 if player == 0 else 7


def init_state(player_count: int = 2, seed: Optional[int] = None) -> ChessState:
    """Standard starting position. Chess uses no randomness; seed is ignored."""
    check_player_count("Chess", player_count, *PLAYER_RANGE)
    columns = []
    for x in range(8):
        column: List[Optional[Piece]] = [None] * 8
        column[0] = Piece(BACK_ROW[x], 0)
        column[1] = Piece(PAWN, 0)
        column[6] = Piece(PAWN, 1)
        column[7] = Piece(BACK_ROW[x], 1)
        columns.append(tuple(column))
    return ChessState(
        board=tuple(columns),
        turn=0,
        castling=(CastlingRights(), CastlingRights()),
        en_passant=None,
        half_move_clock=0,
        full_move_number=1,
        kings=((4, 0), (4, 7)),
    )


def is_square_attacked(state: ChessState, x: int, y: int, by_player: int) -> bool:
    """True if any piece of by_player attacks square (x, y)."""
    board = state.board

    # Pawns attack diagonally forward, so look one rank behind the target
    pawn_y = y - _forward(by_player)
    for dx in (-1, 1):
        piece = state.piece_at(x + dx, pawn_y)
        if piece is not None and piece.player == by_player and piece.kind == PAWN:
            return True

    for dx, dy in KNIGHT_STEPS:
        piece = state.piece_at(x + dx, y + dy)
        if piece is not None and piece.player == by_player and piece.kind == KNIGHT:
            return True

    for dx, dy in ALL_DIRECTIONS:
        piece = state.piece_at(x + dx, y + dy)
        if piece is not None and piece.player == by_player and piece.kind == KING:
            return True

    for directions, sliders in ((ORTHOGONALS, (ROOK, QUEEN)), (DIAGONALS, (BISHOP, QUEEN))):
        for dx, dy in directions:
            tx, ty = x + dx, y + dy
            while in_bounds(tx, ty):
                piece = board[tx][ty]
                if piece is not None:
                    if piece.player == by_player and piece.kind in sliders:
                        return True
                    break
                tx, ty = tx + dx, ty + dy
    return False


def is_in_check(state: ChessState, player: int) -> bool:
    kx, ky = state.kings[player]
    return is_square_attacked(state, kx, ky, other(player))


def _pseudo_legal_moves(state: ChessState) -> List[ChessMove]:
    """Moves by piece movement alone, before the own-king-in-check filter."""
    moves: List[ChessMove] = []
    player = state.turn
    board = state.board
    forward = _forward(player)

    for x in range(8):
        for y in range(8):
            piece = board[x][y]
            if piece is None or piece.player != player:
                continue

            def add(tx: int, ty: int, promotion: Optional[str] = None) -> None:
                if not in_bounds(tx, ty):
                    return
                target = board[tx][ty]
                if target is not None and target.player == player:
                    return
                moves.append(ChessMove((x, y), (tx, ty), promotion))

            def add_pawn(tx: int, ty: int) -> None:
                if ty == _home_row(other(player)):
                    for promotion in PROMOTION_PIECES:
                        add(tx, ty, promotion)
                else:
                    add(tx, ty)

            kind = piece.kind
            if kind == PAWN:
                start_row = 1 if player == 0 else 6
                if in_bounds(x, y + forward) and board[x][y + forward] is None:
                    add_pawn(x, y + forward)
                    if y == start_row and board[x][y + 2 * forward] is None:
                        add(x, y + 2 * forward)
                for dx in (-1, 1):
                    tx, ty = x + dx, y + forward
                    if not in_bounds(tx, ty):
                        continue
                    target = board[tx][ty]
                    if (target is not None and target.player != player) or state.en_passant == (tx, ty):
                        add_pawn(tx, ty)
            elif kind == KNIGHT:
                for dx, dy in KNIGHT_STEPS:
                    add(x + dx, y + dy)
            elif kind in (BISHOP, ROOK, QUEEN):
                directions = {BISHOP: DIAGONALS, ROOK: ORTHOGONALS, QUEEN: ALL_DIRECTIONS}[kind]
                for dx, dy in directions:
                    for i in range(1, 8):
                        tx, ty = x + i * dx, y + i * dy
                        if not in_bounds(tx, ty):
                            break
                        add(tx, ty)
                        if board[tx][ty] is not None:
                            break
            elif kind == KING:
                for dx, dy in ALL_DIRECTIONS:
                    add(x + dx, y + dy)
                moves.extend(_castling_moves(state, x, y))
    return moves


def _castling_moves(state: ChessState, x: int, y: int) -> List[ChessMove]:
    player = state.turn
    row = _home_row(player)
    opponent = other(player)
    board = state.board
    if (x, y) != (4, row) or is_in_check(state, player):
        return []

    def rook_ready(rook_x: int) -> bool:
        rook = board[rook_x][row]
        return rook is not None and rook.player == player and rook.kind == ROOK

    moves = []
    rights = state.castling[player]
    if (
        rights.king_side
        and rook_ready(7)
        and board[5][row] is None
        and board[6][row] is None
        and not is_square_attacked(state, 5, row, opponent)
        and not is_square_attacked(state, 6, row, opponent)
    ):
        moves.append(ChessMove((4, row), (6, row)))
    if (
        rights.queen_side
        and rook_ready(0)
        and board[3][row] is None
        and board[2][row] is None
        and board[1][row] is None
        and not is_square_attacked(state, 3, row, opponent)
        and not is_square_attacked(state, 2, row, opponent)
    ):
        moves.append(ChessMove((4, row), (2, row)))
    return moves


def legal_moves(state: ChessState) -> List[ChessMove]:
    """Every legal move for the side to move, in board scan order."""
    player = state.turn
    return [
        move
        for move in _pseudo_legal_moves(state)
        if not is_in_check(apply_move(state, move), player)
    ]


def validate_move(state: ChessState, move: ChessMove, player_index: int) -> bool:
    if state.turn != player_index:
        return False
    return move in legal_moves(state)


def apply_move(state: ChessState, move: ChessMove) -> ChessState:
    """Apply a validated move and hand the turn to the opponent."""
    columns = [list(column) for column in state.board]
    (fx, fy), (tx, ty) = move.from_square, move.to_square
    piece = columns[fx][fy]
    player = piece.player

    is_en_passant = piece.kind == PAWN and state.en_passant == (tx, ty)
    if is_en_passant:
        columns[tx][ty - _forward(player)] = None

    if piece.kind == KING and abs(tx - fx) == 2:
        if tx == 6:
            columns[5][fy], columns[7][fy] = columns[7][fy], None
        else:
            columns[3][fy], columns[0][fy] = columns[0][fy], None

    is_capture = state.board[tx][ty] is not None or is_en_passant
    columns[fx][fy] = None
    columns[tx][ty] = Piece(move.promotion, player) if move.promotion else piece

    kings = state.kings
    if piece.kind == KING:
        kings = tuple((tx, ty) if p == player else kings[p] for p in (0, 1))

    rights = list(state.castling)
    if piece.kind == KING:
        rights[player] = CastlingRights(False, False)
    elif piece.kind == ROOK and fy == _home_row(player):
        if fx == 0:
            rights[player] = replace(rights[player], queen_side=False)
        elif fx == 7:
            rights[player] = replace(rights[player], king_side=False)
    # A rook captured on its corner loses the right too
    for owner in (0, 1):
        if (tx, ty) == (0, _home_row(owner)):
            rights[owner] = replace(rights[owner], queen_side=False)
        elif (tx, ty) == (7, _home_row(owner)):
            rights[owner] = replace(rights[owner], king_side=False)

    en_passant = None
    if piece.kind == PAWN and abs(ty - fy) == 2:
        en_passant = (tx, (fy + ty) // 2)

    return ChessState(
        board=tuple(tuple(column) for column in columns),
        turn=other(player),
        castling=(rights[0], rights[1]),
        en_passant=en_passant,
        half_move_clock=0 if (is_capture or piece.kind == PAWN) else state.half_move_clock + 1,
        full_move_number=state.full_move_number + 1 if player == 1 else state.full_move_number,
        kings=kings,
    )


def is_terminal(state: ChessState) -> GameResult:
    """Checkmate, stalemate or the fifty-move rule."""
    if not legal_moves(state):
        if is_in_check(state, state.turn):
            return won_by(other(state.turn))
        return drawn()
    if state.half_move_clock >= FIFTY_MOVE_HALF_MOVES:
        return drawn()
    return ONGOING


_FILES = "abcdefgh"


def square_name(square: Square) -> str:
    x, y = square
    return f"{_FILES[x]}{y + 1}"


def to_fen(state: ChessState) -> str:
    """Render the position as a FEN string."""
    ranks = []
    for y in range(7, -1, -1):
        row = ""
        empty = 0
        for x in range(8):
            piece = state.board[x][y]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += piece.kind.upper() if piece.player == 0 else piece.kind
        if empty:
            row += str(empty)
        ranks.append(row)

    castling = ""
    for player, (king_mark, queen_mark) in ((0, "KQ"), (1, "kq")):
        if state.castling[player].king_side:
            castling += king_mark
        if state.castling[player].queen_side:
            castling += queen_mark

    en_passant = square_name(state.en_passant) if state.en_passant else "-"
    return " ".join([
        "/".join(ranks),
        "w" if state.turn == 0 else "b",
        castling or "-",
        en_passant,
        str(state.half_move_clock),
        str(state.full_move_number),
    ])


def from_fen(fen: str) -> ChessState:
    """Build a position from a FEN string (six fields)."""
    fields = fen.split()
    if len(fields) != 6:
        raise ValueError(f"FEN needs 6 fields, got {len(fields)}: {fen!r}")
    placement, active, castling, en_passant, half_moves, full_moves = fields

    columns: List[List[Optional[Piece]]] = [[None] * 8 for _ in range(8)]
    kings: List[Optional[Square]] = [None, None]
    rows = placement.split("/")
    if len(rows) != 8:
        raise ValueError(f"FEN placement needs 8 ranks: {placement!r}")
    for rank_index, row in enumerate(rows):
        y = 7 - rank_index
        x = 0
        for char in row:
            if char.isdigit():
                x += int(char)
                continue
            kind = char.lower()
            if kind not in "pnbrqk" or x > 7:
                raise ValueError(f"Bad FEN rank {row!r}")
            player = 0 if char.isupper() else 1
            columns[x][y] = Piece(kind, player)
            if kind == KING:
                kings[player] = (x, y)
            x += 1
        if x != 8:
            raise ValueError(f"FEN rank {row!r} does not cover 8 files")
    if kings[0] is None or kings[1] is None:
        raise ValueError("FEN must place both kings")

    ep = None
    if en_passant != "-":
        ep = (_FILES.index(en_passant[0]), int(en_passant[1]) - 1)

    return ChessState(
        board=tuple(tuple(column) for column in columns),
        turn=0 if active == "w" else 1,
        castling=(
            CastlingRights("K" in castling, "Q" in castling),
            CastlingRights("k" in castling, "q" in castling),
        ),
        en_passant=ep,
        half_move_clock=int(half_moves),
        full_move_number=int(full_moves),
        kings=(kings[0], kings[1]),
    )
