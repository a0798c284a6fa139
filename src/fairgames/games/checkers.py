"""Checkers (8x8 draughts) rules.

Pieces sit on squares where (x + y) is odd. Player 0 starts on rows 0-2 and
moves towards row 7; player 1 starts on rows 5-7. Capturing is mandatory,
and a capture that leaves the same piece able to capture again keeps the
turn with that player, who must continue from the landing square.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from fairgames.games.base import (
    ONGOING,
    GameResult,
    Square,
    check_player_count,
    other,
    won_by,
)

PLAYER_RANGE = (2, 2)
MAN_DIRECTIONS = {0: ((1, 1), (-1, 1)), 1: ((1, -1), (-1, -1))}
KING_DIRECTIONS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


@dataclass(frozen=True)
class CheckersPiece:
    player: int
    is_king: bool = False


Board = Tuple[Tuple[Optional[CheckersPiece], ...], ...]


@dataclass(frozen=True)
class CheckersState:
    """Immutable checkers position."""

    board: Board
    turn: int
    must_continue_from: Optional[Square]
    move_count: int


@dataclass(frozen=True)
class CheckersMove:
    """A step or a jump chain; captures lists jumped squares in order."""

    from_square: Square
    to_square: Square
    captures: Tuple[Square, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "from_square", tuple(self.from_square))
        object.__setattr__(self, "to_square", tuple(self.to_square))
        object.__setattr__(self, "captures", tuple(tuple(c) for c in self.captures))

    @property
    def is_capture(self) -> bool:
        return len(self.captures) > 0

    def landings(self) -> Tuple[Square, ...]:
        """Squares the piece lands on, one per captured piece."""
        squares = []
        x, y = self.from_square
        for cx, cy in self.captures:
            x, y = 2 * cx - x, 2 * cy - y
            squares.append((x, y))
        return tuple(squares)


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < 8 and 0 <= y < 8


def promotion_row(player: int) -> int:
    return 7 if player == 0 else 0


def _directions(piece: CheckersPiece):
    return KING_DIRECTIONS if piece.is_king else MAN_DIRECTIONS[piece.player]


def init_state(player_count: int = 2, seed: Optional[int] = None) -> CheckersState:
    """Twelve men per side on the dark squares. Seed is ignored."""
    check_player_count("Checkers", player_count, *PLAYER_RANGE)
    columns = []
    for x in range(8):
        column: List[Optional[CheckersPiece]] = [None] * 8
        for y in range(8):
            if (x + y) % 2 != 1:
                continue
            if y < 3:
                column[y] = CheckersPiece(0)
            elif y > 4:
                column[y] = CheckersPiece(1)
        columns.append(tuple(column))
    return CheckersState(board=tuple(columns), turn=0, must_continue_from=None, move_count=0)


def _with_squares(board: Board, changes) -> Board:
    """Copy of board with the given {square: piece} changes."""
    columns = [list(column) for column in board]
    for (x, y), piece in changes.items():
        columns[x][y] = piece
    return tuple(tuple(column) for column in columns)


def _capture_moves(board: Board, x: int, y: int) -> List[CheckersMove]:
    """Every jump path starting at (x, y), in depth-first pre-order.

    Each frame carries its own board snapshot, so sibling branches never
    see pieces removed by one another. A man reaching its promotion row is
    a king for the remaining jumps of the chain.
    """
    origin = (x, y)
    moves: List[CheckersMove] = []
    # (board snapshot, position, moving piece, move so far, captured squares)
    stack: List[Tuple[Board, Square, CheckersPiece, Optional[CheckersMove], FrozenSet[Square]]] = [
        (board, origin, board[x][y], None, frozenset())
    ]

    while stack:
        snapshot, (px, py), mover, reached_by, visited = stack.pop()
        if reached_by is not None:
            moves.append(reached_by)
        captures = reached_by.captures if reached_by is not None else ()
        children = []
        for dx, dy in _directions(mover):
            mx, my = px + dx, py + dy
            tx, ty = px + 2 * dx, py + 2 * dy
            if not in_bounds(tx, ty) or (mx, my) in visited:
                continue
            middle = snapshot[mx][my]
            if middle is None or middle.player == mover.player or snapshot[tx][ty] is not None:
                continue
            landed = mover
            if not mover.is_king and ty == promotion_row(mover.player):
                landed = CheckersPiece(mover.player, True)
            next_board = _with_squares(snapshot, {(px, py): None, (mx, my): None, (tx, ty): landed})
            move = CheckersMove(origin, (tx, ty), captures + ((mx, my),))
            children.append((next_board, (tx, ty), landed, move, visited | {(mx, my)}))
        # Pushed in reverse so the first direction is popped first
        stack.extend(reversed(children))
    return moves


def _simple_moves(board: Board, x: int, y: int) -> List[CheckersMove]:
    moves = []
    for dx, dy in _directions(board[x][y]):
        tx, ty = x + dx, y + dy
        if in_bounds(tx, ty) and board[tx][ty] is None:
            moves.append(CheckersMove((x, y), (tx, ty)))
    return moves


def legal_moves(state: CheckersState) -> List[CheckersMove]:
    """Legal moves; only captures when any capture exists."""
    board = state.board
    if state.must_continue_from is not None:
        x, y = state.must_continue_from
        if board[x][y] is None:
            return []
        return _capture_moves(board, x, y)

    own = [
        (x, y)
        for x in range(8)
        for y in range(8)
        if board[x][y] is not None and board[x][y].player == state.turn
    ]
    captures = [move for x, y in own for move in _capture_moves(board, x, y)]
    if captures:
        return captures
    return [move for x, y in own for move in _simple_moves(board, x, y)]


def validate_move(state: CheckersState, move: CheckersMove, player_index: int) -> bool:
    if state.turn != player_index:
        return False
    return move in legal_moves(state)


def apply_move(state: CheckersState, move: CheckersMove) -> CheckersState:
    """Apply a validated move; keeps the turn if the piece can jump again."""
    fx, fy = move.from_square
    piece = state.board[fx][fy]
    crowned = piece.is_king or any(
        y == promotion_row(piece.player) for _, y in (move.landings() or (move.to_square,))
    )
    changes = {square: None for square in move.captures}
    changes[move.from_square] = None
    changes[move.to_square] = CheckersPiece(piece.player, crowned)
    board = _with_squares(state.board, changes)

    must_continue_from = None
    if move.is_capture:
        tx, ty = move.to_square
        if _capture_moves(board, tx, ty):
            must_continue_from = move.to_square

    return CheckersState(
        board=board,
        turn=state.turn if must_continue_from is not None else other(state.turn),
        must_continue_from=must_continue_from,
        move_count=state.move_count + 1,
    )


def piece_counts(state: CheckersState) -> Tuple[int, int]:
    counts = [0, 0]
    for column in state.board:
        for piece in column:
            if piece is not None:
                counts[piece.player] += 1
    return counts[0], counts[1]


def is_terminal(state: CheckersState) -> GameResult:
    """A side with no pieces, or no legal move on its turn, loses."""
    counts = piece_counts(state)
    if counts[0] == 0:
        return won_by(1)
    if counts[1] == 0:
        return won_by(0)
    if not legal_moves(state):
        return won_by(other(state.turn))
    return ONGOING
