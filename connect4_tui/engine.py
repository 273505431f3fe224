"""
Connect-4 rules on the standard 7x6 grid.

Designed to be shared with a background search:
- GameState is a frozen dataclass over a read-only numpy board
- apply_move returns a new state and never touches its input
- terminal detection scans a precomputed table of every four-cell line
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

COLS = 7
ROWS = 6
CONNECT = 4

Coord = Tuple[int, int]  # (col, row), row 0 is the top
Line = Tuple[Coord, Coord, Coord, Coord]


class Cell(enum.IntEnum):
    EMPTY = 0
    RED = 1
    BLACK = -1

    def opponent(self) -> "Cell":
        if self is Cell.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Cell(-int(self))


@dataclass(frozen=True)
class Move:
    color: Cell
    column: int


class Outcome(enum.Enum):
    RED_WON = "red"
    BLACK_WON = "black"
    TIE = "tie"

    @property
    def winner(self) -> Optional[Cell]:
        if self is Outcome.RED_WON:
            return Cell.RED
        if self is Outcome.BLACK_WON:
            return Cell.BLACK
        return None

    def is_win_for(self, color: Cell) -> bool:
        return self.winner is not None and self.winner == color

    @classmethod
    def won_by(cls, color: Cell) -> "Outcome":
        if color == Cell.RED:
            return cls.RED_WON
        if color == Cell.BLACK:
            return cls.BLACK_WON
        raise ValueError("EMPTY cannot win")


@dataclass(frozen=True)
class GameState:
    board: np.ndarray  # shape (ROWS, COLS), dtype=int8, read-only
    prev_player: Cell
    next_player: Cell

    def __post_init__(self) -> None:
        board = np.array(self.board, dtype=np.int8)
        if board.shape != (ROWS, COLS):
            raise ValueError(f"board must have shape {(ROWS, COLS)}, got {board.shape}")
        board.flags.writeable = False
        object.__setattr__(self, "board", board)
        object.__setattr__(self, "prev_player", Cell(self.prev_player))
        object.__setattr__(self, "next_player", Cell(self.next_player))

    def cell_at(self, col: int, row: int) -> Cell:
        if not (0 <= col < COLS and 0 <= row < ROWS):
            raise ValueError(f"cell ({col}, {row}) out of range")
        return Cell(int(self.board[row, col]))


def initial_state(prev_player: Cell, next_player: Cell) -> GameState:
    if Cell.EMPTY in (prev_player, next_player):
        raise ValueError("players must be RED or BLACK")
    board = np.zeros((ROWS, COLS), dtype=np.int8)
    return GameState(board=board, prev_player=prev_player, next_player=next_player)


def legal_moves(s: GameState) -> List[Move]:
    open_cols = np.nonzero(s.board[0] == int(Cell.EMPTY))[0]
    return [Move(color=s.next_player, column=int(c)) for c in open_cols]


def apply_move(s: GameState, move: Move) -> GameState:
    col = move.column
    if col < 0 or col >= COLS:
        raise ValueError("col out of range")
    if move.color == Cell.EMPTY:
        raise ValueError("move color must be RED or BLACK")
    if s.board[0, col] != int(Cell.EMPTY):
        raise ValueError("illegal move: column full")

    # Lowest empty row; gravity keeps the empties contiguous from the top.
    row = int(np.nonzero(s.board[:, col] == int(Cell.EMPTY))[0][-1])
    board = s.board.copy()
    board[row, col] = int(move.color)

    return GameState(
        board=board,
        prev_player=move.color,
        next_player=move.color.opponent(),
    )


def _build_winning_lines() -> Tuple[Line, ...]:
    # (dcol, drow): horizontal, vertical, diagonal down-right, diagonal down-left
    directions = [(1, 0), (0, 1), (1, 1), (-1, 1)]
    lines: List[Line] = []
    for dc, dr in directions:
        for row in range(ROWS):
            for col in range(COLS):
                end_col = col + (CONNECT - 1) * dc
                end_row = row + (CONNECT - 1) * dr
                if not (0 <= end_col < COLS and 0 <= end_row < ROWS):
                    continue
                line = tuple((col + i * dc, row + i * dr) for i in range(CONNECT))
                lines.append(line)  # type: ignore[arg-type]
    return tuple(lines)


WINNING_LINES: Tuple[Line, ...] = _build_winning_lines()

# Fancy-index tables so every line can be gathered in one shot: shape (len(WINNING_LINES), CONNECT).
_LINE_ROWS = np.array([[r for _, r in line] for line in WINNING_LINES], dtype=np.intp)
_LINE_COLS = np.array([[c for c, _ in line] for line in WINNING_LINES], dtype=np.intp)


def _first_winning_index(s: GameState) -> Optional[int]:
    # Cells are +1/-1/0, so a line sums to +-CONNECT only when all four hold the same color.
    sums = s.board[_LINE_ROWS, _LINE_COLS].sum(axis=1)
    hits = np.nonzero(np.abs(sums) == CONNECT)[0]
    if len(hits) == 0:
        return None
    return int(hits[0])


def winning_line(s: GameState) -> Optional[Line]:
    idx = _first_winning_index(s)
    if idx is None:
        return None
    return WINNING_LINES[idx]


def terminal_result(s: GameState) -> Optional[Outcome]:
    """
    Return the outcome of a position, or None while the game continues.

    A four-in-a-row of either color wins (first line in WINNING_LINES order).
    Otherwise a full top row means a full board, which is a tie.
    """

    idx = _first_winning_index(s)
    if idx is not None:
        col, row = WINNING_LINES[idx][0]
        return Outcome.won_by(s.cell_at(col, row))
    if bool(np.all(s.board[0] != int(Cell.EMPTY))):
        return Outcome.TIE
    return None
