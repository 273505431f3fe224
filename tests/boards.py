"""Board fixtures shared by the test suites."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from connect4_tui.engine import COLS, ROWS, Cell, GameState

_SYMBOLS = {"R": Cell.RED, "B": Cell.BLACK, ".": Cell.EMPTY}


def board_from_rows(
    rows: Sequence[str],
    *,
    prev_player: Cell = Cell.BLACK,
    next_player: Cell = Cell.RED,
) -> GameState:
    """Build a state from six 7-char strings, top row first (R=red, B=black, .=empty)."""
    assert len(rows) == ROWS
    grid = np.zeros((ROWS, COLS), dtype=np.int8)
    for r, line in enumerate(rows):
        assert len(line) == COLS, line
        for c, ch in enumerate(line):
            grid[r, c] = int(_SYMBOLS[ch])
    return GameState(board=grid, prev_player=prev_player, next_player=next_player)


def board_with(cells, color: Cell) -> GameState:
    """Empty board with ``color`` at each (col, row) in ``cells``."""
    grid = np.zeros((ROWS, COLS), dtype=np.int8)
    for col, row in cells:
        grid[row, col] = int(color)
    return GameState(board=grid, prev_player=Cell.BLACK, next_player=Cell.RED)


# Full board with no four-in-a-row: rows alternate RRBBRRB / BBRRBBR.
FULL_TIE_ROWS = [
    "RRBBRRB",
    "BBRRBBR",
    "RRBBRRB",
    "BBRRBBR",
    "RRBBRRB",
    "BBRRBBR",
]
