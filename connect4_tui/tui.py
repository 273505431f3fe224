"""Terminal rendering and key handling for an interactive session."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from typing import Dict, List, Optional, Set, TextIO

from rich import box
from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from connect4_tui.engine import COLS, ROWS, Cell, Coord, GameState
from connect4_tui.session import Intent, Phase, SessionView

# -- keys ------------------------------------------------------------------

_SEQUENCES: Dict[bytes, Intent] = {
    b"\x1b[D": Intent.LEFT,
    b"\x1b[C": Intent.RIGHT,
    b"\x1bOD": Intent.LEFT,
    b"\x1bOC": Intent.RIGHT,
}

_KEYS: Dict[bytes, Intent] = {
    b"h": Intent.LEFT,
    b"a": Intent.LEFT,
    b"l": Intent.RIGHT,
    b"d": Intent.RIGHT,
    b"\r": Intent.CONFIRM,
    b"\n": Intent.CONFIRM,
    b" ": Intent.CONFIRM,
    b"q": Intent.QUIT,
    b"Q": Intent.QUIT,
    b"\x1b": Intent.QUIT,
}


def decode_keys(data: bytes) -> List[Intent]:
    """
    Translate raw terminal bytes into intents.

    Arrow keys arrive as three-byte escape sequences; any other sequence
    (up/down arrows, function keys) is skipped. A lone ESC quits.
    """

    intents: List[Intent] = []
    i = 0
    while i < len(data):
        # A sequence cut short by the read boundary is dropped, never read as a lone ESC.
        if data[i : i + 1] == b"\x1b" and data[i + 1 : i + 2] in (b"[", b"O"):
            seq = data[i : i + 3]
            if seq in _SEQUENCES:
                intents.append(_SEQUENCES[seq])
            i += 3
            continue

        intent = _KEYS.get(data[i : i + 1])
        if intent is not None:
            intents.append(intent)
        i += 1
    return intents


class KeyReader:
    """
    Puts a POSIX terminal in cbreak mode for the lifetime of the context and
    reads whatever bytes are pending without blocking past ``timeout``.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._fd = (stream or sys.stdin).fileno()
        self._saved: Optional[list] = None

    def __enter__(self) -> "KeyReader":
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(self, *exc) -> None:
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def read(self, timeout: float) -> bytes:
        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return b""
        return os.read(self._fd, 64)


# -- rendering -------------------------------------------------------------

_CELL_BG = "grey23"

_GLYPHS = {
    Cell.RED: ("O", "bright_blue"),
    Cell.BLACK: ("X", "bright_red"),
    Cell.EMPTY: ("─", "grey50"),
}

_MESSAGE_STYLES = {
    "info": "bright_green",
    "human": "bright_blue",
    "computer": "bright_red",
    "outcome": "bold",
}


def render_board(s: GameState) -> str:
    sym = {Cell.RED: "O", Cell.BLACK: "X", Cell.EMPTY: "."}
    lines: List[str] = []
    for r in range(ROWS):
        lines.append(" ".join(sym[s.cell_at(c, r)] for c in range(COLS)))
    lines.append("-" * (2 * COLS - 1))
    lines.append(" ".join(str(c + 1) for c in range(COLS)))
    return "\n".join(lines)


def _landing_row(s: GameState, col: int) -> Optional[int]:
    for r in range(ROWS - 1, -1, -1):
        if s.cell_at(col, r) == Cell.EMPTY:
            return r
    return None


def _board_text(view: SessionView) -> Text:
    s = view.state
    selected = view.column_selection
    landing = _landing_row(s, selected) if view.phase is Phase.AWAITING_HUMAN else None
    winners: Set[Coord] = set(view.winning_line or ())

    text = Text()
    for r in range(ROWS):
        for c in range(COLS):
            if c > 0:
                text.append("|", style="bright_blue")
            cell = s.cell_at(c, r)
            glyph, fg = _GLYPHS[cell]
            if landing is not None and c == selected and r <= landing:
                # Shade the drop path; the landing cell is brighter.
                bg = "white" if r == landing else "yellow"
                text.append(" ", style=f"black on {bg}")
                continue
            style = f"{fg} on {_CELL_BG}"
            if (c, r) in winners:
                style += " reverse"
            text.append(glyph, style=style)
        if r < ROWS - 1:
            text.append("\n")
    return text


class SessionRenderer:
    """Builds the full-screen layout for a SessionView: board, messages, and a spinner while the computer thinks."""

    def __init__(self, *, history: int = 10) -> None:
        self.history = history
        self._spinner = Spinner("dots", text="AI is thinking...", style="bright_red")

    def __call__(self, view: SessionView) -> RenderableType:
        board = Panel(
            _board_text(view),
            title="[bold]Board[/bold]",
            box=box.SQUARE,
            expand=False,
        )
        label = Align.center(Text(f"column {view.column_selection + 1}", style="green"), width=2 * COLS + 3)
        left_parts: List[RenderableType] = [board, label]
        if view.phase is Phase.WAITING_ON_ORACLE:
            left_parts.append(self._spinner)

        recent = list(view.messages[: self.history])
        recent.reverse()
        lines = [Text(m.text, style=_MESSAGE_STYLES.get(m.kind, "")) for m in recent]
        messages = Panel(
            Text("\n").join(lines),
            title="[bold]Messages[/bold]",
            box=box.HORIZONTALS,
        )

        grid = Table.grid(padding=(0, 2))
        grid.add_column(no_wrap=True)
        grid.add_column(ratio=1)
        grid.add_row(Group(*left_parts), messages)
        return grid
