"""Connect-4 against the computer in the terminal (engine + session + TUI)."""

import logging

from connect4_tui.engine import Cell, GameState, Move, Outcome

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["Cell", "GameState", "Move", "Outcome"]
