"""Abstract base class for the move choosers that back a search oracle."""

from __future__ import annotations

import abc
from dataclasses import dataclass

from connect4_tui.engine import GameState, Move


@dataclass(frozen=True)
class SearchResult:
    move: Move
    iterations: int


class Agent(abc.ABC):
    name: str

    @abc.abstractmethod
    def select_move(self, s: GameState, time_budget: float) -> SearchResult:
        """Pick a move for ``s.next_player``, spending at most ``time_budget`` seconds."""
        raise NotImplementedError
