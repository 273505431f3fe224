"""Random baseline agent."""

from __future__ import annotations

import random
import time
from typing import Optional

from connect4_tui.agents.base import Agent, SearchResult
from connect4_tui.engine import GameState, legal_moves


class RandomAgent(Agent):
    def __init__(self, name: str, seed: Optional[int] = None, *, delay: float = 0.0) -> None:
        self.name = name
        self.rng = random.Random(seed)
        # Short pause so the computer's replies aren't instant.
        self.delay = delay

    def select_move(self, s: GameState, time_budget: float) -> SearchResult:
        legal = legal_moves(s)
        if not legal:
            raise ValueError("no legal moves available")

        pause = min(self.delay, time_budget)
        if pause > 0:
            time.sleep(pause)

        return SearchResult(move=self.rng.choice(legal), iterations=1)
