"""Move choosers that can sit behind a search oracle."""

from connect4_tui.agents.base import Agent, SearchResult
from connect4_tui.agents.random_agent import RandomAgent

__all__ = ["Agent", "SearchResult", "RandomAgent"]
