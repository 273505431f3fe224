"""Asynchronous move search: submit a position, poll a one-shot handle, take the result."""

from __future__ import annotations

import abc
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import Optional

from connect4_tui.agents.base import Agent, SearchResult
from connect4_tui.engine import GameState

logger = logging.getLogger(__name__)

__all__ = ["OracleHandle", "SearchOracle", "SearchResult", "ThreadedOracle"]


class OracleHandle:
    """
    One-shot completion handle for an in-flight search.

    is_finished() never blocks. join() hands back the result exactly once and
    may only be called after is_finished() has returned True.
    """

    def __init__(self, future: "Future[SearchResult]") -> None:
        self._future = future
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def is_finished(self) -> bool:
        return self._future.done()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the search finishes (or ``timeout`` elapses). Not for use inside the tick loop."""
        done, _ = wait_futures([self._future], timeout=timeout)
        return bool(done)

    def join(self) -> SearchResult:
        if self._consumed:
            raise RuntimeError("search result already taken")
        if not self._future.done():
            raise RuntimeError("search result requested before the search finished")
        self._consumed = True
        # Re-raises whatever the search raised.
        return self._future.result()


class SearchOracle(abc.ABC):
    @abc.abstractmethod
    def submit(self, s: GameState, time_budget: float) -> OracleHandle:
        raise NotImplementedError

    def shutdown(self, wait: bool = True) -> None:
        pass


class ThreadedOracle(SearchOracle):
    """
    Runs an Agent on a single background worker.

    GameState is immutable, so the worker reads the same snapshot the caller
    keeps without any locking.
    """

    def __init__(self, agent: Agent) -> None:
        self.agent = agent
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="search")

    def submit(self, s: GameState, time_budget: float) -> OracleHandle:
        if time_budget <= 0:
            raise ValueError("time_budget must be > 0")
        logger.debug("submitting search to %s (budget %.2fs)", self.agent.name, time_budget)
        future = self._executor.submit(self._run, s, time_budget)
        return OracleHandle(future)

    def _run(self, s: GameState, time_budget: float) -> SearchResult:
        start = time.perf_counter()
        result = self.agent.select_move(s, time_budget)
        logger.debug(
            "%s finished: col %d after %d iterations in %.3fs",
            self.agent.name,
            result.move.column,
            result.iterations,
            time.perf_counter() - start,
        )
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
