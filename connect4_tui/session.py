"""Turn orchestration for one human-vs-computer game."""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

from connect4_tui.engine import (
    COLS,
    Cell,
    GameState,
    Line,
    Move,
    Outcome,
    apply_move,
    initial_state,
    legal_moves,
    terminal_result,
    winning_line,
)
from connect4_tui.oracle import OracleHandle, SearchOracle

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    AWAITING_HUMAN = "awaiting_human"
    WAITING_ON_ORACLE = "waiting_on_oracle"
    GAME_OVER = "game_over"


class Intent(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    CONFIRM = "confirm"
    QUIT = "quit"


@dataclass(frozen=True)
class SessionConfig:
    time_budget: float = 1.0  # seconds handed to the oracle per computer move
    message_limit: int = 50
    human: Cell = Cell.RED

    @property
    def computer(self) -> Cell:
        return self.human.opponent()

    def validate(self) -> None:
        if self.time_budget <= 0:
            raise ValueError("time_budget must be > 0")
        if self.message_limit < 1:
            raise ValueError("message_limit must be >= 1")
        if self.human == Cell.EMPTY:
            raise ValueError("human must play RED or BLACK")


@dataclass(frozen=True)
class Message:
    text: str
    kind: str  # "info" | "human" | "computer" | "outcome"


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to the presentation layer."""

    state: GameState
    phase: Phase
    column_selection: int
    messages: Tuple[Message, ...]  # most recent first
    outcome: Optional[Outcome]
    winning_line: Optional[Line]


class Session:
    """
    Drives a single game through AWAITING_HUMAN -> WAITING_ON_ORACLE -> ...

    The session never blocks: the computer's move is requested from the oracle
    right after a human move that didn't end the game, and tick() polls the
    returned handle once per loop iteration. At most one request is in flight,
    and its result is applied exactly once.
    """

    def __init__(
        self,
        oracle: SearchOracle,
        cfg: SessionConfig = SessionConfig(),
        *,
        state: Optional[GameState] = None,
    ) -> None:
        cfg.validate()
        self.cfg = cfg
        self.oracle = oracle
        self.state = state if state is not None else initial_state(cfg.computer, cfg.human)
        self.phase = Phase.AWAITING_HUMAN
        self.column_selection = 0
        self.outcome: Optional[Outcome] = None
        self.messages: Deque[Message] = deque(maxlen=cfg.message_limit)
        self.exit = False
        self._pending: Optional[OracleHandle] = None

        self._ensure_legal_selection()

    @property
    def human(self) -> Cell:
        return self.cfg.human

    @property
    def computer(self) -> Cell:
        return self.cfg.computer

    @property
    def awaiting_oracle(self) -> bool:
        return self._pending is not None

    def view(self) -> SessionView:
        return SessionView(
            state=self.state,
            phase=self.phase,
            column_selection=self.column_selection,
            messages=tuple(self.messages),
            outcome=self.outcome,
            winning_line=winning_line(self.state) if self.outcome is not None else None,
        )

    def post(self, text: str, kind: str = "info") -> None:
        self.messages.appendleft(Message(text=text, kind=kind))

    # -- intents ---------------------------------------------------------

    def handle(self, intent: Intent) -> None:
        if intent is Intent.QUIT:
            self.quit()
            return
        if self.phase is not Phase.AWAITING_HUMAN:
            logger.debug("ignoring %s while %s", intent.value, self.phase.value)
            return

        if intent is Intent.LEFT:
            self.move_left()
        elif intent is Intent.RIGHT:
            self.move_right()
        elif intent is Intent.CONFIRM:
            self.confirm_move()

    def select_column(self, direction: Intent) -> None:
        if direction is Intent.LEFT:
            self.move_left()
        elif direction is Intent.RIGHT:
            self.move_right()
        else:
            raise ValueError(f"not a direction: {direction}")

    def move_left(self) -> None:
        self._step_selection(-1)

    def move_right(self) -> None:
        self._step_selection(+1)

    def _step_selection(self, step: int) -> None:
        if self.phase is not Phase.AWAITING_HUMAN:
            return
        legal = {m.column for m in legal_moves(self.state)}
        col = self.column_selection + step
        while 0 <= col < COLS:
            if col in legal:
                self.column_selection = col
                return
            col += step

    def confirm_move(self) -> None:
        if self.phase is not Phase.AWAITING_HUMAN:
            logger.debug("ignoring confirm while %s", self.phase.value)
            return

        col = self.column_selection
        if col not in {m.column for m in legal_moves(self.state)}:
            raise ValueError(f"illegal move: column {col} is not playable")

        self.state = apply_move(self.state, Move(color=self.human, column=col))
        self._ensure_legal_selection()
        logger.info("human plays column %d", col)
        self.post(f"Playing to column {col + 1}", "human")

        if self._finish_if_terminal():
            return

        self._pending = self.oracle.submit(self.state, self.cfg.time_budget)
        self.phase = Phase.WAITING_ON_ORACLE

    def quit(self) -> None:
        self.exit = True

    # -- polling ---------------------------------------------------------

    def tick(self) -> None:
        if self.phase is not Phase.WAITING_ON_ORACLE or self._pending is None:
            return
        if not self._pending.is_finished():
            return

        handle, self._pending = self._pending, None
        result = handle.join()
        col = result.move.column

        self.state = apply_move(self.state, Move(color=self.computer, column=col))
        self._ensure_legal_selection()
        logger.info("computer plays column %d after %d iterations", col, result.iterations)
        self.post(
            f"AI plays to column {col + 1} after thinking for {result.iterations} moves.",
            "computer",
        )

        if self._finish_if_terminal():
            return

        self.phase = Phase.AWAITING_HUMAN

    def close(self) -> None:
        """
        Finish the session. A search still in flight can't be cancelled, so
        wait for it and discard its result.
        """

        if self._pending is None:
            return
        handle, self._pending = self._pending, None
        handle.wait()
        try:
            result = handle.join()
        except Exception:
            logger.exception("search failed while the session was closing")
            return
        logger.info("discarding unfinished turn: computer wanted column %d", result.move.column)

    # -- helpers ---------------------------------------------------------

    def _finish_if_terminal(self) -> bool:
        outcome = terminal_result(self.state)
        if outcome is None:
            return False

        self.outcome = outcome
        self.phase = Phase.GAME_OVER
        if outcome.is_win_for(self.human):
            self.post("You win!", "outcome")
        elif outcome.is_win_for(self.computer):
            self.post("AI wins!", "outcome")
        else:
            self.post("Tie", "outcome")
        logger.info("game over: %s", outcome.value)
        return True

    def _ensure_legal_selection(self) -> None:
        legal = [m.column for m in legal_moves(self.state)]
        if legal and self.column_selection not in legal:
            self.column_selection = legal[0]
