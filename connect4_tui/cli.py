"""Command-line entry point: play Connect-4 against the computer in the terminal."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.live import Live

from connect4_tui.agents import RandomAgent
from connect4_tui.engine import Outcome
from connect4_tui.oracle import ThreadedOracle
from connect4_tui.session import Session, SessionConfig, SessionView
from connect4_tui.tui import KeyReader, SessionRenderer, decode_keys, render_board

app = typer.Typer(add_completion=False)
console = Console()
logger = logging.getLogger(__name__)

ReadKeys = Callable[[float], bytes]
Draw = Callable[[SessionView], None]


def play_loop(session: Session, read_keys: ReadKeys, draw: Draw, *, tick: float) -> None:
    """
    Fixed-rate cooperative loop: draw, wait up to ``tick`` seconds for keys,
    dispatch them, then poll the pending search. Nothing here blocks longer
    than one tick.
    """

    while not session.exit:
        draw(session.view())
        for intent in decode_keys(read_keys(tick)):
            session.handle(intent)
            if session.exit:
                break
        session.tick()


def _configure_logging(log_file: Optional[Path], verbose: bool) -> None:
    # The UI owns the screen, so records only ever go to a file.
    if log_file is None:
        return
    logging.basicConfig(
        filename=str(log_file),
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _describe(outcome: Optional[Outcome], session: Session) -> str:
    if outcome is None:
        return "Result: game abandoned"
    if outcome is Outcome.TIE:
        return "Result: tie"
    return "Result: you win" if outcome.is_win_for(session.human) else "Result: AI wins"


@app.command()
def play(
    time_budget: float = typer.Option(1.0, help="Seconds the computer may think per move."),
    tick_ms: int = typer.Option(16, help="Interactive loop period in milliseconds."),
    think_delay: float = typer.Option(0.5, help="Pause before the computer answers (capped by the time budget)."),
    seed: Optional[int] = typer.Option(None, help="Random seed for the computer player."),
    history: int = typer.Option(10, help="Messages shown in the side panel."),
    log_file: Optional[Path] = typer.Option(None, help="Write logs to this file."),
    verbose: bool = typer.Option(False, "--verbose", help="Log at DEBUG level."),
) -> None:
    if tick_ms < 1:
        raise typer.BadParameter("tick-ms must be >= 1")
    if history < 1:
        raise typer.BadParameter("history must be >= 1")
    if think_delay < 0:
        raise typer.BadParameter("think-delay must be >= 0")

    cfg = SessionConfig(time_budget=time_budget)
    try:
        cfg.validate()
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    if not sys.stdin.isatty():
        console.print("stdin is not a terminal; run this from an interactive shell.")
        raise typer.Exit(code=2)

    _configure_logging(log_file, verbose)

    oracle = ThreadedOracle(RandomAgent("Random AI", seed=seed, delay=think_delay))
    session = Session(oracle, cfg)
    session.post("Use the arrow keys to choose where to play. Then press enter or spacebar.")
    session.post("Press Escape or q at any time to exit.")
    renderer = SessionRenderer(history=history)
    logger.info("session started (budget %.2fs, tick %dms)", time_budget, tick_ms)

    try:
        with KeyReader() as keys, Live(console=console, screen=True, auto_refresh=False) as live:

            def draw(view: SessionView) -> None:
                live.update(renderer(view), refresh=True)

            play_loop(session, keys.read, draw, tick=tick_ms / 1000.0)
    finally:
        try:
            session.close()
        finally:
            oracle.shutdown()

    console.print(render_board(session.state))
    console.print(_describe(session.outcome, session))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
