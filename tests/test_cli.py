import unittest
from concurrent.futures import Future

from typer.testing import CliRunner

from connect4_tui.agents import SearchResult
from connect4_tui.cli import app, play_loop
from connect4_tui.engine import Cell, Move
from connect4_tui.oracle import OracleHandle, SearchOracle
from connect4_tui.session import Phase, Session


class InstantOracle(SearchOracle):
    def __init__(self, column):
        self.column = column
        self.calls = 0

    def submit(self, s, time_budget):
        self.calls += 1
        future = Future()
        future.set_result(SearchResult(move=Move(Cell.BLACK, self.column), iterations=5))
        return OracleHandle(future)


class ScriptedKeys:
    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.timeouts = []

    def __call__(self, timeout):
        self.timeouts.append(timeout)
        return self.chunks.pop(0) if self.chunks else b"q"


class TestPlayLoop(unittest.TestCase):
    def test_loop_plays_a_turn_and_quits(self):
        oracle = InstantOracle(column=6)
        session = Session(oracle)
        keys = ScriptedKeys([b"\x1b[C\r", b"", b"q"])
        frames = []

        play_loop(session, keys, frames.append, tick=0.016)

        self.assertTrue(session.exit)
        self.assertEqual(oracle.calls, 1)
        self.assertEqual(session.state.cell_at(1, 5), Cell.RED)
        self.assertEqual(session.state.cell_at(6, 5), Cell.BLACK)
        self.assertEqual(session.phase, Phase.AWAITING_HUMAN)
        self.assertEqual(len(frames), 3)
        self.assertTrue(all(t == 0.016 for t in keys.timeouts))

    def test_quit_stops_processing_the_burst(self):
        oracle = InstantOracle(column=6)
        session = Session(oracle)
        play_loop(session, ScriptedKeys([b"q\r"]), lambda view: None, tick=0.01)

        self.assertTrue(session.exit)
        self.assertEqual(oracle.calls, 0)


class TestCommand(unittest.TestCase):
    def test_rejects_bad_budget(self):
        result = CliRunner().invoke(app, ["--time-budget", "0"])
        self.assertNotEqual(result.exit_code, 0)

    def test_verbose_is_a_plain_flag(self):
        result = CliRunner().invoke(app, ["--verbose"])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("not a terminal", result.output)

    def test_requires_a_terminal(self):
        result = CliRunner().invoke(app, [])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("not a terminal", result.output)


if __name__ == "__main__":
    unittest.main()
