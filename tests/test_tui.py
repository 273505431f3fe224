import unittest

from rich.console import Console

from connect4_tui.engine import Cell, Move, apply_move, initial_state
from connect4_tui.session import Intent, Message, Phase, SessionView
from connect4_tui.tui import SessionRenderer, decode_keys, render_board
from tests.boards import board_with


def _view(state, phase=Phase.AWAITING_HUMAN, messages=(), winning=None, column=0):
    return SessionView(
        state=state,
        phase=phase,
        column_selection=column,
        messages=tuple(messages),
        outcome=None,
        winning_line=winning,
    )


def _render_text(renderable) -> str:
    console = Console(record=True, width=100, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestDecodeKeys(unittest.TestCase):
    def test_arrows(self):
        self.assertEqual(decode_keys(b"\x1b[D\x1b[C"), [Intent.LEFT, Intent.RIGHT])
        self.assertEqual(decode_keys(b"\x1bOD"), [Intent.LEFT])

    def test_confirm_and_quit(self):
        self.assertEqual(decode_keys(b"\r"), [Intent.CONFIRM])
        self.assertEqual(decode_keys(b" \n"), [Intent.CONFIRM, Intent.CONFIRM])
        self.assertEqual(decode_keys(b"q"), [Intent.QUIT])
        self.assertEqual(decode_keys(b"\x1b"), [Intent.QUIT])

    def test_letters(self):
        self.assertEqual(decode_keys(b"hlad"), [Intent.LEFT, Intent.RIGHT, Intent.LEFT, Intent.RIGHT])

    def test_unknown_sequences_and_keys_ignored(self):
        self.assertEqual(decode_keys(b"\x1b[A\x1b[Bxyz7"), [])
        self.assertEqual(decode_keys(b""), [])

    def test_sequence_split_by_read_boundary_is_dropped(self):
        self.assertEqual(decode_keys(b"\x1b["), [])
        self.assertEqual(decode_keys(b"\x1bO"), [])
        self.assertEqual(decode_keys(b"\r\x1b["), [Intent.CONFIRM])
        self.assertNotIn(Intent.QUIT, decode_keys(b"\x1b[") + decode_keys(b"D"))

    def test_mixed_burst(self):
        self.assertEqual(
            decode_keys(b"\x1b[C\x1b[C\r"),
            [Intent.RIGHT, Intent.RIGHT, Intent.CONFIRM],
        )


class TestRenderBoard(unittest.TestCase):
    def test_plain_board(self):
        s = initial_state(Cell.BLACK, Cell.RED)
        s = apply_move(s, Move(Cell.RED, 0))
        s = apply_move(s, Move(Cell.BLACK, 6))
        lines = render_board(s).splitlines()
        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[0], ". . . . . . .")
        self.assertEqual(lines[5], "O . . . . . X")
        self.assertEqual(lines[7], "1 2 3 4 5 6 7")


class TestSessionRenderer(unittest.TestCase):
    def test_layout_contains_panels_and_selection(self):
        renderer = SessionRenderer(history=2)
        view = _view(
            initial_state(Cell.BLACK, Cell.RED),
            messages=[Message("third", "info"), Message("second", "human"), Message("first", "info")],
            column=4,
        )
        text = _render_text(renderer(view))
        self.assertIn("Board", text)
        self.assertIn("Messages", text)
        self.assertIn("column 5", text)
        self.assertIn("third", text)
        self.assertIn("second", text)
        self.assertNotIn("first", text)
        self.assertLess(text.index("second"), text.index("third"))

    def test_spinner_only_while_waiting(self):
        renderer = SessionRenderer()
        s = initial_state(Cell.BLACK, Cell.RED)
        self.assertIn("AI is thinking", _render_text(renderer(_view(s, Phase.WAITING_ON_ORACLE))))
        self.assertNotIn("AI is thinking", _render_text(renderer(_view(s))))

    def test_game_over_board_renders_tokens(self):
        line = ((1, 5), (2, 5), (3, 5), (4, 5))
        s = board_with(line, Cell.RED)
        text = _render_text(SessionRenderer()(_view(s, Phase.GAME_OVER, winning=line)))
        self.assertIn("O|O|O|O", text)


if __name__ == "__main__":
    unittest.main()
