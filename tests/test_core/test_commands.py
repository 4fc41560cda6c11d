# tests/test_core/test_commands.py
"""Unit tests for the editing commands.
======================================

Commands are called directly with a real editor and a scripted terminal.
Boundary conditions are reported by raising `CommandError`; the event loop
turns that into a minibuffer message (see test_event_loop.py).
"""

from pathlib import Path
from typing import Callable

import pytest

from stubs import ScriptedTerminal
from tinymacs.core import commands
from tinymacs.core.Buffer import Cursor
from tinymacs.core.Editor import Editor
from tinymacs.core.errors import CommandError


def _cursor(editor: Editor) -> tuple[int, int]:
    cursor = editor.main_buffer.cursor
    return cursor.line, cursor.column


# --- Horizontal motion ---
def test_move_beginning_of_line_toggles_indent(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("  foo", cursor=(0, 5))
    commands.move_beginning_of_line(editor, term)
    assert _cursor(editor) == (0, 2)
    commands.move_beginning_of_line(editor, term)
    assert _cursor(editor) == (0, 0)


def test_move_beginning_of_line_on_blank_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("    ", cursor=(0, 4))
    commands.move_beginning_of_line(editor, term)
    assert _cursor(editor) == (0, 0)


def test_move_end_of_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("hello")
    commands.move_end_of_line(editor, term)
    assert _cursor(editor) == (0, 5)


def test_forward_char_wraps_to_next_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("ab\ncd", cursor=(0, 2))
    commands.forward_char(editor, term)
    assert _cursor(editor) == (1, 0)
    # Crossing the line is vertical motion: the column it started from is
    # kept as the goal.
    assert editor.goal_column.to_preserve is True
    assert editor.goal_column.column == 2


def test_forward_char_at_end_of_buffer(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("ab", cursor=(0, 2))
    with pytest.raises(CommandError, match="End of buffer"):
        commands.forward_char(editor, term)
    assert _cursor(editor) == (0, 2)


def test_backward_char_wraps_to_previous_line_end(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc\nd", cursor=(1, 0))
    commands.backward_char(editor, term)
    assert _cursor(editor) == (0, 3)


def test_backward_char_at_beginning_of_buffer(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc")
    with pytest.raises(CommandError, match="Beginning of buffer"):
        commands.backward_char(editor, term)
    assert _cursor(editor) == (0, 0)


# --- Vertical motion ---
def test_next_line_clamps_to_short_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abcdef\nab\nabcdef", cursor=(0, 4))
    commands.next_line(editor, term)
    assert _cursor(editor) == (1, 2)
    assert editor.goal_column.column == 4
    commands.next_line(editor, term)
    assert _cursor(editor) == (2, 4)


def test_next_line_at_last_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("one\ntwo", cursor=(1, 1))
    with pytest.raises(CommandError, match="End of buffer"):
        commands.next_line(editor, term)


def test_previous_line_at_first_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("one\ntwo")
    with pytest.raises(CommandError, match="Beginning of buffer"):
        commands.previous_line(editor, term)


def test_beginning_and_end_of_buffer(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("one\ntwo\nthree", cursor=(1, 1))
    commands.end_of_buffer(editor, term)
    assert _cursor(editor) == (2, 5)
    commands.beginning_of_buffer(editor, term)
    assert _cursor(editor) == (0, 0)


# --- Screens ---
def test_next_screen_scrolls_by_window_minus_context(
    make_editor: Callable[..., Editor], make_term: Callable[..., ScriptedTerminal]
) -> None:
    # 12 rows: 11 for the main region (one minibuffer line), 10 text lines.
    editor = make_editor("\n".join(f"line {i}" for i in range(40)))
    term = make_term(rows=12)
    commands.next_screen(editor, term)
    assert editor.window_list.main.scroll_line == 7
    assert _cursor(editor) == (7, 0)


def test_next_screen_at_end(make_editor: Callable[..., Editor], make_term: Callable[..., ScriptedTerminal]) -> None:
    editor = make_editor("a\nb\nc")
    term = make_term(rows=12)
    with pytest.raises(CommandError, match="End of buffer"):
        commands.next_screen(editor, term)
    assert editor.window_list.main.scroll_line == 0


def test_previous_screen(make_editor: Callable[..., Editor], make_term: Callable[..., ScriptedTerminal]) -> None:
    editor = make_editor("\n".join(f"line {i}" for i in range(40)))
    term = make_term(rows=12)
    editor.window_list.main.scroll_line = 10
    editor.main_buffer.cursor = Cursor(15, 0)
    commands.previous_screen(editor, term)
    assert _cursor(editor) == (12, 0)
    assert editor.window_list.main.scroll_line == 3


def test_previous_screen_at_top(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("a\nb")
    with pytest.raises(CommandError, match="Beginning of buffer"):
        commands.previous_screen(editor, term)


# --- Editing ---
def test_insert_char(make_editor: Callable[..., Editor]) -> None:
    editor = make_editor("ac", cursor=(0, 1))
    commands.insert_char(editor, "b")
    assert editor.main_buffer.to_string() == "abc"
    assert _cursor(editor) == (0, 2)


def test_delete_backward_char_joins_lines(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc\nde", cursor=(1, 0))
    commands.delete_backward_char(editor, term)
    assert editor.main_buffer.to_string() == "abcde"
    assert _cursor(editor) == (0, 3)


def test_delete_backward_char_at_start_is_noop(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc")
    commands.delete_backward_char(editor, term)
    assert editor.main_buffer.to_string() == "abc"


# --- Prompt boundary ---
def _prompting(editor: Editor, text: str, prompt: str, cursor: tuple[int, int]) -> None:
    editor.minibuffer.set(text)
    editor.minibuffer.cursor = Cursor(*cursor)
    editor.window_list.minibuffer_focused = True
    editor.prompt_length = len(prompt)


def test_motion_and_deletion_stop_at_prompt(editor: Editor, term: ScriptedTerminal) -> None:
    _prompting(editor, "M-x ", "M-x ", (0, 4))
    for command in (
        commands.delete_backward_char,
        commands.backward_char,
        commands.move_beginning_of_line,
        commands.beginning_of_buffer,
    ):
        command(editor, term)
        assert editor.minibuffer.to_string() == "M-x "
        assert editor.minibuffer.cursor == Cursor(0, 4)


def test_previous_line_onto_prompt_line_clamps(editor: Editor, term: ScriptedTerminal) -> None:
    _prompting(editor, "> ab\ncd", "> ", (1, 0))
    commands.previous_line(editor, term)
    assert editor.minibuffer.cursor == Cursor(0, 2)


def test_delete_backward_char_joins_onto_prompt_line(editor: Editor, term: ScriptedTerminal) -> None:
    _prompting(editor, "> ab\ncd", "> ", (1, 0))
    commands.delete_backward_char(editor, term)
    assert editor.minibuffer.to_string() == "> abcd"
    assert editor.minibuffer.cursor == Cursor(0, 4)


def test_prompt_boundary_ignored_when_minibuffer_unfocused(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abcd", cursor=(0, 4))
    editor.prompt_length = 2
    commands.move_beginning_of_line(editor, term)
    assert _cursor(editor) == (0, 0)


def test_delete_char(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc\nd", cursor=(0, 1))
    commands.delete_char(editor, term)
    assert editor.main_buffer.to_string() == "ac\nd"
    editor.main_buffer.cursor = Cursor(0, 2)
    commands.delete_char(editor, term)
    assert editor.main_buffer.to_string() == "acd"
    assert _cursor(editor) == (0, 2)


def test_kill_line_truncates_and_joins(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("hello world\nnext", cursor=(0, 5))
    commands.kill_line(editor, term)
    assert editor.main_buffer.to_string() == "hello\nnext"
    assert editor.kill_ring.latest() == " world"

    commands.kill_line(editor, term)
    assert editor.main_buffer.to_string() == "hellonext"
    assert editor.kill_ring.latest() == "\n"


def test_consecutive_kills_accumulate(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc\ndef", cursor=(0, 0))
    commands.kill_line(editor, term)
    editor.last_command = "kill_line"
    commands.kill_line(editor, term)
    commands.kill_line(editor, term)
    assert editor.main_buffer.to_string() == ""
    assert editor.kill_ring.latest() == "abc\ndef"
    assert len(editor.kill_ring) == 1


def test_kill_line_at_end_of_buffer_is_noop(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("abc", cursor=(0, 3))
    commands.kill_line(editor, term)
    assert editor.main_buffer.to_string() == "abc"
    assert editor.kill_ring.latest() is None


def test_yank_multiline(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("[]", cursor=(0, 1))
    editor.kill_ring.kill("one\ntwo")
    commands.yank(editor, term)
    assert editor.main_buffer.to_string() == "[one\ntwo]"
    assert _cursor(editor) == (1, 3)


def test_yank_single_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("ad", cursor=(0, 1))
    editor.kill_ring.kill("bc")
    commands.yank(editor, term)
    assert editor.main_buffer.to_string() == "abcd"
    assert _cursor(editor) == (0, 3)


def test_yank_empty_ring(editor: Editor, term: ScriptedTerminal) -> None:
    with pytest.raises(CommandError, match="Kill ring is empty"):
        commands.yank(editor, term)


def test_newline_splits_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("hello", cursor=(0, 2))
    commands.newline(editor, term)
    assert editor.main_buffer.lines == ["he", "llo"]
    assert _cursor(editor) == (1, 0)


def test_indent_line(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("    x", cursor=(0, 1))
    commands.indent_line(editor, term)
    assert _cursor(editor) == (0, 4)
    editor.main_buffer.cursor = Cursor(0, 5)
    commands.indent_line(editor, term)
    assert _cursor(editor) == (0, 5)


# --- Files ---
def test_save_buffer_writes_file(make_editor: Callable[..., Editor], term: ScriptedTerminal, tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    editor = make_editor("saved\ntext", filename=str(path))
    commands.save_buffer(editor, term)
    assert path.read_text() == "saved\ntext"
    assert editor.minibuffer.to_string() == f"Wrote {path}"


def test_save_buffer_without_file(editor: Editor, term: ScriptedTerminal) -> None:
    with pytest.raises(CommandError, match="No file"):
        commands.save_buffer(editor, term)


def test_save_buffer_io_failure(make_editor: Callable[..., Editor], term: ScriptedTerminal, tmp_path: Path) -> None:
    editor = make_editor("x", filename=str(tmp_path / "missing" / "out.txt"))
    with pytest.raises(CommandError, match="Could not save file"):
        commands.save_buffer(editor, term)


# --- Display and loop control ---
def test_toggle_line_numbers(editor: Editor, term: ScriptedTerminal) -> None:
    assert editor.window_list.main.show_lines is False
    commands.toggle_line_numbers(editor, term)
    assert editor.window_list.main.show_lines is True


def test_kill_editor_completes_ok(editor: Editor, term: ScriptedTerminal) -> None:
    commands.kill_editor(editor, term)
    assert editor.event_loop.result is True


def test_keyboard_quit(editor: Editor, term: ScriptedTerminal) -> None:
    commands.keyboard_quit(editor, term)
    assert editor.event_loop.result is False
    assert editor.minibuffer.to_string() == "Quit"
    # The flash is drawn with reverse video and typed-ahead input dropped.
    assert "\x1b[7m" in term.output
    assert term.discards == 1


def test_minibuffer_complete(editor: Editor, term: ScriptedTerminal) -> None:
    commands.minibuffer_complete(editor, term)
    assert editor.event_loop.result is True
