# tests/ui/test_window.py
"""Unit tests for windows, the frame layout and scroll adjustment."""

from typing import Callable

import pytest

from stubs import ScriptedTerminal
from tinymacs.core.Buffer import Buffer, Cursor
from tinymacs.core.BufferList import BufferList, BufferRef
from tinymacs.core.Editor import Editor
from tinymacs.ui.Window import Region, Window, WindowList, adjust_scroll, get_current_window_region, get_layout


def test_window_lines_excludes_modeline() -> None:
    region = Region(top=0, height=10)
    assert Window(BufferRef.main(), show_modeline=True).window_lines(region) == 9
    assert Window(BufferRef.minibuffer()).window_lines(region) == 10
    assert Window(BufferRef.main(), show_modeline=True).window_lines(Region(0, 0)) == 0


@pytest.mark.parametrize(
    "scroll, height, expected",
    [(0, 9, 2), (0, 10, 3), (95, 10, 4)],
)
def test_pad_width(scroll: int, height: int, expected: int) -> None:
    window = Window(BufferRef.main(), scroll_line=scroll, show_lines=True)
    assert window.pad_width(Region(0, height)) == expected
    assert Window(BufferRef.main(), scroll_line=scroll).pad_width(Region(0, height)) == 0


def test_visible_lines() -> None:
    window = Window(BufferRef.main(), scroll_line=5, show_modeline=True)
    assert window.first_visible_line() == 5
    assert window.last_visible_line(Region(0, 11)) == 14


def test_window_list_focus() -> None:
    windows = WindowList()
    assert windows.current_window() is windows.main
    assert windows.main.show_modeline and not windows.minibuffer.show_modeline
    windows.minibuffer_focused = True
    assert windows.current_window() is windows.minibuffer


def test_layout_gives_minibuffer_its_lines_up_to_a_third() -> None:
    buffers = BufferList(Buffer(), Buffer.from_string("m"))
    layout = get_layout(24, buffers)
    assert layout.main_window_region == Region(0, 23)
    assert layout.minibuffer_region == Region(23, 1)

    buffers.minibuffer.set("\n".join("x" * 20))
    layout = get_layout(24, buffers)
    assert layout.minibuffer_region == Region(16, 8)
    assert layout.main_window_region == Region(0, 16)


def test_layout_on_tiny_terminal() -> None:
    layout = get_layout(2, BufferList(Buffer(), Buffer()))
    assert layout.minibuffer_region.height == 0
    assert layout.main_window_region.height == 2


def test_current_window_region(editor: Editor, term: ScriptedTerminal) -> None:
    assert get_current_window_region(term, editor) == Region(0, 23)
    editor.window_list.minibuffer_focused = True
    assert get_current_window_region(term, editor) == Region(23, 1)


def test_adjust_scroll_down_and_up(make_editor: Callable[..., Editor], make_term: Callable[..., ScriptedTerminal]) -> None:
    editor = make_editor("\n".join(str(i) for i in range(100)))
    term = make_term(rows=12)
    window = editor.window_list.main

    editor.main_buffer.cursor = Cursor(30, 0)
    adjust_scroll(term, editor)
    assert window.scroll_line == 21

    editor.main_buffer.cursor = Cursor(25, 0)
    adjust_scroll(term, editor)
    assert window.scroll_line == 21

    editor.main_buffer.cursor = Cursor(3, 0)
    adjust_scroll(term, editor)
    assert window.scroll_line == 3


def test_adjust_scroll_targets_given_window(make_editor: Callable[..., Editor], term: ScriptedTerminal) -> None:
    editor = make_editor("\n".join(str(i) for i in range(100)), cursor=(50, 0))
    editor.window_list.minibuffer_focused = True
    adjust_scroll(term, editor, editor.window_list.main)
    assert editor.window_list.main.scroll_line == 29
    assert editor.window_list.minibuffer.scroll_line == 0
