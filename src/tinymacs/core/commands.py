# tinymacs/core/commands.py
"""commands.py
==================
Description:
-----------------------
The editing commands. Every command has the signature
``handler(editor, term) -> None`` and operates on the buffer of the focused
window. A command that cannot do its job raises :class:`CommandError`; the
event loop shows the message in the minibuffer and carries on. Composite
commands (``forward_char`` falling through to ``next_line``) stop at the
first error simply by letting it propagate.

``insert_char`` is the odd one out: it takes the character instead of the
terminal and is called for self-inserting keys.
"""

import logging
from typing import TYPE_CHECKING

from tinymacs.core.Buffer import leading_indent
from tinymacs.core.errors import CommandError, NoFileError, SaveError
from tinymacs.ui.DrawScreen import ding
from tinymacs.ui.Window import get_current_window_region

if TYPE_CHECKING:
    from tinymacs.core.Buffer import Buffer
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


logger = logging.getLogger("tinymacs")

# Lines of overlap kept between screens by next_screen/previous_screen.
CONTEXT_LINES = 2


def _prompt_end(editor: "Editor", buffer: "Buffer") -> int:
    """First editable column of the cursor line; non-zero only on a prompt line."""
    if buffer is editor.minibuffer and editor.window_list.minibuffer_focused and buffer.cursor.line == 0:
        return editor.prompt_length
    return 0


# --- Horizontal motion ---
def move_beginning_of_line(editor: "Editor", term: "Terminal") -> None:
    """Moves to the indentation, or to column 0 when already at or before it."""
    buffer = editor.current_buffer()
    indent = leading_indent(buffer.current_line())
    column = indent if buffer.cursor.column > indent else 0
    buffer.cursor.column = max(column, _prompt_end(editor, buffer))


def move_end_of_line(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    buffer.cursor.column = len(buffer.current_line())


def forward_char(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    if buffer.cursor.column < len(buffer.current_line()):
        buffer.cursor.column += 1
    else:
        next_line(editor, term)
        buffer.cursor.column = 0


def backward_char(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    boundary = _prompt_end(editor, buffer)
    if buffer.cursor.column > boundary:
        buffer.cursor.column -= 1
    elif boundary == 0:
        previous_line(editor, term)
        move_end_of_line(editor, term)


# --- Vertical motion ---
def next_line(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    if buffer.cursor.line >= buffer.lines_count() - 1:
        raise CommandError("End of buffer")
    goal = editor.goal_column.get_or_set(buffer.cursor.column)
    buffer.cursor.line += 1
    buffer.cursor.column = min(len(buffer.current_line()), goal)


def previous_line(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    if buffer.cursor.line <= 0:
        raise CommandError("Beginning of buffer")
    goal = editor.goal_column.get_or_set(buffer.cursor.column)
    buffer.cursor.line -= 1
    buffer.cursor.column = max(min(len(buffer.current_line()), goal), _prompt_end(editor, buffer))


def beginning_of_buffer(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    buffer.cursor.line = 0
    buffer.cursor.column = _prompt_end(editor, buffer)


def end_of_buffer(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    buffer.cursor.line = buffer.lines_count() - 1
    buffer.cursor.column = len(buffer.current_line())


def _screen_offset(editor: "Editor", term: "Terminal") -> int:
    region = get_current_window_region(term, editor)
    window_lines = editor.current_window().window_lines(region)
    return max(1, window_lines - 1 - CONTEXT_LINES)


def next_screen(editor: "Editor", term: "Terminal") -> None:
    """Scrolls forward one screen, keeping CONTEXT_LINES of overlap."""
    window = editor.current_window()
    buffer = editor.current_buffer()
    target = window.scroll_line + _screen_offset(editor, term)
    if target >= buffer.lines_count():
        raise CommandError("End of buffer")
    window.scroll_line = target
    buffer.cursor.line = target
    buffer.cursor.column = min(buffer.cursor.column, len(buffer.current_line()))


def previous_screen(editor: "Editor", term: "Terminal") -> None:
    window = editor.current_window()
    buffer = editor.current_buffer()
    if window.scroll_line == 0:
        raise CommandError("Beginning of buffer")
    offset = _screen_offset(editor, term)
    buffer.cursor.line = min(window.scroll_line + CONTEXT_LINES, buffer.lines_count() - 1)
    buffer.cursor.column = min(buffer.cursor.column, len(buffer.current_line()))
    window.scroll_line = max(0, window.scroll_line - offset)


# --- Editing ---
def insert_char(editor: "Editor", ch: str) -> None:
    buffer = editor.current_buffer()
    buffer.insert_char_at(buffer.cursor.line, buffer.cursor.column, ch)
    buffer.cursor.column += 1


def delete_backward_char(editor: "Editor", term: "Terminal") -> None:
    """Deletes the character before point, joining lines at column 0.

    Does nothing at the start of the buffer or right after a prompt.
    """
    buffer = editor.current_buffer()
    cursor = buffer.cursor
    if cursor.column > _prompt_end(editor, buffer):
        cursor.column -= 1
        buffer.remove_char_at(cursor.line, cursor.column)
    elif cursor.line > 0:
        text = buffer.remove_line(cursor.line)
        previous = buffer.get_line_unchecked(cursor.line - 1)
        buffer.set_line(cursor.line - 1, previous + text)
        cursor.line -= 1
        cursor.column = len(previous)


def delete_char(editor: "Editor", term: "Terminal") -> None:
    forward_char(editor, term)
    delete_backward_char(editor, term)


def kill_line(editor: "Editor", term: "Terminal") -> None:
    """Kills to the end of the line, or the newline when already there.

    At the end of the last line there is nothing to kill and the command does
    nothing. Consecutive kills accumulate in one kill ring entry.
    """
    buffer = editor.current_buffer()
    line, column = buffer.cursor.line, buffer.cursor.column
    text = buffer.get_line_unchecked(line)
    append = editor.last_command == "kill_line"

    if column == len(text):
        if line < buffer.lines_count() - 1:
            delete_char(editor, term)
            editor.kill_ring.kill("\n", append=append)
    else:
        buffer.set_line(line, text[:column])
        editor.kill_ring.kill(text[column:], append=append)


def yank(editor: "Editor", term: "Terminal") -> None:
    """Inserts the most recent kill at point and leaves point after it."""
    text = editor.kill_ring.latest()
    if text is None:
        raise CommandError("Kill ring is empty")

    buffer = editor.current_buffer()
    line, column = buffer.cursor.line, buffer.cursor.column
    current = buffer.get_line_unchecked(line)
    before, after = current[:column], current[column:]
    parts = text.split("\n")

    if len(parts) == 1:
        buffer.set_line(line, before + text + after)
        buffer.cursor.column = column + len(text)
        return

    buffer.set_line(line, before + parts[0])
    for offset, part in enumerate(parts[1:-1], start=1):
        buffer.insert_line_at(line + offset, part)
    buffer.insert_line_at(line + len(parts) - 1, parts[-1] + after)
    buffer.cursor.line = line + len(parts) - 1
    buffer.cursor.column = len(parts[-1])


def newline(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    line, column = buffer.cursor.line, buffer.cursor.column
    text = buffer.get_line_unchecked(line)
    buffer.set_line(line, text[:column])
    buffer.insert_line_at(line + 1, text[column:])
    buffer.cursor.line = line + 1
    buffer.cursor.column = 0


def indent_line(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    indent = leading_indent(buffer.current_line())
    if buffer.cursor.column < indent:
        buffer.cursor.column = indent


# --- Files ---
def save_buffer(editor: "Editor", term: "Terminal") -> None:
    buffer = editor.current_buffer()
    try:
        path = buffer.save()
    except NoFileError as e:
        raise CommandError("No file") from e
    except SaveError as e:
        raise CommandError("Could not save file") from e
    editor.message(f"Wrote {path}")


# --- Display ---
def toggle_line_numbers(editor: "Editor", term: "Terminal") -> None:
    window = editor.window_list.main
    window.show_lines = not window.show_lines
    logger.debug(f"Line numbers {'on' if window.show_lines else 'off'}.")


# --- Loop control ---
def kill_editor(editor: "Editor", term: "Terminal") -> None:
    editor.event_loop.complete(True)


def keyboard_quit(editor: "Editor", term: "Terminal") -> None:
    """Aborts the innermost event loop with a flash and a "Quit" message."""
    editor.message("Quit")
    ding(term, editor)
    editor.event_loop.complete(False)


def minibuffer_complete(editor: "Editor", term: "Terminal") -> None:
    editor.event_loop.complete(True)
