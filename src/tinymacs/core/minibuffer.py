# tinymacs/core/minibuffer.py
"""minibuffer.py
==================
Description:
-----------------------
Commands that prompt in the minibuffer by running a nested event loop.

- ``isearch_forward`` (C-s): incremental search. Every key typed into the
  prompt re-runs the search on the main buffer, moves its cursor to the end
  of the match and highlights the query. C-s inside the search jumps to the
  next match, RET or any key the search does not use ends it, and C-g puts
  the cursor back where the search started.
- ``execute_extended_command`` (M-x): runs a command by name.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from tinymacs.core import commands
from tinymacs.core.Buffer import Buffer, Cursor
from tinymacs.core.errors import CommandError, QuitError
from tinymacs.core.EventLoop import read_string
from tinymacs.core.Keymap import Keymap
from tinymacs.ui.DrawScreen import ding
from tinymacs.ui.Window import adjust_scroll

if TYPE_CHECKING:
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


logger = logging.getLogger("tinymacs")

ISEARCH_PROMPT = "I-search: "
EXTENDED_COMMAND_PROMPT = "M-x "


@dataclass
class IsearchState:
    """Bookkeeping for an active incremental search."""

    origin_line: int
    origin_column: int
    query: str = ""
    # Offset into the buffer text where the current match starts.
    match_start: Optional[int] = None


# --- Offsets into the whole buffer text ---
def _offset_of(buffer: Buffer, line: int, column: int) -> int:
    return sum(len(text) + 1 for text in buffer.lines[:line]) + column


def _cursor_at(buffer: Buffer, offset: int) -> Cursor:
    for line, text in enumerate(buffer.lines):
        if offset <= len(text):
            return Cursor(line, offset)
        offset -= len(text) + 1
    last = buffer.lines_count() - 1
    return Cursor(last, len(buffer.lines[last]))


def _search_query(editor: "Editor") -> str:
    return editor.minibuffer.to_string()[len(ISEARCH_PROMPT):]


def _show_match(term: "Terminal", editor: "Editor", state: IsearchState, found: Optional[int], query: str) -> None:
    """Moves the main cursor to the end of the match, or flashes on failure."""
    buffer = editor.main_buffer
    if found is None:
        logger.debug(f"isearch: no match for {query!r}")
        ding(term, editor)
        return
    state.match_start = found
    buffer.cursor = _cursor_at(buffer, found + len(query))
    adjust_scroll(term, editor, editor.window_list.main)


def _find(text: str, query: str, start: int) -> Optional[int]:
    found = text.find(query, start)
    return found if found >= 0 else None


def isearch_update(term: "Terminal", editor: "Editor") -> None:
    """Per-key callback of the search prompt."""
    state = editor.isearch
    if state is None:
        return
    buffer = editor.main_buffer
    query = _search_query(editor)
    buffer.highlight = query or None

    if not query:
        state.match_start = None
        buffer.cursor = Cursor(state.origin_line, state.origin_column)
        adjust_scroll(term, editor, editor.window_list.main)
        return
    if query == state.query:
        return

    state.query = query
    origin = _offset_of(buffer, state.origin_line, state.origin_column)
    start = state.match_start if state.match_start is not None else origin
    _show_match(term, editor, state, _find(buffer.to_string(), query, start), query)


def isearch_repeat_forward(editor: "Editor", term: "Terminal") -> None:
    """Jumps to the next match, wrapping to the top of the buffer."""
    state = editor.isearch
    if state is None:
        raise CommandError("No search in progress")
    query = _search_query(editor)
    if not query:
        return

    buffer = editor.main_buffer
    text = buffer.to_string()
    start = state.match_start + 1 if state.match_start is not None else _offset_of(
        buffer, state.origin_line, state.origin_column
    )
    found = _find(text, query, start)
    if found is None:
        found = _find(text, query, 0)
    state.query = query
    _show_match(term, editor, state, found, query)


def isearch_keymap() -> Keymap:
    """Bindings active while the search prompt is open."""
    keymap = Keymap("isearch")
    keymap.define_key("RET", commands.minibuffer_complete)
    keymap.define_key("DEL", commands.delete_backward_char)
    keymap.define_key("C-s", isearch_repeat_forward)
    keymap.define_key("C-g", commands.keyboard_quit)
    return keymap


def isearch_forward(editor: "Editor", term: "Terminal") -> None:
    """Incremental search forward from the cursor of the main buffer."""
    buffer = editor.main_buffer
    origin = Cursor(buffer.cursor.line, buffer.cursor.column)
    editor.isearch = IsearchState(origin.line, origin.column)
    try:
        read_string(
            term,
            editor,
            ISEARCH_PROMPT,
            callback=isearch_update,
            exit_on_undefined=True,
            keymap=isearch_keymap(),
        )
    except QuitError:
        buffer.cursor = origin
        raise
    finally:
        buffer.highlight = None
        editor.isearch = None
        adjust_scroll(term, editor, editor.window_list.main)


def execute_extended_command(editor: "Editor", term: "Terminal") -> None:
    """Reads a command name (``next-line`` or ``next_line``) and runs it."""
    name = read_string(term, editor, EXTENDED_COMMAND_PROMPT).strip()
    if not name:
        return
    handler = editor.commands.get(name.replace("-", "_"))
    if handler is None:
        raise CommandError(f"{name} is not a command")
    logger.debug(f"M-x {name}")
    handler(editor, term)
