# tinymacs/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the editor state into a terminal frame.

It is responsible for:
- drawing each window's visible lines, padded to the full width so the
  previous frame is completely overwritten,
- the optional line-number gutter,
- marking occurrences of the buffer's highlight string,
- the modeline of the main window,
- placing the terminal cursor in the focused window,
- the "flash" variant used as a visual bell.

Each line is clipped by display cells using wcwidth. Control characters are
drawn as a single substitute cell so one string index stays one cell.
"""

import logging
import time
from typing import TYPE_CHECKING, Optional

from wcwidth import wcwidth

from tinymacs.core.Buffer import Buffer, display_name
from tinymacs.ui.Window import Region, Window, get_layout

if TYPE_CHECKING:
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


logger = logging.getLogger("tinymacs")


def visible_text(line: str, max_cells: int) -> tuple[str, int]:
    """Clips ``line`` to ``max_cells`` display cells.

    Returns:
        tuple[str, int]: The printable text and the number of cells it uses.
    """
    out: list[str] = []
    cells = 0
    for ch in line:
        if ch == "\t":
            ch, width = " ", 1
        elif ord(ch) < 0x20 or 0x7F <= ord(ch) < 0xA0:
            ch, width = "?", 1
        else:
            width = wcwidth(ch)
            if width < 0:
                ch, width = "?", 1
        if cells + width > max_cells:
            break
        out.append(ch)
        cells += width
    return "".join(out), cells


def progress_label(window: Window, region: Region, buffer: Buffer) -> str:
    """``Top``, ``Bot`` or the cursor position as a percentage."""
    if window.scroll_line == 0:
        return "Top"
    if window.last_visible_line(region) >= buffer.lines_count() - 1:
        return "Bot"
    return f"{100 * (buffer.cursor.line + 1) // buffer.lines_count()}%"


## ================= class DrawScreen ==============================
class DrawScreen:
    """Draws one frame of the editor.

    Args:
        term (Terminal): Output target.
        editor (Editor): State to draw.
        flashed (bool): Draw with inverted attributes (visual bell).
    """

    def __init__(self, term: "Terminal", editor: "Editor", flashed: bool = False) -> None:
        self.term = term
        self.editor = editor
        self.flashed = flashed

    def _reset(self) -> None:
        self.term.reset_attributes()
        if self.flashed:
            self.term.set_reverse()

    def _write_padded(self, text: str, used_cells: int, width: int) -> None:
        self.term.write(text)
        if width > used_cells:
            self.term.write(" " * (width - used_cells))

    def draw(self) -> None:
        """Renders both windows, positions the cursor and flushes."""
        term, editor = self.term, self.editor
        layout = get_layout(term.rows, editor.buffer_list)
        windows = editor.window_list

        term.hide_cursor()
        term.set_cursor(1, 1)
        self._reset()
        self._draw_window(windows.main, layout.main_window_region)
        self._draw_window(windows.minibuffer, layout.minibuffer_region)

        if windows.minibuffer_focused:
            self._position_cursor(windows.minibuffer, layout.minibuffer_region)
        else:
            self._position_cursor(windows.main, layout.main_window_region)

        term.reset_attributes()
        term.show_cursor()
        term.flush()

    # --- Windows ---
    def _draw_window(self, window: Window, region: Region) -> None:
        if region.height <= 0:
            return
        buffer = self.editor.buffer_list.resolve_ref(window.buffer_ref)
        for row in range(window.window_lines(region)):
            self._draw_line(window, region, buffer, row)
        if window.show_modeline:
            self._draw_modeline(window, region, buffer)

    def _draw_line(self, window: Window, region: Region, buffer: Buffer, row: int) -> None:
        term = self.term
        pad_width = min(window.pad_width(region), term.columns)
        content_width = term.columns - pad_width
        linenum = window.scroll_line + row
        line = buffer.get_line(linenum)

        term.set_cursor(region.top + row + 1, 1)
        if pad_width and line is not None:
            term.set_foreground(self.editor.color("line_number"))
            term.write(f"{linenum + 1:>{pad_width - 1}} ")
        elif pad_width:
            term.write(" " * pad_width)
        self._reset()

        if line is None:
            self._write_padded("", 0, content_width)
            return

        text, cells = visible_text(line, content_width)
        self._write_highlighted(text, buffer.highlight)
        self._write_padded("", cells, content_width)

    def _write_highlighted(self, text: str, highlight: Optional[str]) -> None:
        """Writes ``text``, marking every occurrence of ``highlight``."""
        if not highlight:
            self.term.write(text)
            return
        start = 0
        while True:
            found = text.find(highlight, start)
            if found < 0:
                self.term.write(text[start:])
                return
            self.term.write(text[start:found])
            self.term.set_foreground(self.editor.color("highlight_fg"))
            self.term.set_background(self.editor.color("highlight_bg"))
            self.term.write(text[found:found + len(highlight)])
            self._reset()
            start = found + len(highlight)

    def _draw_modeline(self, window: Window, region: Region, buffer: Buffer) -> None:
        term = self.term
        row = region.top + window.window_lines(region) + 1
        label = (
            f"  {display_name(buffer)}  {progress_label(window, region, buffer)}"
            f"  L{buffer.cursor.line + 1}"
        )
        text, cells = visible_text(label, term.columns)

        term.set_cursor(row, 1)
        term.set_foreground(self.editor.color("modeline_fg"))
        term.set_background(self.editor.color("modeline_bg"))
        self._write_padded(text, cells, term.columns)
        self._reset()

    def _position_cursor(self, window: Window, region: Region) -> None:
        buffer = self.editor.buffer_list.resolve_ref(window.buffer_ref)
        screen_line = buffer.cursor.line - window.scroll_line
        if screen_line < 0 or screen_line >= max(1, window.window_lines(region)):
            return
        column = min(buffer.cursor.column + window.pad_width(region) + 1, max(1, self.term.columns))
        self.term.set_cursor(region.top + screen_line + 1, column)


def render_screen(term: "Terminal", editor: "Editor", flashed: bool = False) -> None:
    DrawScreen(term, editor, flashed).draw()


def refresh_screen(term: "Terminal", editor: "Editor") -> None:
    """Makes the terminal reflect the current editor state."""
    render_screen(term, editor, flashed=False)


def ding(term: "Terminal", editor: "Editor") -> None:
    """Visual bell: flashes the screen and drops typed-ahead input."""
    render_screen(term, editor, flashed=True)
    duration_ms = editor.config.get("editor", {}).get("flash_duration_ms", 100)
    if duration_ms > 0:
        time.sleep(duration_ms / 1000.0)
    # Holding C-g must not queue up a flash per repeat.
    term.discard_input_buffer()
    render_screen(term, editor, flashed=False)
    logger.debug("ding")
