# tinymacs/ui/Window.py
"""Window.py
==================
Description:
-----------------------
Viewport geometry: windows, the window list and the per-frame layout.

A :class:`Window` shows one buffer (through a :class:`BufferRef`) starting at
``scroll_line``. The :func:`get_layout` function splits the terminal rows
between the main window and the minibuffer window every frame, because the
minibuffer grows with its contents. Drawing lives in
:mod:`tinymacs.ui.DrawScreen`; this module only does the arithmetic.

Main Functions:
1. get_layout: Splits the terminal rows into main and minibuffer regions.
2. get_current_window_region: Region of the focused window.
3. adjust_scroll: Scrolls a window so its buffer cursor is visible.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from tinymacs.core.BufferList import BufferList, BufferRef

if TYPE_CHECKING:
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


logger = logging.getLogger("tinymacs")


@dataclass(frozen=True)
class Region:
    """A span of terminal rows; ``top`` is 0-based."""

    top: int
    height: int


# ==================== Window Class ====================
@dataclass
class Window:
    """A viewport onto a buffer.

    Attributes:
        buffer_ref (BufferRef): Handle of the displayed buffer.
        scroll_line (int): Buffer line shown on the window's first row.
        show_lines (bool): Draw a line-number gutter.
        show_modeline (bool): Reserve the last row for the modeline.
    """

    buffer_ref: BufferRef
    scroll_line: int = 0
    show_lines: bool = False
    show_modeline: bool = False

    def window_lines(self, region: Region) -> int:
        """Number of text rows, i.e. the region minus the modeline."""
        return max(0, region.height - (1 if self.show_modeline else 0))

    def pad_width(self, region: Region) -> int:
        """Width of the line-number gutter, including its separator."""
        if not self.show_lines:
            return 0
        return len(str(self.scroll_line + region.height)) + 1

    def first_visible_line(self) -> int:
        return self.scroll_line

    def last_visible_line(self, region: Region) -> int:
        return self.scroll_line + self.window_lines(region) - 1


# ==================== WindowList Class ====================
@dataclass
class WindowList:
    """The main window, the minibuffer window and which one has focus."""

    main: Window = field(default_factory=lambda: Window(BufferRef.main(), show_modeline=True))
    minibuffer: Window = field(default_factory=lambda: Window(BufferRef.minibuffer()))
    minibuffer_focused: bool = False

    def current_window(self) -> Window:
        return self.minibuffer if self.minibuffer_focused else self.main


@dataclass(frozen=True)
class Layout:
    main_window_region: Region
    minibuffer_region: Region


def get_layout(rows: int, buffer_list: BufferList) -> Layout:
    """Splits ``rows`` terminal rows for the current frame.

    The minibuffer takes as many rows as it has lines, but never more than a
    third of the screen.
    """
    minibuffer_height = min(buffer_list.minibuffer.lines_count(), rows // 3)
    return Layout(
        main_window_region=Region(top=0, height=rows - minibuffer_height),
        minibuffer_region=Region(top=rows - minibuffer_height, height=minibuffer_height),
    )


def get_current_window_region(term: "Terminal", editor: "Editor") -> Region:
    layout = get_layout(term.rows, editor.buffer_list)
    if editor.window_list.minibuffer_focused:
        return layout.minibuffer_region
    return layout.main_window_region


def adjust_scroll(term: "Terminal", editor: "Editor", window: Optional[Window] = None) -> None:
    """Scrolls ``window`` (default: the focused one) so the cursor is visible."""
    layout = get_layout(term.rows, editor.buffer_list)
    if window is None:
        window = editor.window_list.current_window()
    region = (
        layout.minibuffer_region
        if window is editor.window_list.minibuffer
        else layout.main_window_region
    )
    try:
        buffer = editor.buffer_list.resolve_ref(window.buffer_ref)
    except LookupError:
        logger.warning(f"adjust_scroll: window refers to a missing buffer {window.buffer_ref}.")
        return

    line = buffer.cursor.line
    if line < window.first_visible_line():
        window.scroll_line = line
    visible = max(1, window.window_lines(region))
    if line > window.scroll_line + visible - 1:
        window.scroll_line = line - visible + 1
