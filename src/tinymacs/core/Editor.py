# tinymacs/core/Editor.py
"""Editor.py
==================
Description:
-----------------------
The shared editor state threaded through every command: buffers, windows,
the event-loop completion slot, the goal column, the kill ring and the
resize flag set from the SIGWINCH handler.

Commands receive the :class:`Editor` together with the terminal and mutate it
in place. The terminal itself is owned by the caller and is never stored
here.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from tinymacs.core import bindings
from tinymacs.core.Buffer import Buffer
from tinymacs.core.BufferList import BufferList
from tinymacs.core.Key import Key
from tinymacs.core.Keymap import CommandHandler
from tinymacs.core.KillRing import KillRing
from tinymacs.ui.Window import Window, WindowList
from tinymacs.utils.utils import DEFAULT_CONFIG

if TYPE_CHECKING:
    from tinymacs.core.minibuffer import IsearchState


logger = logging.getLogger("tinymacs")


@dataclass
class GoalColumn:
    """Column that vertical motion tries to return to.

    ``to_preserve`` is cleared by the event loop before each command and set
    by vertical motion; when it is still False afterwards the column is
    dropped.
    """

    column: Optional[int] = None
    to_preserve: bool = False

    def get_or_set(self, current: int) -> int:
        self.to_preserve = True
        if self.column is None:
            self.column = current
        return self.column


@dataclass
class EventLoopState:
    """Completion slot of the innermost event loop plus pushed-back keys.

    ``result`` is None while the loop runs, True for a normal completion and
    False when the loop was aborted.
    """

    result: Optional[bool] = None
    pending_input: deque[Key] = field(default_factory=deque)

    def complete(self, ok: bool) -> None:
        self.result = ok


# ==================== Editor Class ====================
class Editor:
    """Editor state shared by the event loop, the commands and the renderer.

    Args:
        config (dict[str, Any]): Merged configuration, see
            :data:`tinymacs.utils.utils.DEFAULT_CONFIG`.
        main_buffer (Optional[Buffer]): Buffer to edit. An empty scratch
            buffer is created when omitted. Its keymap is replaced with the
            configured main keymap.

    Attributes:
        config (dict[str, Any]): The configuration.
        buffer_list (BufferList): Main buffer and minibuffer.
        window_list (WindowList): Main and minibuffer windows, focus flag.
        event_loop (EventLoopState): Completion slot and pending input.
        goal_column (GoalColumn): Sticky column for vertical motion.
        kill_ring (KillRing): Killed text, optionally mirrored to the clipboard.
        was_resized (threading.Event): Set by the SIGWINCH handler.
        last_command (Optional[str]): Name of the previous command.
        prompt_length (int): Length of the prompt at the start of the focused
            minibuffer. Motion and deletion do not enter it.
        isearch (Optional[IsearchState]): Active incremental search, if any.
        commands (dict[str, CommandHandler]): Commands runnable by name (M-x).
    """

    def __init__(self, config: Optional[dict[str, Any]] = None, main_buffer: Optional[Buffer] = None) -> None:
        self.config: dict[str, Any] = config if config is not None else DEFAULT_CONFIG
        editor_cfg = self.config.get("editor", {})

        if main_buffer is None:
            main_buffer = Buffer()
        main_buffer.keymap = bindings.main_keymap(self.config.get("keybindings", {}))
        minibuffer = Buffer(keymap=bindings.minibuffer_keymap())

        self.buffer_list = BufferList(main_buffer, minibuffer)
        self.window_list = WindowList()
        self.window_list.main.show_lines = bool(editor_cfg.get("show_line_numbers", False))

        self.event_loop = EventLoopState()
        self.goal_column = GoalColumn()
        self.kill_ring = KillRing(
            max_entries=int(editor_cfg.get("kill_ring_max", 30)),
            use_system_clipboard=bool(editor_cfg.get("use_system_clipboard", True)),
        )
        self.was_resized = threading.Event()

        self.last_command: Optional[str] = None
        self.prompt_length = 0
        self.isearch: Optional["IsearchState"] = None
        self.commands: dict[str, CommandHandler] = dict(bindings.COMMANDS)

        logger.debug(
            f"Editor initialised: {main_buffer.lines_count()} lines, "
            f"file={main_buffer.filename!r}."
        )

    # --- Accessors ---
    def current_window(self) -> Window:
        return self.window_list.current_window()

    def current_buffer(self) -> Buffer:
        return self.buffer_list.resolve_ref(self.current_window().buffer_ref)

    @property
    def main_buffer(self) -> Buffer:
        return self.buffer_list.main_buffer

    @property
    def minibuffer(self) -> Buffer:
        return self.buffer_list.minibuffer

    def message(self, text: str) -> None:
        """Shows ``text`` in the minibuffer."""
        self.buffer_list.minibuffer.set(text)

    def color(self, name: str) -> str:
        return self.config.get("colors", {}).get(name, DEFAULT_CONFIG["colors"][name])
