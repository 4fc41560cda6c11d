# tinymacs/core/bindings.py
"""bindings.py
==================
Description:
-----------------------
The command table and the default keymaps.

``COMMANDS`` maps every command name to its handler; it backs M-x and the
``[keybindings]`` section of the configuration, where a key sequence string
is bound to a command name, e.g.::

    [keybindings]
    "C-c l" = "toggle_line_numbers"
    "M-g" = "beginning_of_buffer"
"""

import logging
from typing import Optional

from tinymacs.core import commands, minibuffer
from tinymacs.core.Key import Key
from tinymacs.core.Keymap import CommandHandler, Keymap


logger = logging.getLogger("tinymacs")


COMMANDS: dict[str, CommandHandler] = {
    handler.__name__: handler
    for handler in (
        commands.move_beginning_of_line,
        commands.move_end_of_line,
        commands.forward_char,
        commands.backward_char,
        commands.next_line,
        commands.previous_line,
        commands.beginning_of_buffer,
        commands.end_of_buffer,
        commands.next_screen,
        commands.previous_screen,
        commands.delete_backward_char,
        commands.delete_char,
        commands.kill_line,
        commands.yank,
        commands.newline,
        commands.indent_line,
        commands.save_buffer,
        commands.toggle_line_numbers,
        commands.kill_editor,
        commands.keyboard_quit,
        commands.minibuffer_complete,
        minibuffer.isearch_forward,
        minibuffer.isearch_repeat_forward,
        minibuffer.execute_extended_command,
    )
}


def _define_editing_keys(keymap: Keymap) -> None:
    """Motion and editing keys shared by the main buffer and the minibuffer."""
    keymap.define_key("C-a", commands.move_beginning_of_line)
    keymap.define_key("C-e", commands.move_end_of_line)
    keymap.define_key("C-f", commands.forward_char)
    keymap.define_key("C-b", commands.backward_char)
    keymap.define_key("C-p", commands.previous_line)
    keymap.define_key("C-n", commands.next_line)
    keymap.define_key("C-d", commands.delete_char)
    keymap.define_key("DEL", commands.delete_backward_char)
    keymap.define_key("C-k", commands.kill_line)
    keymap.define_key("C-y", commands.yank)
    keymap.define_key("TAB", commands.indent_line)
    keymap.define_key("M-<", commands.beginning_of_buffer)
    keymap.define_key("M->", commands.end_of_buffer)
    keymap.define_key("C-g", commands.keyboard_quit)


def ctl_x_keymap() -> Keymap:
    keymap = Keymap("C-x")
    keymap.define_key("C-s", commands.save_buffer)
    keymap.define_key("C-c", commands.kill_editor)
    keymap.define_key("l", commands.toggle_line_numbers)
    return keymap


def apply_user_bindings(keymap: Keymap, user_bindings: dict[str, str]) -> int:
    """Binds ``{"C-c l": "command_name"}`` entries on top of ``keymap``.

    Entries with an unparsable key sequence or an unknown command are logged
    and skipped.

    Returns:
        int: The number of bindings applied.
    """
    applied = 0
    for keyspec, command in user_bindings.items():
        keys = Key.parse_sequence(str(keyspec))
        handler: Optional[CommandHandler] = COMMANDS.get(str(command).replace("-", "_"))
        if keys is None:
            logger.warning(f"Keybinding skipped: cannot parse key sequence {keyspec!r}")
            continue
        if handler is None:
            logger.warning(f"Keybinding skipped: {keyspec!r} names unknown command {command!r}")
            continue
        keymap.define_sequence(keys, handler)
        logger.debug(f"Keybinding: {keyspec} -> {handler.__name__}")
        applied += 1
    return applied


def main_keymap(user_bindings: Optional[dict[str, str]] = None) -> Keymap:
    """Builds the top-level keymap of the main buffer.

    Args:
        user_bindings (Optional[dict[str, str]]): The ``[keybindings]``
            configuration section, applied over the defaults.
    """
    keymap = Keymap("global")
    _define_editing_keys(keymap)
    keymap.define_key("RET", commands.newline)
    keymap.define_key("C-j", commands.newline)
    keymap.define_key("C-v", commands.next_screen)
    keymap.define_key("M-v", commands.previous_screen)
    keymap.define_key("C-s", minibuffer.isearch_forward)
    keymap.define_key("M-x", minibuffer.execute_extended_command)
    keymap.define_keymap("C-x", ctl_x_keymap())
    if user_bindings:
        apply_user_bindings(keymap, user_bindings)
    return keymap


def minibuffer_keymap() -> Keymap:
    """Keymap of the minibuffer: RET completes the prompt."""
    keymap = Keymap("minibuffer")
    _define_editing_keys(keymap)
    keymap.define_key("RET", commands.minibuffer_complete)
    return keymap
