# tinymacs/core/EventLoop.py
"""EventLoop.py
==================
Description:
-----------------------
The command loop: read a key sequence, run its command, fix up the goal
column and the scroll position, then repeat until a command completes the
loop.

The loop is re-entrant. Prompts (``read_string``) run a nested loop with
the minibuffer focused; the outer completion slot is saved on entry and
restored on exit, so finishing a prompt never finishes the editor.

Main Functions:
1. process_user_input: One read-dispatch-execute step.
2. event_loop: Runs steps until ``editor.event_loop.result`` is set.
3. read_string: Collects a line of input in the minibuffer.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from tinymacs.core.Buffer import Cursor
from tinymacs.core.commands import insert_char
from tinymacs.core.errors import CommandError, QuitError
from tinymacs.core.Key import format_seq
from tinymacs.core.Keymap import CommandHandler, Keymap
from tinymacs.ui.KeyBinder import is_self_insert, read_key_binding
from tinymacs.ui.Window import adjust_scroll

if TYPE_CHECKING:
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


logger = logging.getLogger("tinymacs")

LoopCallback = Callable[["Terminal", "Editor"], None]

SELF_INSERT = "self_insert_command"


def command_name(handler: CommandHandler) -> str:
    return getattr(handler, "__name__", repr(handler))


def execute_command(term: "Terminal", editor: "Editor", handler: CommandHandler) -> bool:
    """Runs ``handler``; a :class:`CommandError` becomes a minibuffer message.

    Returns:
        bool: True when the command finished without error.
    """
    try:
        handler(editor, term)
        return True
    except CommandError as e:
        editor.message(e.message)
        logger.debug(f"{command_name(handler)}: {e.message}")
        return False


def process_user_input(term: "Terminal", editor: "Editor", exit_on_undefined: bool = False) -> None:
    """Reads one key sequence and acts on it.

    An undefined single printable key inserts itself. Any other undefined
    sequence is pushed back and completes the loop when ``exit_on_undefined``
    is set, and is reported as undefined otherwise.
    """
    handler, keys = read_key_binding(term, editor)

    if not editor.window_list.minibuffer_focused:
        editor.minibuffer.truncate()

    if handler is not None:
        name = command_name(handler)
        execute_command(term, editor, handler)
        editor.last_command = name
        return

    ch = is_self_insert(keys)
    if ch is not None:
        insert_char(editor, ch)
        editor.last_command = SELF_INSERT
    elif exit_on_undefined:
        editor.event_loop.pending_input.extendleft(reversed(keys))
        editor.event_loop.complete(True)
    else:
        editor.message(f"{format_seq(keys)} is undefined")
        editor.last_command = None


def event_loop(
    term: "Terminal",
    editor: "Editor",
    callback: Optional[LoopCallback] = None,
    exit_on_undefined: bool = False,
) -> bool:
    """Runs commands until one of them completes this loop.

    Args:
        term (Terminal): The terminal.
        editor (Editor): The editor state.
        callback (Optional[LoopCallback]): Called after every command that did
            not complete the loop.
        exit_on_undefined (bool): Leave the loop, pushing the keys back, on an
            undefined key sequence.

    Returns:
        bool: True for a normal completion, False when aborted.
    """
    state = editor.event_loop
    original_result = state.result
    try:
        while True:
            state.result = None
            editor.goal_column.to_preserve = False

            process_user_input(term, editor, exit_on_undefined)

            if not editor.goal_column.to_preserve:
                editor.goal_column.column = None

            adjust_scroll(term, editor)

            if state.result is not None:
                return state.result

            if callback is not None:
                callback(term, editor)
    finally:
        state.result = original_result


def read_string(
    term: "Terminal",
    editor: "Editor",
    prompt: str,
    callback: Optional[LoopCallback] = None,
    exit_on_undefined: bool = False,
    keymap: Optional[Keymap] = None,
) -> str:
    """Prompts in the minibuffer and returns what the user typed.

    Args:
        term (Terminal): The terminal.
        editor (Editor): The editor state.
        prompt (str): Text shown before the input. Motion and deletion stop
            at its end.
        callback (Optional[LoopCallback]): Called after every key.
        exit_on_undefined (bool): See :func:`event_loop`.
        keymap (Optional[Keymap]): Bindings used instead of the minibuffer's
            own for the duration of the prompt.

    Returns:
        str: The input, without the prompt.

    Raises:
        QuitError: The prompt was aborted (C-g).
    """
    minibuffer = editor.minibuffer
    windows = editor.window_list
    saved_keymap = minibuffer.keymap
    was_focused = windows.minibuffer_focused
    saved_prompt_length = editor.prompt_length

    if keymap is not None:
        minibuffer.keymap = keymap
    minibuffer.set(prompt)
    minibuffer.cursor = Cursor(0, len(prompt))
    windows.minibuffer_focused = True
    editor.prompt_length = len(prompt)
    logger.debug(f"read_string: prompt {prompt!r}")

    try:
        ok = event_loop(term, editor, callback, exit_on_undefined)
        text = minibuffer.to_string()
    finally:
        minibuffer.keymap = saved_keymap
        minibuffer.truncate()
        windows.minibuffer_focused = was_focused
        editor.prompt_length = saved_prompt_length

    if not ok:
        raise QuitError()
    return text[len(prompt):]
