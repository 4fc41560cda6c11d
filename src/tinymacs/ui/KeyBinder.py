# tinymacs/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Translates keystrokes into commands by walking the keymap of the focused
buffer.

Main Functions:
1. read_key: Blocking read of one key. Pushed-back keys are served first;
   otherwise the screen is refreshed and the terminal polled, handling
   resizes between polls.
2. read_key_binding: Reads keys until they name a command or fall off the
   keymap. While a prefix is pending the minibuffer shows it as ``C-x-``.
3. is_self_insert: Whether an undefined sequence is a single printable key.

Every key read is traced to the ``tinymacs.keyevents`` logger.
"""

from typing import TYPE_CHECKING, Optional

from tinymacs.core.Key import Key, format_seq
from tinymacs.core.Keymap import CommandHandler, Keymap
from tinymacs.ui.DrawScreen import refresh_screen
from tinymacs.ui.Window import adjust_scroll
from tinymacs.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


def read_key(term: "Terminal", editor: "Editor") -> Key:
    """Returns the next key, waiting for the user if nothing is pending."""
    pending = editor.event_loop.pending_input
    if pending:
        key = pending.popleft()
        KEY_LOGGER.debug(f"Key (pushed back): {key.format()} meta={key.meta} code={key.code}")
        return key

    refresh_screen(term, editor)
    while True:
        key = term.read_key_timeout()
        if key is not None:
            KEY_LOGGER.debug(f"Key: {key.format()} meta={key.meta} code={key.code}")
            return key
        if term.reconcile_size(editor.was_resized):
            adjust_scroll(term, editor)
            refresh_screen(term, editor)


def read_key_binding(term: "Terminal", editor: "Editor") -> tuple[Optional[CommandHandler], list[Key]]:
    """Reads one complete key sequence.

    Starts from the focused buffer's keymap and descends into prefix
    keymaps as keys arrive.

    Returns:
        tuple[Optional[CommandHandler], list[Key]]: The bound command (None
        when the sequence is undefined) and the keys that were read.
    """
    keys: list[Key] = []
    keymap = editor.current_buffer().keymap

    while True:
        if keys:
            editor.message(format_seq(keys) + "-")
            refresh_screen(term, editor)

        key = read_key(term, editor)
        keys.append(key)
        item = keymap.lookup(key)

        if item is None:
            KEY_LOGGER.debug(f"Undefined sequence: {format_seq(keys)}")
            return None, keys
        if isinstance(item, Keymap):
            keymap = item
            continue
        return item, keys


def is_self_insert(keys: list[Key]) -> Optional[str]:
    """Returns the character to insert for a single printable key, else None."""
    if len(keys) != 1:
        return None
    return keys[0].as_char()
