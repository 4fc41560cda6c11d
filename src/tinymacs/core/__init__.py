"""Public facade for tinymacs.core: re-export the value types from CamelCase modules.

Keeps Java-like file names (Buffer.py, Keymap.py, ...),
but provides flat imports for convenience and stability.

Only modules without UI dependencies are re-exported here; import
``tinymacs.core.Editor`` and ``tinymacs.core.EventLoop`` directly.
"""

# Re-export classes/symbols from CamelCase modules
from .Buffer import Buffer, Cursor  # noqa: F401
from .BufferList import BufferList, BufferRef  # noqa: F401
from .errors import (  # noqa: F401
    CommandError,
    EditorError,
    NoFileError,
    QuitError,
    SaveError,
    SaveIOError,
    TerminalError,
)
from .Key import Key  # noqa: F401
from .Keymap import CommandHandler, Item, Keymap  # noqa: F401
from .KillRing import KillRing  # noqa: F401


__all__ = [
    "Buffer",
    "Cursor",
    "BufferList",
    "BufferRef",
    "Key",
    "Keymap",
    "CommandHandler",
    "Item",
    "KillRing",
    "EditorError",
    "CommandError",
    "QuitError",
    "SaveError",
    "NoFileError",
    "SaveIOError",
    "TerminalError",
]
