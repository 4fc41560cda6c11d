# tinymacs/core/Keymap.py
"""Keymap.py
==================
Description:
-----------------------
Hierarchical key binding table. A keymap maps a :class:`Key` to an *item*,
which is either a command handler or a nested keymap (a prefix such as
``C-x``). Buffers carry their own copy of a keymap, so the main buffer and the
minibuffer can bind the same key differently.

The default tables themselves live in :mod:`tinymacs.core.bindings`; this
module only knows about keys and items.
"""

from typing import TYPE_CHECKING, Callable, Iterator, Optional, Union

from tinymacs.core.Key import Key

if TYPE_CHECKING:
    from tinymacs.core.Editor import Editor
    from tinymacs.ui.Terminal import Terminal


CommandHandler = Callable[["Editor", "Terminal"], None]
Item = Union[CommandHandler, "Keymap"]


# ==================== Keymap Class ====================
class Keymap:
    """Mapping from keys to command handlers or nested keymaps.

    Attributes:
        name (str): Label used in log output only.
    """

    def __init__(self, name: str = "keymap") -> None:
        self.name = name
        self._items: dict[Key, Item] = {}

    def define_key(self, keyspec: str, handler: CommandHandler) -> None:
        """Binds ``keyspec`` (e.g. ``"C-a"``) to a command handler."""
        self._items[Key.parse_unchecked(keyspec)] = handler

    def define_keymap(self, keyspec: str, keymap: "Keymap") -> None:
        """Binds ``keyspec`` to a nested prefix keymap."""
        self._items[Key.parse_unchecked(keyspec)] = keymap

    def define_sequence(self, keys: list[Key], handler: CommandHandler) -> None:
        """Binds a multi-key sequence, creating prefix keymaps on the way.

        An existing command bound to one of the prefixes is replaced by a
        new prefix keymap.

        Args:
            keys (list[Key]): The full sequence, at least one key long.
            handler (CommandHandler): The command run when the sequence is read.

        Raises:
            ValueError: If ``keys`` is empty.
        """
        if not keys:
            raise ValueError("Cannot bind an empty key sequence")
        keymap = self
        for key in keys[:-1]:
            item = keymap._items.get(key)
            if not isinstance(item, Keymap):
                item = Keymap(name=f"{keymap.name} {key}")
                keymap._items[key] = item
            keymap = item
        keymap._items[keys[-1]] = handler

    def lookup(self, key: Key) -> Optional[Item]:
        return self._items.get(key)

    def copy(self) -> "Keymap":
        """Returns an independent copy; nested keymaps are copied too."""
        clone = Keymap(self.name)
        for key, item in self._items.items():
            clone._items[key] = item.copy() if isinstance(item, Keymap) else item
        return clone

    def __contains__(self, key: Key) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[Key]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Keymap({self.name!r}, {len(self._items)} bindings)"


__all__ = ["CommandHandler", "Item", "Keymap"]
