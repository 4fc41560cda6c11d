# tinymacs/core/Key.py
"""Key.py
==================
Description:
-----------------------
Value type for a single keystroke. A key is a Unicode scalar ``code`` plus a
``meta`` flag. Control is not a separate flag: it is folded into the code with
``code & 0x1f``, exactly as a terminal delivers it, so ``C-a`` is code 1.

Key descriptions use the Emacs notation: an optional ``C-M-``, ``C-`` or ``M-``
prefix followed by a single character or one of the names ``DEL``, ``RET`` and
``TAB``.
"""

import unicodedata
from dataclasses import dataclass, replace
from typing import Iterable, Optional


NAMED_KEYS: dict[str, int] = {
    "DEL": 127,
    "RET": 13,
    "TAB": 9,
}

# Longest prefix first, "C-M-" must win over "C-".
_MODIFIER_PREFIXES: tuple[tuple[str, bool, bool], ...] = (
    ("C-M-", True, True),
    ("C-", True, False),
    ("M-", False, True),
)


# ==================== Key Class ====================
@dataclass(frozen=True)
class Key:
    """A keystroke: ``(meta, code)``. Hashable, compared on both fields.

    Attributes:
        meta (bool): True when the key was typed with Meta (ESC prefix).
        code (int): The Unicode scalar, with control already folded in.
    """

    meta: bool
    code: int

    # --- Construction ---
    @classmethod
    def from_code(cls, code: int) -> "Key":
        return cls(meta=False, code=code)

    @classmethod
    def from_char(cls, ch: str) -> "Key":
        return cls(meta=False, code=ord(ch))

    def ctrl(self) -> "Key":
        """Returns the control variant of this key (``code & 0x1f``)."""
        return replace(self, code=self.code & 0x1F)

    def alt(self) -> "Key":
        """Returns this key with the meta flag set."""
        return replace(self, meta=True)

    @classmethod
    def _parse_unmodified(cls, text: str) -> Optional["Key"]:
        if len(text) == 1:
            return cls.from_char(text)
        code = NAMED_KEYS.get(text)
        return cls.from_code(code) if code is not None else None

    @classmethod
    def parse(cls, text: str) -> Optional["Key"]:
        """Parses a textual key description.

        Args:
            text (str): A description such as ``"C-a"``, ``"M-<"``,
                ``"C-M-x"`` or ``"RET"``.

        Returns:
            Optional[Key]: The key, or None when ``text`` is not a valid
            description.
        """
        for prefix, control, meta in _MODIFIER_PREFIXES:
            if text.startswith(prefix) and len(text) > len(prefix):
                key = cls._parse_unmodified(text[len(prefix):])
                if key is None:
                    return None
                if control:
                    key = key.ctrl()
                if meta:
                    key = key.alt()
                return key
        return cls._parse_unmodified(text)

    @classmethod
    def parse_unchecked(cls, text: str) -> "Key":
        """Like :meth:`parse` for literal descriptions known to be valid.

        Raises:
            ValueError: If ``text`` is not a valid key description.
        """
        key = cls.parse(text)
        if key is None:
            raise ValueError(f"Invalid key description: {text!r}")
        return key

    @classmethod
    def parse_sequence(cls, text: str) -> Optional[list["Key"]]:
        """Parses a space separated sequence such as ``"C-x C-s"``."""
        parts = text.split()
        if not parts:
            return None
        keys = [cls.parse(part) for part in parts]
        if any(key is None for key in keys):
            return None
        return keys  # type: ignore[return-value]

    # --- Queries ---
    def is_control(self) -> bool:
        return _is_control_code(self.code)

    def as_char(self) -> Optional[str]:
        """Returns the character for a plain non-control key, else None."""
        if self.meta or self.is_control():
            return None
        try:
            return chr(self.code)
        except (ValueError, OverflowError):
            return None

    def format(self) -> str:
        """Renders the key in ``[C-][M-]<printable>`` notation."""
        if self.code == NAMED_KEYS["DEL"]:
            control, printable = "", "DEL"
        elif self.is_control():
            control, printable = "C-", chr(self.code | 0x60)
        else:
            control, printable = "", chr(self.code)
        return f"{control}{'M-' if self.meta else ''}{printable}"

    def __str__(self) -> str:
        return self.format()


def _is_control_code(code: int) -> bool:
    if 0 <= code <= 0x1F or 0x7F <= code <= 0x9F:
        return True
    try:
        return unicodedata.category(chr(code)) == "Cc"
    except (ValueError, OverflowError):
        return True


def format_seq(keys: Iterable[Key]) -> str:
    """Formats a key sequence as space separated descriptions."""
    return " ".join(key.format() for key in keys)
