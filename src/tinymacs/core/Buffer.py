# tinymacs/core/Buffer.py
"""Buffer.py
==================
Description:
-----------------------
Line-structured text buffer with an attached cursor.

A buffer always holds at least one line. Lines never contain the newline
terminator; serialising joins them with ``"\\n"`` and loading splits on
``"\\n"`` keeping the empty trailing element, so a file that ends with a
newline survives a load/save cycle byte for byte.

Columns are indices into the line string. Moves out of range are clamped by
the commands, not by :class:`Cursor`.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import chardet

from tinymacs.core.errors import NoFileError, SaveIOError
from tinymacs.core.Keymap import Keymap


logger = logging.getLogger("tinymacs")

DEFAULT_ENCODING = "utf-8"
CHARDET_SAMPLE_SIZE = 1024 * 20


@dataclass
class Cursor:
    line: int = 0
    column: int = 0


# ==================== Buffer Class ====================
@dataclass
class Buffer:
    """An ordered, non-empty list of lines plus editing state.

    Attributes:
        lines (list[str]): The text, one entry per line, never empty.
        cursor (Cursor): Position of point, ``(line, column)``.
        filename (Optional[str]): The visited file, if any.
        keymap (Keymap): The buffer's own bindings.
        highlight (Optional[str]): Substring the renderer marks, if any.
        encoding (str): Encoding used to write the file back.
    """

    lines: list[str] = field(default_factory=lambda: [""])
    cursor: Cursor = field(default_factory=Cursor)
    filename: Optional[str] = None
    keymap: Keymap = field(default_factory=Keymap, compare=False, repr=False)
    highlight: Optional[str] = None
    encoding: str = field(default=DEFAULT_ENCODING, compare=False)

    def __post_init__(self) -> None:
        if not self.lines:
            self.lines = [""]

    # --- Construction ---
    @classmethod
    def from_string(cls, text: str, keymap: Optional[Keymap] = None) -> "Buffer":
        """Creates a buffer holding ``text`` with the cursor at (0, 0)."""
        return cls(lines=text.split("\n"), keymap=keymap if keymap is not None else Keymap())

    @classmethod
    def from_file(cls, path: str, keymap: Optional[Keymap] = None) -> "Buffer":
        """Loads ``path`` into a new buffer visiting that file.

        UTF-8 is tried first; otherwise the encoding is guessed with chardet.
        Bytes that still do not decode are kept as surrogate escapes so that
        saving writes them back unchanged. A file that does not exist or
        cannot be read yields an empty buffer that visits no file.

        Args:
            path (str): File to load.
            keymap (Optional[Keymap]): Bindings for the new buffer.

        Returns:
            Buffer: The loaded buffer.
        """
        keymap = keymap if keymap is not None else Keymap()
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except OSError as e:
            logger.warning(f"Could not read '{path}': {e}. Starting with an empty buffer.")
            return cls(keymap=keymap)

        text, encoding = decode_bytes(raw)
        logger.info(f"Loaded '{path}' ({len(raw)} bytes, encoding '{encoding}').")
        buffer = cls.from_string(text, keymap)
        buffer.filename = path
        buffer.encoding = encoding
        return buffer

    # --- Whole-buffer text ---
    def set(self, text: str) -> None:
        """Replaces the contents with ``text`` and resets the cursor."""
        self.lines = text.split("\n")
        self.cursor = Cursor()

    def truncate(self) -> None:
        """Empties the buffer, leaving a single empty line."""
        self.lines = [""]
        self.cursor = Cursor()

    def to_string(self) -> str:
        return "\n".join(self.lines)

    # --- Line access ---
    def lines_count(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def get_line_unchecked(self, index: int) -> str:
        """Returns line ``index``; the caller guarantees it exists.

        Raises:
            IndexError: If ``index`` is out of range.
        """
        if not 0 <= index < len(self.lines):
            raise IndexError(f"Line {index} out of range (0..{len(self.lines) - 1})")
        return self.lines[index]

    def current_line(self) -> str:
        return self.get_line_unchecked(self.cursor.line)

    def set_line(self, index: int, text: str) -> None:
        self.get_line_unchecked(index)
        self.lines[index] = text

    def insert_line_at(self, index: int, text: str) -> None:
        self.lines.insert(index, text)

    def remove_line(self, index: int) -> str:
        """Removes and returns line ``index``. The last line is never removed."""
        removed = self.lines.pop(index)
        if not self.lines:
            self.lines.append("")
        return removed

    def insert_char_at(self, line: int, column: int, ch: str) -> None:
        text = self.get_line_unchecked(line)
        self.lines[line] = text[:column] + ch + text[column:]

    def remove_char_at(self, line: int, column: int) -> str:
        """Removes the character at ``(line, column)`` and returns it."""
        text = self.get_line_unchecked(line)
        if not 0 <= column < len(text):
            raise IndexError(f"Column {column} out of range on line {line}")
        self.lines[line] = text[:column] + text[column + 1:]
        return text[column]

    # --- Persistence ---
    def save(self) -> str:
        """Writes the buffer to its file.

        Returns:
            str: The path written.

        Raises:
            NoFileError: The buffer is not visiting a file.
            SaveIOError: The file could not be written.
        """
        if not self.filename:
            raise NoFileError()
        data = self.to_string().encode(self.encoding, errors="surrogateescape")
        try:
            with open(self.filename, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Failed to save '{self.filename}': {e}")
            raise SaveIOError(self.filename, e) from e
        logger.info(f"Wrote {len(data)} bytes to '{self.filename}'.")
        return self.filename


def decode_bytes(raw: bytes) -> tuple[str, str]:
    """Decodes file contents, returning ``(text, encoding)``."""
    try:
        return raw.decode(DEFAULT_ENCODING), DEFAULT_ENCODING
    except UnicodeDecodeError:
        pass

    result = chardet.detect(raw[:CHARDET_SAMPLE_SIZE])
    encoding = result.get("encoding") or DEFAULT_ENCODING
    logger.debug(
        f"Chardet detected encoding '{encoding}' with confidence "
        f"{result.get('confidence') or 0.0:.2f}."
    )
    try:
        text = raw.decode(encoding, errors="surrogateescape")
        # Only keep encodings that give the original bytes back.
        if text.encode(encoding, errors="surrogateescape") == raw:
            return text, encoding
    except (LookupError, UnicodeError):
        logger.warning(f"Encoding '{encoding}' is unusable, falling back to {DEFAULT_ENCODING}.")
    return raw.decode(DEFAULT_ENCODING, errors="surrogateescape"), DEFAULT_ENCODING


def leading_indent(line: str) -> int:
    """Index of the first non-whitespace character, or ``len(line)``."""
    return len(line) - len(line.lstrip())


def display_name(buffer: Buffer) -> str:
    return buffer.filename or "*scratch*"
