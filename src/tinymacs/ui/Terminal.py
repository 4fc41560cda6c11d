# tinymacs/ui/Terminal.py
"""Terminal.py
==================
Description:
-----------------------
Raw ANSI terminal adapter for POSIX systems.

The editor never talks to the tty directly; it goes through :class:`Terminal`:

- ``raw_mode()`` / ``session()``: scoped acquisition of raw mode and the
  alternative screen. Both always restore the terminal, including when an
  exception propagates.
- Output is buffered with ``write``/``csi`` and sent in one ``flush()``.
  Rows and columns are 1-based.
- ``read_key_timeout()`` waits one poll interval for input and returns at
  most one decoded :class:`Key`. Decoding is done by the pure
  :class:`KeyDecoder`, which tests drive without a terminal.
- ``window_size()``/``reconcile_size()`` and the SIGWINCH flag installed by
  ``register_resize_flag()``.

Key Features:
- UTF-8 input decoded incrementally, ESC prefixes turned into Meta.
- Arrow keys (CSI and SS3 forms) mapped to C-p, C-n, C-f and C-b.
- Truecolor output when ``COLORTERM=truecolor``, xterm-256 otherwise.
"""

import codecs
import contextlib
import logging
import os
import select
import signal
import termios
import threading
from collections import deque
from enum import IntEnum
from typing import Iterator, Optional, Union

from tinymacs.core.errors import TerminalError
from tinymacs.core.Key import Key
from tinymacs.utils.utils import hex_to_rgb, hex_to_xterm


logger = logging.getLogger("tinymacs")

ESC = "\x1b"
DEFAULT_WINDOW_SIZE = (24, 80)

# Final byte of an unmodified cursor key (CSI or SS3) -> canonical key.
ARROW_KEYS: dict[str, Key] = {
    "A": Key.parse_unchecked("C-p"),
    "B": Key.parse_unchecked("C-n"),
    "C": Key.parse_unchecked("C-f"),
    "D": Key.parse_unchecked("C-b"),
}

Color = Union[str, int]


class ErasePart(IntEnum):
    """Which part of the line ``erase_line`` clears."""

    TO_END = 0
    TO_START = 1
    ALL = 2


# ==================== KeyDecoder Class ====================
class KeyDecoder:
    """Incremental decoder from terminal input bytes to :class:`Key` values.

    Feed raw bytes with :meth:`feed` and take keys with :meth:`pop`. When the
    input goes quiet, :meth:`flush_incomplete` turns a dangling ``ESC [`` or
    ``ESC O`` into ``M-[``/``M-O``. A lone ESC is kept: it is the Meta prefix
    of whatever key comes next.
    """

    _NORMAL, _ESCAPE, _SEQUENCE = range(3)

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")("replace")
        self._keys: deque[Key] = deque()
        self._state = self._NORMAL
        self._intro = ""
        self._params = ""

    def reset(self) -> None:
        self._utf8.reset()
        self._keys.clear()
        self._state = self._NORMAL
        self._intro = ""
        self._params = ""

    def feed(self, data: bytes) -> None:
        for ch in self._utf8.decode(data):
            self._feed_char(ch)

    def pop(self) -> Optional[Key]:
        return self._keys.popleft() if self._keys else None

    def has_pending(self) -> bool:
        return bool(self._keys)

    def flush_incomplete(self) -> None:
        """Called after a quiet poll interval."""
        if self._state != self._SEQUENCE:
            return
        self._keys.append(Key.from_char(self._intro).alt())
        leftover = self._params
        self._state, self._intro, self._params = self._NORMAL, "", ""
        for ch in leftover:
            self._feed_char(ch)

    def _feed_char(self, ch: str) -> None:
        if self._state == self._NORMAL:
            if ch == ESC:
                self._state = self._ESCAPE
            else:
                self._keys.append(Key.from_char(ch))
        elif self._state == self._ESCAPE:
            if ch in "[O":
                self._state, self._intro, self._params = self._SEQUENCE, ch, ""
            else:
                self._keys.append(Key.from_char(ch).alt())
                self._state = self._NORMAL
        else:
            self._feed_sequence_char(ch)

    def _feed_sequence_char(self, ch: str) -> None:
        code = ord(ch)
        if self._intro == "[" and 0x20 <= code <= 0x3F:
            # CSI parameter and intermediate bytes.
            self._params += ch
            return

        self._state = self._NORMAL
        params, self._intro, self._params = self._params, "", ""
        if not params and ch in ARROW_KEYS:
            self._keys.append(ARROW_KEYS[ch])
        elif 0x40 <= code <= 0x7E:
            logger.debug(f"Ignoring escape sequence with final byte {ch!r} (params {params!r}).")
        else:
            # Not a sequence after all; deliver the byte as a key.
            self._feed_char(ch)


# ==================== Terminal Class ====================
class Terminal:
    """Buffered ANSI output and decoded key input on a pair of descriptors.

    Creating a terminal does not change any tty state; only ``raw_mode()``
    and ``session()`` do.

    Args:
        in_fd (int): Descriptor keys are read from.
        out_fd (int): Descriptor escape sequences are written to.
        poll_interval_ms (int): How long ``read_key_timeout`` waits.

    Attributes:
        rows (int): Current height in rows.
        columns (int): Current width in columns.
        truecolor (bool): Emit 24-bit colour sequences.
    """

    def __init__(self, in_fd: int = 0, out_fd: int = 1, poll_interval_ms: int = 30) -> None:
        self.in_fd = in_fd
        self.out_fd = out_fd
        self.poll_interval = max(0, poll_interval_ms) / 1000.0
        self.truecolor = os.environ.get("COLORTERM") == "truecolor"
        self.decoder = KeyDecoder()
        self._buffer: list[str] = []
        self.rows, self.columns = self.window_size()

    # ----- Modes -------
    @contextlib.contextmanager
    def raw_mode(self) -> Iterator["Terminal"]:
        """Puts the input descriptor in raw mode for the ``with`` block."""
        try:
            original = termios.tcgetattr(self.in_fd)
        except termios.error as e:
            raise TerminalError(f"Cannot read terminal attributes: {e}") from e

        attrs = termios.tcgetattr(self.in_fd)
        attrs[0] &= ~(termios.IXON | termios.ICRNL | termios.BRKINT | termios.INPCK | termios.ISTRIP)
        attrs[1] &= ~termios.OPOST
        attrs[2] |= termios.CS8
        attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        try:
            termios.tcsetattr(self.in_fd, termios.TCSAFLUSH, attrs)
        except termios.error as e:
            raise TerminalError(f"Cannot enter raw mode: {e}") from e
        logger.debug("Terminal raw mode enabled.")

        try:
            yield self
        finally:
            try:
                termios.tcsetattr(self.in_fd, termios.TCSAFLUSH, original)
                logger.debug("Terminal attributes restored.")
            except termios.error as e:
                logger.error(f"Failed to restore terminal attributes: {e}")

    @contextlib.contextmanager
    def session(self) -> Iterator["Terminal"]:
        """Raw mode plus the alternative screen; restores both on exit."""
        with self.raw_mode():
            self.enable_alternative_screen()
            self.flush()
            try:
                yield self
            finally:
                self._buffer.clear()
                self.reset_attributes()
                self.show_cursor()
                self.disable_alternative_screen()
                try:
                    self.flush()
                except TerminalError as e:
                    logger.error(f"Could not restore the screen: {e}")

    # ----- Output -------
    def write(self, text: str) -> None:
        self._buffer.append(text)

    def csi(self, sequence: str) -> None:
        """Queues a Control Sequence Introducer escape, ``ESC [ sequence``."""
        self._buffer.append(f"{ESC}[{sequence}")

    def flush(self) -> None:
        data = "".join(self._buffer).encode("utf-8", errors="replace")
        self._buffer.clear()
        if data:
            self._write_out(data)

    def _write_out(self, data: bytes) -> None:
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.out_fd, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError(f"Terminal write failed: {e}") from e

    def pending_output(self) -> str:
        return "".join(self._buffer)

    def set_cursor(self, row: int, column: int) -> None:
        self.csi(f"{row};{column}H")

    def hide_cursor(self) -> None:
        self.csi("?25l")

    def show_cursor(self) -> None:
        self.csi("?25h")

    def erase_line(self, part: ErasePart = ErasePart.ALL) -> None:
        self.csi(f"{int(part)}K")

    def clear_screen(self) -> None:
        self.csi("2J")

    def enable_alternative_screen(self) -> None:
        self.csi("?1049h")

    def disable_alternative_screen(self) -> None:
        self.csi("?1049l")

    def _color_params(self, color: Color, base: int) -> str:
        if isinstance(color, int):
            return f"{base};5;{color}"
        if self.truecolor:
            rgb = hex_to_rgb(color)
            if rgb is not None:
                return f"{base};2;{rgb[0]};{rgb[1]};{rgb[2]}"
        return f"{base};5;{hex_to_xterm(color)}"

    def set_foreground(self, color: Color) -> None:
        """Sets the foreground from a ``#rrggbb`` string or an xterm index."""
        self.csi(self._color_params(color, 38) + "m")

    def set_background(self, color: Color) -> None:
        self.csi(self._color_params(color, 48) + "m")

    def set_reverse(self) -> None:
        self.csi("7m")

    def reset_attributes(self) -> None:
        self.csi("m")

    # ----- Input -------
    def read_key_timeout(self) -> Optional[Key]:
        """Returns the next key, or None if none arrived within the poll interval.

        Raises:
            TerminalError: The input descriptor failed or reached end of file.
        """
        key = self.decoder.pop()
        if key is not None:
            return key

        try:
            readable, _, _ = select.select([self.in_fd], [], [], self.poll_interval)
        except InterruptedError:
            return None
        except (OSError, ValueError) as e:
            raise TerminalError(f"Waiting for input failed: {e}") from e

        if not readable:
            self.decoder.flush_incomplete()
            return self.decoder.pop()

        try:
            data = os.read(self.in_fd, 1024)
        except InterruptedError:
            return None
        except OSError as e:
            raise TerminalError(f"Terminal read failed: {e}") from e
        if not data:
            raise TerminalError("Terminal input closed")

        self.decoder.feed(data)
        return self.decoder.pop()

    def discard_input_buffer(self) -> None:
        """Drops typed-ahead input, e.g. after a flash."""
        try:
            termios.tcflush(self.in_fd, termios.TCIFLUSH)
        except termios.error as e:
            logger.debug(f"tcflush failed: {e}")
        self.decoder.reset()

    # ----- Size -------
    def window_size(self) -> tuple[int, int]:
        """Returns ``(rows, columns)``, 24x80 when the output is not a tty."""
        try:
            size = os.get_terminal_size(self.out_fd)
        except OSError:
            return DEFAULT_WINDOW_SIZE
        if size.lines <= 0 or size.columns <= 0:
            return DEFAULT_WINDOW_SIZE
        return size.lines, size.columns

    def reconcile_size(self, was_resized: threading.Event) -> bool:
        """Re-reads the size if a resize was signalled. Returns True if so."""
        if not was_resized.is_set():
            return False
        was_resized.clear()
        self.rows, self.columns = self.window_size()
        logger.debug(f"Terminal resized to {self.rows}x{self.columns}.")
        return True


def register_resize_flag(was_resized: threading.Event) -> None:
    """Installs a SIGWINCH handler that only sets ``was_resized``.

    Raises:
        TerminalError: The handler could not be installed.
    """

    def _on_sigwinch(signum: int, frame: object) -> None:
        was_resized.set()

    try:
        signal.signal(signal.SIGWINCH, _on_sigwinch)
    except (ValueError, OSError, AttributeError) as e:
        raise TerminalError(f"Cannot install SIGWINCH handler: {e}") from e
    logger.debug("SIGWINCH handler installed.")
