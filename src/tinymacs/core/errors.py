# tinymacs/core/errors.py
"""tinymacs.core.errors
======================

Exception taxonomy shared by the editor core, the renderer and the terminal
adapter.

- ``CommandError``: a user visible, non-fatal condition raised by a command
  (edge of buffer, nothing to yank, save failure). The event loop shows its
  message in the minibuffer and keeps running.
- ``QuitError``: raised out of a prompt when the user aborts it with C-g.
- ``SaveError`` and its subclasses: raised by ``Buffer.save()``.
- ``TerminalError``: the terminal adapter could not write, flush or change
  modes. Fatal; the driver restores the terminal and exits non-zero.
"""

from typing import Optional


class EditorError(Exception):
    """Base class for every error raised by tinymacs."""


class CommandError(EditorError):
    """A command could not complete. ``str(error)`` is the minibuffer message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class QuitError(CommandError):
    """The current prompt or recursive event loop was aborted."""

    def __init__(self, message: str = "Quit") -> None:
        super().__init__(message)


class SaveError(EditorError):
    """Base class for buffer save failures."""


class NoFileError(SaveError):
    """The buffer is not visiting a file."""

    def __init__(self) -> None:
        super().__init__("No file")


class SaveIOError(SaveError):
    """Writing the buffer contents to disk failed."""

    def __init__(self, filename: str, cause: Optional[OSError] = None) -> None:
        super().__init__(f"Could not save {filename}: {cause}")
        self.filename = filename
        self.cause = cause


class TerminalError(EditorError):
    """Fatal failure of the terminal adapter."""
