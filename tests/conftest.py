# tests/conftest.py
"""Pytest configuration with shared fixtures for the tinymacs editor tests.

The fixtures build real :class:`Editor` instances on a configuration that
never touches the system clipboard and flashes without sleeping, plus a
:class:`ScriptedTerminal` fed with keys.
"""

import copy
from typing import Any, Callable, Iterable, Optional

import pytest

from stubs import ScriptedTerminal, ScriptItem
from tinymacs.core.Buffer import Buffer, Cursor
from tinymacs.core.Editor import Editor
from tinymacs.utils.utils import DEFAULT_CONFIG, deep_merge


# --- Configuration ---
@pytest.fixture
def test_config() -> dict[str, Any]:
    """Default configuration with clipboard access and flash delay disabled.

    Returns:
        dict[str, Any]: A fresh copy, safe to mutate in a test.
    """
    return deep_merge(
        copy.deepcopy(DEFAULT_CONFIG),
        {
            "editor": {
                "use_system_clipboard": False,
                "flash_duration_ms": 0,
            },
        },
    )


# --- Editor fixtures ---
@pytest.fixture
def make_editor(test_config: dict[str, Any]) -> Callable[..., Editor]:
    """Factory for an editor holding ``text`` with the cursor at ``cursor``.

    Returns:
        Callable[..., Editor]: ``make_editor(text="", cursor=(0, 0), filename=None)``.
    """

    def _make(text: str = "", cursor: tuple[int, int] = (0, 0), filename: Optional[str] = None) -> Editor:
        buffer = Buffer.from_string(text)
        buffer.cursor = Cursor(*cursor)
        buffer.filename = filename
        return Editor(test_config, buffer)

    return _make


@pytest.fixture
def editor(make_editor: Callable[..., Editor]) -> Editor:
    """An editor on an empty scratch buffer."""
    return make_editor()


# --- Terminal fixtures ---
@pytest.fixture
def make_term() -> Callable[..., ScriptedTerminal]:
    """Factory for a scripted terminal.

    Returns:
        Callable[..., ScriptedTerminal]: ``make_term(script, rows=24, columns=80)``.
    """

    def _make(script: Iterable[ScriptItem] = (), rows: int = 24, columns: int = 80) -> ScriptedTerminal:
        return ScriptedTerminal(script, rows=rows, columns=columns)

    return _make


@pytest.fixture
def term(make_term: Callable[..., ScriptedTerminal]) -> ScriptedTerminal:
    """A 24x80 terminal with an empty script."""
    return make_term()


# --- Helper fixtures ---
@pytest.fixture
def sample_text() -> str:
    """A short document with indentation and an empty line."""
    return "def hello_world():\n    # This is a comment\n    print('Hello, world!')\n\n    return True"
