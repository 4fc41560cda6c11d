# tests/test_utils.py
"""Unit tests for utility functions in the `tinymacs.utils` module.

Covers configuration loading and merging, colour conversion, subprocess
execution and the build commit lookup used by ``--version``.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from tinymacs.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    This test ensures:
    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    expected = {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert result == expected
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_hex_to_xterm_valid_color() -> None:
    """Ensure `hex_to_xterm` returns the correct xterm color code for valid hex values.

    Examples tested:
    - White (`#ffffff`) should map to 231.
    - Black (`000000`) should map to 16.
    - Pure yellow (`#ffff00`) should map to the colour cube entry 226.
    """
    assert utils.hex_to_xterm("#ffffff") == 231
    assert utils.hex_to_xterm("000000") == 16
    assert utils.hex_to_xterm("#ffff00") == 226


def test_hex_to_xterm_invalid_color() -> None:
    """Verify that `hex_to_xterm` falls back to 255 for invalid hex strings."""
    assert utils.hex_to_xterm("#zzz") == 255
    assert utils.hex_to_xterm("12") == 255


def test_hex_to_rgb() -> None:
    assert utils.hex_to_rgb("#102030") == (16, 32, 48)
    assert utils.hex_to_rgb("nothex") is None


# --- Configuration ---
def test_load_config_defaults_when_no_user_file(tmp_path: Path) -> None:
    config = utils.load_config(tmp_path / "config.toml")
    assert config["editor"]["kill_ring_max"] == 30
    assert config["colors"]["highlight_bg"] == "#ffff00"
    assert config["keybindings"] == {}


def test_load_config_merges_user_file(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        '[editor]\nshow_line_numbers = true\n\n'
        '[keybindings]\n"C-c l" = "toggle_line_numbers"\n'
    )
    config = utils.load_config(path)
    assert config["editor"]["show_line_numbers"] is True
    # Keys the user did not set keep their defaults.
    assert config["editor"]["poll_interval_ms"] == 30
    assert config["keybindings"] == {"C-c l": "toggle_line_numbers"}
    assert utils.DEFAULT_CONFIG["editor"]["show_line_numbers"] is False


def test_load_config_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[editor\nshow_line_numbers = ")
    config = utils.load_config(path)
    assert config["editor"]["show_line_numbers"] is False


# --- Subprocesses ---
def test_safe_run_success() -> None:
    """Check that `safe_run` executes a valid shell command successfully."""
    result = utils.safe_run(["echo", "hello"])
    assert result.returncode == 0
    assert "hello" in result.stdout


def test_safe_run_command_not_found() -> None:
    """Ensure `safe_run` gracefully handles non-existent commands."""
    result = utils.safe_run(["non_existing_command"])
    assert result.returncode != 0
    assert "No such file" in result.stderr or "not found" in result.stderr.lower()


def test_get_git_commit_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_COMMIT", "0123456789abcdef")
    assert utils.get_git_commit() == "0123456789abcdef"


def test_get_git_commit_without_git(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GIT_COMMIT", raising=False)
    failed = utils.subprocess.CompletedProcess(["git"], 128, stdout="", stderr="not a repository")
    with patch("tinymacs.utils.utils.safe_run", return_value=failed):
        assert utils.get_git_commit() is None
