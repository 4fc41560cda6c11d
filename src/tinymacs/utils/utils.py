# tinymacs/utils/utils.py
"""
tinymacs.utils.utils
====================

Configuration loading and small helpers shared across the editor.

Key functionalities include:
- Robust Configuration Loading: the hardcoded ``DEFAULT_CONFIG`` is deep-merged
  with the user's ``~/.config/tinymacs/config.toml``. A missing or corrupt user
  file never stops the editor from starting.
- Safe Subprocess Execution: a wrapper around ``subprocess.run`` used to ask git
  for the build commit shown by ``--version``.
- Color conversion from ``#rrggbb`` strings to RGB triples and to the nearest
  xterm-256 palette index.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import toml

logger = logging.getLogger("tinymacs")

# --- Constants ---
WHITE_FG_IDX = 255
CONFIG_DIR = Path.home() / ".config" / "tinymacs"

# Hardcoded defaults; the user's config.toml is merged on top.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "show_line_numbers": False,
        "use_system_clipboard": True,
        "kill_ring_max": 30,
        "poll_interval_ms": 30,
        "flash_duration_ms": 100,
    },
    "colors": {
        "modeline_fg": "#ffffff",
        "modeline_bg": "#303030",
        "line_number": "#585858",
        "highlight_fg": "#000000",
        "highlight_bg": "#ffff00",
    },
    # Key sequence -> command name, applied over the default bindings.
    "keybindings": {},
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_dir": "",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    return CONFIG_DIR


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the default configuration and merges the user's config.toml over it.

    Args:
        config_path: Explicit file to read instead of
            ``~/.config/tinymacs/config.toml``.

    Returns:
        The merged configuration. Parse errors are logged and the defaults
        are used.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = config_path or (get_config_dir() / "config.toml")
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError, TypeError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def safe_run(cmd: List[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """
    Executes a command safely, capturing output and handling common exceptions.
    """
    try:
        return subprocess.run(
            cmd, capture_output=True, text=True, check=False,
            encoding="utf-8", errors="replace", **kwargs,
        )
    except FileNotFoundError as e:
        logger.debug(f"Command not found: {cmd[0]!r}")
        return subprocess.CompletedProcess(cmd, 127, stdout="", stderr=str(e))
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Command timed out: {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, -9, stdout=e.stdout or "", stderr=e.stderr or "")
    except OSError as e:
        logger.warning(f"Could not run command {' '.join(cmd)}: {e}")
        return subprocess.CompletedProcess(cmd, -1, stdout="", stderr=str(e))


def get_git_commit() -> Optional[str]:
    """
    Returns the build commit: ``$GIT_COMMIT`` if set, else ``git rev-parse HEAD``
    run next to the package sources. None when neither is available.
    """
    commit = os.environ.get("GIT_COMMIT", "").strip()
    if commit:
        return commit
    result = safe_run(
        ["git", "rev-parse", "HEAD"],
        cwd=str(Path(__file__).resolve().parent),
        timeout=2,
    )
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return None


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """Parses ``#rrggbb`` (leading ``#`` optional). None if malformed."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return None
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None
    return r, g, b


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return WHITE_FG_IDX
    r, g, b = rgb

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
