# tinymacs/utils/logging_config.py
"""tinymacs.utils.logging_config
===============================

Logging setup for tinymacs. It defines the global logger objects and a single
function, `setup_logging`, that attaches handlers according to the
``[logging]`` section of the configuration.

Features:
    - Rotating file logging for general application events (editor.log).
    - Optional console logging to stderr. Off by default, because stderr is
      the same terminal the editor draws on.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the
      TINYMACS_KEYTRACE environment variable.
    - Log directory taken from ``log_dir`` (default ``~/.cache/tinymacs``), with
      fallback to the system temp directory when it cannot be created.
    - Safe reconfiguration: clears existing handlers to avoid duplicate logs.
    - Never raises; problems are reported to stderr and logging continues
      with a best-effort configuration.

Globals:
    logger: Main application logger ("tinymacs").
    KEY_LOGGER: Logger for decoded key trace events ("tinymacs.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional


# ======================== Global loggers ========================
# Created at import time, configured by ``setup_logging()``.
logger = logging.getLogger("tinymacs")
KEY_LOGGER = logging.getLogger("tinymacs.keyevents")

KEYTRACE_ENV = "TINYMACS_KEYTRACE"
DEFAULT_LOG_DIR = Path.home() / ".cache" / "tinymacs"


def _resolve_log_dir(configured: str) -> str:
    """Returns a usable log directory, creating it if needed."""
    log_dir = os.path.expanduser(configured) if configured else str(DEFAULT_LOG_DIR)
    try:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    except OSError as e_mkdir:
        fallback = tempfile.gettempdir()
        print(
            f"Error creating log directory '{log_dir}': {e_mkdir}. Logging to '{fallback}'.",
            file=sys.stderr,
        )
        return fallback


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> Optional[logging.handlers.RotatingFileHandler]:
    try:
        return logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError as e_fh:
        print(
            f"Error setting up file logger for '{filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )
        return None


# --- Logging Setup Function ---
def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler: rotating editor.log capturing everything from the
       configured `file_level` (default DEBUG) upward.
    2. Console handler: optional stderr output whose threshold is
       `console_level` (default WARNING).
    3. Error-file handler: optional rotating error.log with only ERROR and
       CRITICAL events.
    4. Key-event handler: rotating keytrace.log attached to the
       ``tinymacs.keyevents`` logger when ``TINYMACS_KEYTRACE`` is set to
       ``1/true/yes``.

    Existing handlers on the root logger are cleared first, so calling the
    function several times (e.g. in unit tests) does not duplicate records.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is consulted; recognised keys are
            ``file_level``, ``console_level``, ``log_to_console``,
            ``separate_error_log`` and ``log_dir``.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})
    log_dir = _resolve_log_dir(str(logging_config.get("log_dir", "") or ""))

    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    log_filename = os.path.join(log_dir, "editor.log")
    file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_file_handler = _rotating_handler(os.path.join(log_dir, "error.log"), 1024 * 1024, 3)
        if error_file_handler:
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV, "").lower() in {"1", "true", "yes"}:
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        key_trace_handler = _rotating_handler(key_trace_filename, 1024 * 1024, 3)
        if key_trace_handler:
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            logger.info(f"Key event tracing enabled, logging to '{key_trace_filename}'.")
        else:
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logger.debug("Key event tracing is disabled.")

    logger.info(
        f"Logging setup complete. Root logger level: {logging.getLevelName(root_logger.level)}."
    )
    if file_handler:
        logger.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logger.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
