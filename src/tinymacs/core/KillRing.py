# tinymacs/core/KillRing.py
"""KillRing.py
==================
Bounded history of killed text, shared by every buffer.

When ``use_system_clipboard`` is enabled and pyperclip can reach a clipboard
utility, each kill is also copied to the system clipboard and a yank picks up
clipboard text that was copied outside the editor since the last kill.
"""

import logging
from collections import deque
from typing import Optional

import pyperclip


logger = logging.getLogger("tinymacs")


# ==================== KillRing Class ====================
class KillRing:
    """Most recent kill last; older entries fall off past ``max_entries``."""

    def __init__(self, max_entries: int = 30, use_system_clipboard: bool = True) -> None:
        self.entries: deque[str] = deque(maxlen=max(1, max_entries))
        self.use_system_clipboard = use_system_clipboard
        self._clipboard_available: Optional[bool] = None

    # ----- Clipboard Handling -------
    def _check_clipboard(self) -> bool:
        """Probes pyperclip once; later calls reuse the answer."""
        if not self.use_system_clipboard:
            return False
        if self._clipboard_available is None:
            try:
                pyperclip.paste()
                self._clipboard_available = True
                logger.debug("pyperclip and system clipboard utilities appear to be available.")
            except pyperclip.PyperclipException as e:
                logger.warning(
                    f"System clipboard unavailable via pyperclip: {e}. "
                    f"Using the internal kill ring only."
                )
                self._clipboard_available = False
        return self._clipboard_available

    def _copy_to_clipboard(self, text: str) -> None:
        if not self._check_clipboard():
            return
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.warning(f"Could not copy to system clipboard: {e}")

    def _clipboard_text(self) -> Optional[str]:
        if not self._check_clipboard():
            return None
        try:
            return pyperclip.paste() or None
        except pyperclip.PyperclipException as e:
            logger.warning(f"Could not read from system clipboard: {e}")
            return None

    # ----- Kill / Yank -------
    def kill(self, text: str, append: bool = False) -> None:
        """Records ``text``; with ``append`` it extends the latest entry."""
        if append and self.entries:
            self.entries[-1] += text
        else:
            self.entries.append(text)
        logger.debug(f"Kill ring: {'appended' if append else 'pushed'} {len(text)} chars.")
        self._copy_to_clipboard(self.entries[-1])

    def latest(self) -> Optional[str]:
        """Returns the text a yank inserts, or None when there is none."""
        external = self._clipboard_text()
        if external is not None and (not self.entries or external != self.entries[-1]):
            logger.info(f"Retrieved {len(external)} chars from system clipboard.")
            self.entries.append(external)
        return self.entries[-1] if self.entries else None

    def __len__(self) -> int:
        return len(self.entries)
