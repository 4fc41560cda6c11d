# tinymacs/utils/key_debugger.py
"""key_debugger.py
==================
Description:
-----------------------
Prints every key the terminal delivers, as the editor decodes it. Useful to
find out what a terminal sends for a key combination and whether the
keymaps can see it.

Run ``tinymacs-keys`` and press keys; ``q`` quits.
"""

import sys
from typing import Optional

from tinymacs.core.errors import TerminalError
from tinymacs.core.Key import Key
from tinymacs.ui.Terminal import Terminal


QUIT_KEY = Key.from_char("q")


def describe_key(key: Key) -> str:
    """One report line: the key name, its code and the meta flag."""
    return f"{key.format():<12} code={key.code:<6} hex={key.code:#06x} meta={key.meta}"


def run(term: Terminal, max_keys: Optional[int] = None) -> int:
    """Reads and reports keys until ``q``.

    Args:
        term (Terminal): Terminal already in raw mode.
        max_keys (Optional[int]): Stop after this many keys.

    Returns:
        int: The number of keys reported, not counting ``q``.
    """
    term.write("Key debugger. Press any key to see its code. Press 'q' to quit.\r\n")
    term.flush()
    seen = 0
    while max_keys is None or seen < max_keys:
        key = term.read_key_timeout()
        if key is None:
            continue
        if key == QUIT_KEY:
            break
        # OPOST is off in raw mode, so lines need an explicit carriage return.
        term.write(describe_key(key) + "\r\n")
        term.flush()
        seen += 1
    return seen


def main() -> None:
    term = Terminal()
    try:
        with term.raw_mode():
            run(term)
    except TerminalError as e:
        print(f"tinymacs-keys: {e}", file=sys.stderr)
        sys.exit(1)
    print("Debugger finished.")


if __name__ == "__main__":
    main()
