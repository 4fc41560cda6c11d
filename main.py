#!/usr/bin/env python3
# /tinymacs/main.py
"""
Tinymacs Launcher
=================

Runs the editor straight from a source checkout:

    python main.py [FILE]

Installed copies use the ``tinymacs`` console script instead.
"""

import os
import sys

# Ensure the 'tinymacs' package under src/ is importable for source runs.
src_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from tinymacs.main import start  # noqa: E402


if __name__ == "__main__":
    start()
