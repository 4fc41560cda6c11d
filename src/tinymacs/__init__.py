# tinymacs/__init__.py
"""tinymacs: a small Emacs-style terminal text editor."""

__version__ = "0.1.0"
