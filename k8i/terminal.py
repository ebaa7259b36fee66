"""Terminal detection for standard output."""

from __future__ import annotations

import os

_STDOUT_FD = 1


def get_terminal_width(default_width: int) -> int:
    """Width of the terminal on standard output, or default_width if unknown."""
    try:
        width = os.get_terminal_size(_STDOUT_FD).columns
    except (OSError, ValueError):
        return default_width
    if width <= 0:
        return default_width
    return width


def is_terminal(fd: int) -> bool:
    """Whether the file descriptor refers to a terminal."""
    try:
        return os.isatty(fd)
    except OSError:
        return False