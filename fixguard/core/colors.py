"""
Terminal colors for CLI and report output.

Text is only colored when the stream it is written to is a TTY, so piped
output, JSON and captured logs stay plain.
"""

import sys
from typing import Optional, TextIO


class Colors:
    """ANSI color codes for terminal output."""
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


TIER_COLORS = {
    'apply': Colors.GREEN,
    'review': Colors.YELLOW,
    'skip': Colors.RED,
}


def colorize(text: str, color: str, stream: Optional[TextIO] = None) -> str:
    """Wrap text in an ANSI color if stream (default stdout) is a TTY."""
    stream = stream or sys.stdout
    if stream.isatty():
        return f"{color}{text}{Colors.RESET}"
    return text


def success(text: str, stream: Optional[TextIO] = None) -> str:
    return colorize(text, Colors.GREEN, stream)


def error(text: str, stream: Optional[TextIO] = None) -> str:
    return colorize(text, Colors.RED, stream)


def warning(text: str, stream: Optional[TextIO] = None) -> str:
    return colorize(text, Colors.YELLOW, stream)


def bold(text: str, stream: Optional[TextIO] = None) -> str:
    return colorize(text, Colors.BOLD, stream)


def tier_label(tier: str, stream: Optional[TextIO] = None) -> str:
    """APPLY / REVIEW / SKIP in green, yellow or red."""
    return colorize(tier.upper(), TIER_COLORS.get(tier, Colors.BOLD), stream)
