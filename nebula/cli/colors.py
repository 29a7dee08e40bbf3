"""Color output support for nebula CLI.

Color palette:
  - Red: errors and removals
  - Orange: warnings and dry runs
  - Green: success
  - Blue: contextual information, categories
"""

import os
import sys

from ..core.models import Category

# ANSI color codes
_COLORS = {
    'reset': '\033[0m',
    'bold': '\033[1m',
    'red': '\033[91m',
    'orange': '\033[93m',   # No true orange in ANSI
    'green': '\033[92m',
    'blue': '\033[94m',
    'magenta': '\033[95m',
    'cyan': '\033[96m',
    'dim': '\033[2m',
}

# Category -> color used in package tables
_CATEGORY_COLORS = {
    Category.MANUAL: 'green',
    Category.DESKTOP_ENVIRONMENT: 'magenta',
    Category.SYSTEM: 'red',
    Category.LIBRARY: 'dim',
    Category.DEVELOPMENT: 'cyan',
    Category.UNKNOWN: 'dim',
}

_colors_enabled = True


def init(nocolor: bool = False):
    """Initialize color support.

    Args:
        nocolor: If True, disable colors unconditionally
    """
    global _colors_enabled

    if nocolor or os.environ.get('NO_COLOR'):
        _colors_enabled = False
    else:
        _colors_enabled = sys.stdout.isatty()


def enabled() -> bool:
    return _colors_enabled


def _wrap(text: str, color: str) -> str:
    if not _colors_enabled:
        return text
    return f"{_COLORS.get(color, '')}{text}{_COLORS['reset']}"


def error(text: str) -> str:
    return _wrap(text, 'red')


def warning(text: str) -> str:
    return _wrap(text, 'orange')


def success(text: str) -> str:
    return _wrap(text, 'green')


def info(text: str) -> str:
    return _wrap(text, 'blue')


def dim(text: str) -> str:
    return _wrap(text, 'dim')


def bold(text: str) -> str:
    return _wrap(text, 'bold')


def category(cat: Category, text: str = None) -> str:
    """Format a category label (or text) in the category's color."""
    return _wrap(text if text is not None else cat.value, _CATEGORY_COLORS.get(cat, 'blue'))
