"""Display utilities for nebula CLI.

Output modes:
- columns: Multi-column layout / aligned tables (default, human-friendly)
- flat: One item per line (parsable by scripts)
- json: JSON output (programmatic consumption)
"""

import json
import shutil
from enum import Enum
from typing import Callable, List, Optional, Sequence

from . import colors
from ..core.models import AggregatedPackage, OperationOutcome


class DisplayMode(Enum):
    """Output display mode."""
    COLUMNS = "columns"
    FLAT = "flat"
    JSON = "json"


_display_mode = DisplayMode.COLUMNS


def init(mode: str = "columns"):
    """Initialize display settings."""
    global _display_mode
    _display_mode = DisplayMode(mode) if mode else DisplayMode.COLUMNS


def get_mode() -> DisplayMode:
    return _display_mode


def get_terminal_width() -> int:
    """Get terminal width, with fallback to 80 columns."""
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return 80


def format_columns(
    items: Sequence[str],
    indent: int = 0,
    column_gap: int = 2,
    terminal_width: Optional[int] = None,
    color_func: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """Lay items out in as many columns as fit, filled top to bottom.

    Args:
        items: Strings to display
        indent: Spaces before each line
        column_gap: Spaces between columns
        terminal_width: Override terminal width (for testing)
        color_func: Optional colorize function applied after padding

    Returns:
        Lines ready to print
    """
    if not items:
        return []
    width = terminal_width or get_terminal_width()
    col_width = max(len(i) for i in items) + column_gap
    num_cols = max(1, (width - indent) // col_width)
    num_rows = (len(items) + num_cols - 1) // num_cols

    lines = []
    for row in range(num_rows):
        cells = []
        for col in range(num_cols):
            idx = col * num_rows + row
            if idx >= len(items):
                break
            cell = items[idx].ljust(col_width)
            cells.append(color_func(cell) if color_func else cell)
        lines.append(" " * indent + "".join(cells).rstrip())
    return lines


def print_names(names: Sequence[str]):
    """Print a plain list of package names in the current mode."""
    if _display_mode == DisplayMode.JSON:
        print(json.dumps(list(names), indent=2))
    elif _display_mode == DisplayMode.FLAT:
        for name in names:
            print(name)
    else:
        for line in format_columns(names):
            print(line)


def format_user_packages(packages: Sequence[AggregatedPackage],
                         show_deps: bool = False) -> List[str]:
    """Aligned table: name, category, dependency count (and names)."""
    if not packages:
        return []
    name_width = max(len(p.name) for p in packages)
    cat_width = max(len(p.category.value) for p in packages)

    lines = []
    for pkg in packages:
        cat = colors.category(pkg.category, pkg.category.value.ljust(cat_width))
        lines.append(f"{pkg.name.ljust(name_width)}  {cat}  "
                     f"{colors.dim(f'{len(pkg.dependencies)} deps')}")
        if show_deps and pkg.dependencies:
            lines.extend(format_columns(list(pkg.dependencies), indent=4))
    return lines


def print_user_packages(packages: Sequence[AggregatedPackage], show_deps: bool = False):
    """Print aggregated packages in the current mode."""
    if _display_mode == DisplayMode.JSON:
        print(json.dumps([p.to_dict() for p in packages], indent=2))
    elif _display_mode == DisplayMode.FLAT:
        for pkg in packages:
            print(f"{pkg.name}\t{pkg.category.value}\t{','.join(pkg.dependencies)}")
    else:
        for line in format_user_packages(packages, show_deps):
            print(line)


def print_outcome(outcome: OperationOutcome, verbose: bool = False):
    """Print an operation outcome; command output only if verbose or failed."""
    if _display_mode == DisplayMode.JSON:
        print(json.dumps({
            'success': outcome.success,
            'message': outcome.message,
            'details': outcome.details,
        }, indent=2))
        return

    print(colors.success(outcome.message) if outcome.success else colors.error(outcome.message))
    if outcome.details and (verbose or not outcome.success):
        print(colors.dim(outcome.details))
