"""Package listing commands."""

from typing import TYPE_CHECKING

from ...core.errors import NebulaError
from ...core.models import Category
from .. import colors, display

if TYPE_CHECKING:
    from ...core.service import PackageService


def _parse_category(value: str):
    for cat in Category:
        if cat.value.lower() == value.lower() or cat.name.lower() == value.lower():
            return cat
    return None


def cmd_list(args, service: 'PackageService') -> int:
    """Handle list command: every installed package."""
    try:
        names = service.list_all_packages()
    except NebulaError as e:
        print(colors.error(f"Error: {e.message}"))
        return 1

    display.print_names(names)
    if display.get_mode() == display.DisplayMode.COLUMNS:
        print(colors.dim(f"\n{len(names)} installed packages"))
    return 0


def cmd_user(args, service: 'PackageService') -> int:
    """Handle user command: user-installed packages with deps and category."""
    wanted = None
    if getattr(args, 'category', None):
        wanted = _parse_category(args.category)
        if wanted is None:
            choices = ', '.join(c.value for c in Category)
            print(colors.error(f"Error: unknown category '{args.category}'"))
            print(colors.dim(f"  Choose from: {choices}"))
            return 1

    try:
        packages = service.list_user_packages(force_refresh=getattr(args, 'refresh', False))
    except NebulaError as e:
        print(colors.error(f"Error: {e.message}"))
        return 1

    if wanted is not None:
        packages = [p for p in packages if p.category == wanted]

    display.print_user_packages(packages, show_deps=getattr(args, 'deps', False))
    if display.get_mode() == display.DisplayMode.COLUMNS:
        if not packages:
            print(colors.info("No user-installed packages found."))
        else:
            print(colors.dim(f"\n{len(packages)} user-installed packages"))
    return 0
