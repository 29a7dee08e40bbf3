"""Cache management commands."""

from typing import TYPE_CHECKING

from ...core.errors import CacheReadError, CacheWriteError
from .. import colors

if TYPE_CHECKING:
    from ...core.service import PackageService


def cmd_cache_info(args, service: 'PackageService') -> int:
    """Handle cache info command."""
    cache = service.cache
    print(f"{colors.bold('Cache file:')} {cache.path}")

    try:
        packages = cache.load()
    except CacheReadError as e:
        print(colors.error(f"  {e.message}"))
        return 1

    if packages is None:
        print(colors.dim("  Not populated (next 'nebula user' will build it)"))
        return 0

    size = cache.path.stat().st_size
    print(f"  Packages: {len(packages)}")
    print(f"  Size:     {size} bytes")
    return 0


def cmd_cache_clear(args, service: 'PackageService') -> int:
    """Handle cache clear command."""
    try:
        service.cache.invalidate()
    except CacheWriteError as e:
        print(colors.error(f"Error: {e.message}"))
        return 1
    print(colors.success("Cache cleared."))
    return 0
