"""CLI command modules."""

from .listing import (
    cmd_list,
    cmd_user,
)
from .manage import (
    cmd_update,
    cmd_remove,
)
from .cache import (
    cmd_cache_info,
    cmd_cache_clear,
)

__all__ = [
    # Listing commands
    'cmd_list',
    'cmd_user',
    # Package management commands
    'cmd_update',
    'cmd_remove',
    # Cache commands
    'cmd_cache_info',
    'cmd_cache_clear',
]
