"""
Main CLI entry point for nebula

Commands and short aliases:
- nebula list / nebula ls          all installed packages
- nebula user / nebula u           user-installed packages, deps, category
- nebula update / nebula up        update one package
- nebula remove / nebula rm / e    remove one package (safe, forced, dry run)
- nebula cache info|clear
"""

import argparse
import logging
import shutil
import sys

from .. import __version__
from ..core.config import load_settings
from ..core.service import PackageService
from .commands import (
    cmd_cache_clear,
    cmd_cache_info,
    cmd_list,
    cmd_remove,
    cmd_update,
    cmd_user,
)

REQUIRED_TOOLS = (
    ('dnf', 'package queries, update and safe removal'),
    ('rpm', 'package groups and forced removal'),
)


def check_dependencies() -> list:
    """Check for required external tools.

    Returns:
        List of (tool, purpose) tuples for missing tools (empty if all OK)
    """
    return [(tool, purpose) for tool, purpose in REQUIRED_TOOLS
            if shutil.which(tool) is None]


def print_missing_dependencies(missing: list):
    """Print error message for missing tools."""
    print("ERROR: Missing required tools:\n", file=sys.stderr)
    for tool, purpose in missing:
        print(f"  - {tool} ({purpose})", file=sys.stderr)
    print("\nnebula needs a dnf-based system (Fedora, RHEL, CentOS Stream...).",
          file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all commands and aliases."""

    parser = argparse.ArgumentParser(
        prog='nebula',
        description='Overview and cleanup of user-installed dnf packages',
        epilog='Use "nebula <command> --help" for command-specific help.'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'nebula {__version__}'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output (debug logging, full command output)'
    )

    parser.add_argument(
        '--nocolor',
        action='store_true',
        help='Disable colored output'
    )

    # Parent parser for display options (inherited by subparsers)
    display_parent = argparse.ArgumentParser(add_help=False)
    display_parent.add_argument(
        '--json',
        action='store_true',
        help='JSON output for scripting'
    )
    display_parent.add_argument(
        '--flat',
        action='store_true',
        help='Flat output (one item per line, parsable)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        title='commands',
        metavar='<command>'
    )

    # =========================================================================
    # list / ls
    # =========================================================================
    subparsers.add_parser(
        'list', aliases=['ls'],
        help='List all installed packages',
        parents=[display_parent]
    )

    # =========================================================================
    # user / u
    # =========================================================================
    user_parser = subparsers.add_parser(
        'user', aliases=['u'],
        help='List user-installed packages with dependencies and category',
        parents=[display_parent]
    )
    user_parser.add_argument(
        '--refresh', '-r',
        action='store_true',
        help='Ignore the cache and query dnf again'
    )
    user_parser.add_argument(
        '--deps', '-d',
        action='store_true',
        help='Show dependency names under each package'
    )
    user_parser.add_argument(
        '--category', '-c',
        metavar='CATEGORY',
        help='Only show packages of this category (e.g. Manual, Development)'
    )

    # =========================================================================
    # update / up
    # =========================================================================
    update_parser = subparsers.add_parser(
        'update', aliases=['up'],
        help='Update a package',
        parents=[display_parent]
    )
    update_parser.add_argument(
        'package',
        help='Package name'
    )
    update_parser.add_argument(
        '--auto', '-y',
        action='store_true',
        help='No confirmation'
    )

    # =========================================================================
    # remove / rm / erase / e
    # =========================================================================
    remove_parser = subparsers.add_parser(
        'remove', aliases=['rm', 'erase', 'e'],
        help='Remove a package',
        parents=[display_parent]
    )
    remove_parser.add_argument(
        'package',
        help='Package name'
    )
    remove_parser.add_argument(
        '--auto', '-y',
        action='store_true',
        help='No confirmation'
    )
    remove_parser.add_argument(
        '--test',
        action='store_true',
        help='Dry run (simulation, no privileges needed)'
    )
    remove_parser.add_argument(
        '--force',
        action='store_true',
        help='Remove without dependency checks (rpm -e --nodeps)'
    )
    remove_parser.add_argument(
        '--auto-orphans',
        action='store_true',
        help='Also remove dependencies no longer needed (dnf autoremove)'
    )

    # =========================================================================
    # cache
    # =========================================================================
    cache_parser = subparsers.add_parser(
        'cache',
        help='Package cache management'
    )
    cache_subparsers = cache_parser.add_subparsers(
        dest='cache_command',
        metavar='<subcommand>'
    )
    cache_subparsers.add_parser('info', help='Cache location and contents')
    cache_subparsers.add_parser('clear', aliases=['clean'], help='Delete the cache file')

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbose flag
    if getattr(args, 'verbose', False):
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s',
            stream=sys.stderr
        )

    from . import colors
    colors.init(nocolor=getattr(args, 'nocolor', False))

    from . import display
    if getattr(args, 'json', False):
        display.init(mode='json')
    elif getattr(args, 'flat', False):
        display.init(mode='flat')
    else:
        display.init(mode='columns')

    if not args.command:
        parser.print_help()
        return 1

    if args.command != 'cache':
        missing = check_dependencies()
        if missing:
            print_missing_dependencies(missing)
            return 1

    service = PackageService.from_settings(load_settings())

    try:
        if args.command in ('list', 'ls'):
            return cmd_list(args, service)

        elif args.command in ('user', 'u'):
            return cmd_user(args, service)

        elif args.command in ('update', 'up'):
            return cmd_update(args, service)

        elif args.command in ('remove', 'rm', 'erase', 'e'):
            return cmd_remove(args, service)

        elif args.command == 'cache':
            if args.cache_command in ('clear', 'clean'):
                return cmd_cache_clear(args, service)
            return cmd_cache_info(args, service)

        parser.print_help()
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == '__main__':
    sys.exit(main())
