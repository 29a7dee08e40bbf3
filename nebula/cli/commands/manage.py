"""Package update and removal commands."""

import sys
from typing import TYPE_CHECKING

from ...core.errors import ExternalToolError
from ...core.models import RemoveMode
from .. import colors, display

if TYPE_CHECKING:
    from ...core.service import PackageService


def _confirm(question: str) -> bool:
    # Prompt on stderr so --json output on stdout stays parsable
    print(f"{question} [y/N] ", end='', file=sys.stderr, flush=True)
    try:
        response = input()
    except (EOFError, KeyboardInterrupt):
        print(file=sys.stderr)
        return False
    return response.strip().lower() in ('y', 'yes')


def remove_mode_from_args(args) -> RemoveMode:
    """Map --force/--test flags to a RemoveMode."""
    force = getattr(args, 'force', False)
    test = getattr(args, 'test', False)
    if test:
        return RemoveMode.DRY_RUN_FORCE if force else RemoveMode.DRY_RUN_SAFE
    return RemoveMode.FORCE if force else RemoveMode.SAFE


def cmd_update(args, service: 'PackageService') -> int:
    """Handle update command."""
    if not args.auto and not _confirm(f"Update {args.package}?"):
        print(colors.info("Aborted."))
        return 1

    try:
        outcome = service.update_package(args.package)
    except ExternalToolError as e:
        print(colors.error(f"Error: {e.message}"))
        return 1

    display.print_outcome(outcome, verbose=getattr(args, 'verbose', False))
    return 0 if outcome.success else 1


def cmd_remove(args, service: 'PackageService') -> int:
    """Handle remove (erase) command."""
    mode = remove_mode_from_args(args)
    cleanup = getattr(args, 'auto_orphans', False)

    if cleanup and mode != RemoveMode.SAFE:
        print(colors.warning("Warning: --auto-orphans only applies to a real, non-forced removal"))
        cleanup = False

    if mode == RemoveMode.FORCE:
        print(colors.warning(f"Warning: {args.package} will be removed without dependency checks"))

    if not mode.is_dry_run and not args.auto:
        question = f"Remove {args.package}"
        if cleanup:
            question += " and orphaned dependencies"
        if not _confirm(question + "?"):
            print(colors.info("Aborted."))
            return 1

    try:
        outcome = service.uninstall_package(args.package, mode, cleanup)
    except ExternalToolError as e:
        print(colors.error(f"Error: {e.message}"))
        return 1

    display.print_outcome(outcome, verbose=getattr(args, 'verbose', False) or mode.is_dry_run)
    return 0 if outcome.success else 1
