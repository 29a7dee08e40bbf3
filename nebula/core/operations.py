"""
Update and removal of packages.

Each operation is one or two external commands whose exit status decides
the outcome. Failed commands never raise: the outcome carries success=False
and the captured output. Only a command that cannot be launched at all
raises ExternalToolError.

Safe removal with orphan cleanup is two-phase:

    dnf remove -y NAME     (privileged)
    dnf autoremove -y      (privileged, only if the removal succeeded)

A failing second phase fails the whole operation. After any successful
non-dry-run removal the package cache is invalidated so the next listing
is recomputed.
"""

import logging
from typing import List, Optional

from .cache import CacheStore
from .errors import CacheWriteError
from .models import OperationOutcome, RemoveMode
from .runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

# (program, args before the package name)
UPDATE_COMMAND = ("dnf", ["upgrade", "-y"])
REMOVE_COMMANDS = {
    RemoveMode.SAFE: ("dnf", ["remove", "-y"]),
    RemoveMode.FORCE: ("rpm", ["-e", "--nodeps"]),
    RemoveMode.DRY_RUN_SAFE: ("dnf", ["remove", "--assumeno"]),
    RemoveMode.DRY_RUN_FORCE: ("rpm", ["-e", "--nodeps", "--test"]),
}
AUTOREMOVE_COMMAND = ("dnf", ["autoremove", "-y"])

# dnf exits 1 when --assumeno declines the transaction it just reported
ASSUMENO_MARKER = "Operation aborted"


def _valid_name(name: str) -> bool:
    return bool(name) and not name.startswith('-') and not any(c.isspace() for c in name)


def _details(results: List[CommandResult]) -> str:
    return "\n\n".join(r.transcript() for r in results)


class PackageOperations:
    """Runs update/uninstall commands and reports OperationOutcome."""

    def __init__(self, runner: CommandRunner, cache: Optional[CacheStore] = None):
        """Initialize operations.

        Args:
            runner: Command runner (its escalation prefix elevates commands)
            cache: Cache invalidated after a successful removal
        """
        self.runner = runner
        self.cache = cache

    def update(self, name: str) -> OperationOutcome:
        """Update one package, assuming yes."""
        if not _valid_name(name):
            return OperationOutcome(False, f"Invalid package name: {name!r}")

        program, args = UPDATE_COMMAND
        result = self.runner.run_privileged(program, [*args, name])
        if result.ok:
            logger.info(f"Updated {name}")
            return OperationOutcome(True, f"Package '{name}' updated.", result.transcript())

        logger.warning(f"Update of {name} failed with status {result.returncode}")
        return OperationOutcome(
            False,
            f"Failed to update '{name}' (exit status {result.returncode}).",
            result.transcript(),
        )

    def uninstall(self, name: str, mode: RemoveMode = RemoveMode.SAFE,
                  cleanup_orphans: bool = False) -> OperationOutcome:
        """Remove a package, or simulate its removal.

        Args:
            name: Package base name
            mode: Removal mode
            cleanup_orphans: Run autoremove after a successful SAFE removal
        """
        if not _valid_name(name):
            return OperationOutcome(False, f"Invalid package name: {name!r}")

        program, args = REMOVE_COMMANDS[mode]
        if mode.privileged:
            primary = self.runner.run_privileged(program, [*args, name])
        else:
            primary = self.runner.run(program, [*args, name])
        results = [primary]

        if mode.is_dry_run:
            return self._dry_run_outcome(name, mode, primary)

        if not primary.ok:
            logger.warning(f"Removal of {name} failed with status {primary.returncode}")
            return OperationOutcome(
                False,
                f"Failed to remove '{name}' (exit status {primary.returncode}).",
                _details(results),
            )

        success, message = True, f"Package '{name}' removed."
        if mode == RemoveMode.FORCE:
            message = f"Package '{name}' force-removed (dependencies not checked)."

        if mode == RemoveMode.SAFE and cleanup_orphans:
            program, args = AUTOREMOVE_COMMAND
            cleanup = self.runner.run_privileged(program, list(args))
            results.append(cleanup)
            if cleanup.ok:
                message = f"Package '{name}' removed and orphaned dependencies cleaned up."
            else:
                success = False
                message = (f"Package '{name}' removed, but orphan cleanup failed "
                           f"(exit status {cleanup.returncode}).")
                logger.warning(message)

        if success:
            message += self._invalidate_cache()

        return OperationOutcome(success, message, _details(results))

    def _dry_run_outcome(self, name: str, mode: RemoveMode,
                         result: CommandResult) -> OperationOutcome:
        success = result.ok
        if (not success and mode == RemoveMode.DRY_RUN_SAFE and result.returncode == 1
                and ASSUMENO_MARKER in result.stdout + result.stderr):
            success = True

        kind = "forced removal" if mode == RemoveMode.DRY_RUN_FORCE else "removal"
        if success:
            message = f"Dry run: {kind} of '{name}' would succeed."
        else:
            message = f"Dry run: {kind} of '{name}' would fail (exit status {result.returncode})."
        return OperationOutcome(success, message, result.transcript())

    def _invalidate_cache(self) -> str:
        """Invalidate the cache; returns text to append to the outcome message."""
        if self.cache is None:
            return ""
        try:
            self.cache.invalidate()
        except CacheWriteError as e:
            logger.warning(f"Cache invalidation failed: {e}")
            return f" Warning: cache invalidation failed: {e}"
        return ""
