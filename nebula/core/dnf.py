"""
dnf/rpm query layer.

Thin wrappers that issue one query each and hand back text or name sets.
Listing queries are what the service filters candidates with; requires()
and group() are the per-package queries the fetch orchestrator fans out.
"""

import logging
from typing import List, Set, Sequence

from .errors import ExternalToolNonZeroExit
from .names import is_noise_line, listing_names
from .runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

DNF = "dnf"
RPM = "rpm"

INSTALLED_ARGS = ["repoquery", "--installed", "--quiet", "--latest-limit=1"]
USERINSTALLED_ARGS = ["repoquery", "--userinstalled", "--quiet", "--latest-limit=1"]
REQUIRES_ARGS = ["repoquery", "--installed", "--requires", "--resolve", "--quiet"]
GROUP_ARGS = ["-q", "--queryformat", "%{GROUP}"]
DEPLIST_ARGS = ["deplist", "--installed", "--quiet"]


class DnfClient:
    """Issues read-only dnf/rpm queries."""

    def __init__(self, runner: CommandRunner = None):
        self.runner = runner or CommandRunner()

    def _query(self, program: str, args: Sequence[str]) -> CommandResult:
        result = self.runner.run(program, list(args))
        if not result.ok:
            raise ExternalToolNonZeroExit(
                result.command_line, result.returncode, result.stderr
            )
        return result

    def installed_names(self) -> Set[str]:
        """Base names of every installed package."""
        result = self._query(DNF, INSTALLED_ARGS)
        return listing_names(result.stdout)

    def user_installed_specs(self) -> List[str]:
        """Full specs (NEVRAs) of packages marked as installed by the user."""
        result = self._query(DNF, USERINSTALLED_ARGS)
        specs = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if line and not is_noise_line(line):
                specs.append(line)
        return specs

    def requires(self, name: str) -> str:
        """Resolved providers of everything name requires, one per line."""
        return self._query(DNF, [*REQUIRES_ARGS, name]).stdout

    def group(self, name: str) -> str:
        """rpm group of an installed package."""
        return self._query(RPM, [*GROUP_ARGS, name]).stdout

    def deplist(self, specs: Sequence[str]) -> str:
        """Dependency listing for several packages in a single dnf call."""
        return self._query(DNF, [*DEPLIST_ARGS, *specs]).stdout
