"""Shared fixtures: scripted command runner and fake dnf client."""

from pathlib import Path

import pytest

from nebula.core.cache import CacheStore
from nebula.core.errors import ExternalToolNonZeroExit
from nebula.core.runner import CommandResult


class ScriptedRunner:
    """Stands in for CommandRunner; replies from a queue of results.

    Each queued reply is (returncode, stdout, stderr) or an exception
    instance to raise. Calls are recorded as (privileged, argv).
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def _reply(self, argv, privileged):
        self.calls.append((privileged, argv))
        if not self.replies:
            return CommandResult(argv=argv, returncode=0)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        returncode, stdout, stderr = reply
        return CommandResult(argv=argv, returncode=returncode, stdout=stdout, stderr=stderr)

    def run(self, program, args=()):
        return self._reply([program, *args], privileged=False)

    def run_privileged(self, program, args=()):
        return self._reply([program, *args], privileged=True)


class FakeDnfClient:
    """In-memory DnfClient with call counters."""

    def __init__(self, installed=(), user_specs=(), requires=None, groups=None,
                 deplist_text="", fail_listing=False, fail_deplist=False):
        self.installed = set(installed)
        self.user_specs = list(user_specs)
        self.requires_text = dict(requires or {})
        self.groups = dict(groups or {})
        self.deplist_text = deplist_text
        self.fail_listing = fail_listing
        self.fail_deplist = fail_deplist
        self.listing_calls = 0
        self.requires_calls = 0
        self.deplist_calls = []

    def installed_names(self):
        self.listing_calls += 1
        if self.fail_listing:
            raise ExternalToolNonZeroExit("dnf repoquery --installed", 1, "Error: rpmdb locked")
        return set(self.installed)

    def user_installed_specs(self):
        self.listing_calls += 1
        if self.fail_listing:
            raise ExternalToolNonZeroExit("dnf repoquery --userinstalled", 1, "Error: rpmdb locked")
        return list(self.user_specs)

    def requires(self, name):
        self.requires_calls += 1
        if name not in self.requires_text:
            raise ExternalToolNonZeroExit(f"dnf repoquery --requires {name}", 1)
        return self.requires_text[name]

    def group(self, name):
        if name not in self.groups:
            raise ExternalToolNonZeroExit(f"rpm -q {name}", 1, f"package {name} is not installed")
        return self.groups[name]

    def deplist(self, specs):
        self.deplist_calls.append(list(specs))
        if self.fail_deplist:
            raise ExternalToolNonZeroExit("dnf deplist", 1)
        return self.deplist_text


@pytest.fixture
def cache(tmp_path: Path) -> CacheStore:
    """Cache store in a not-yet-existing subdirectory of tmp_path."""
    return CacheStore(tmp_path / "cache" / "user_packages.json")


@pytest.fixture
def make_runner():
    return ScriptedRunner


@pytest.fixture
def make_client():
    return FakeDnfClient
