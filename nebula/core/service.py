"""
Entry points exposed to front-ends.

    list_all_packages()                 every installed base name
    list_user_packages(force_refresh)   user-installed packages with deps/category
    update_package(name)
    uninstall_package(name, mode, cleanup_orphans)

The service owns no global state: the cache store, query client and
operations executor are handed in, so a front-end creates one service per
session and tests can substitute any of them.
"""

import logging
from typing import List, Optional

from .cache import CacheStore
from .config import Settings, load_settings
from .dnf import DnfClient
from .errors import CacheReadError, NebulaError
from .fetch import FetchOrchestrator
from .models import AggregatedPackage, OperationOutcome, RemoveMode
from .names import normalize
from .operations import PackageOperations
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class PackageService:
    """Package listing and management for one session."""

    def __init__(self, client: DnfClient, cache: CacheStore,
                 operations: PackageOperations, settings: Settings = None):
        self.client = client
        self.cache = cache
        self.operations = operations
        self.settings = settings or Settings()
        self.orchestrator = FetchOrchestrator(cache)

    @classmethod
    def from_settings(cls, settings: Settings = None) -> 'PackageService':
        """Wire a service against the real dnf/rpm tools."""
        settings = settings or load_settings()
        runner = CommandRunner(escalation=settings.escalation,
                               timeout=settings.command_timeout)
        cache = CacheStore(settings.cache_path)
        return cls(DnfClient(runner), cache, PackageOperations(runner, cache), settings)

    def list_all_packages(self) -> List[str]:
        """Sorted base names of all installed packages.

        Raises:
            ExternalToolError, ExternalToolNonZeroExit
        """
        return sorted(self.client.installed_names())

    def list_user_packages(self, force_refresh: bool = False) -> List[AggregatedPackage]:
        """User-installed packages with their dependencies and category.

        A readable cache is returned as-is unless force_refresh is set.

        Raises:
            ExternalToolError, ExternalToolNonZeroExit: listing queries failed
        """
        if not force_refresh:
            cached = self._load_cache()
            if cached is not None:
                return cached

        specs = self.client.user_installed_specs()
        candidates = {normalize(s) for s in specs} - {''}
        if candidates:
            installed = self.client.installed_names()
            missing = candidates - installed
            if missing:
                logger.debug(f"Skipping {len(missing)} user-installed names not installed: "
                             f"{', '.join(sorted(missing))}")
            candidates &= installed

        logger.info(f"Fetching details for {len(candidates)} user-installed packages")
        limit = self.settings.concurrency_limit

        if self.settings.dependency_source == "deplist" and candidates:
            deplist_text = self._batched_deplist(specs, candidates)
            return self.orchestrator.refresh_from_deplist(
                candidates, deplist_text, self.client.group, limit
            )
        return self.orchestrator.refresh(
            candidates, self.client.requires, self.client.group, limit
        )

    def update_package(self, name: str) -> OperationOutcome:
        return self.operations.update(name)

    def uninstall_package(self, name: str, mode: RemoveMode = RemoveMode.SAFE,
                          cleanup_orphans: bool = False) -> OperationOutcome:
        return self.operations.uninstall(name, mode, cleanup_orphans)

    def _load_cache(self) -> Optional[List[AggregatedPackage]]:
        try:
            return self.cache.load()
        except CacheReadError as e:
            logger.warning(f"{e}; recomputing")
            return None

    def _batched_deplist(self, specs: List[str], candidates) -> str:
        """One deplist call for all candidates; empty text if it fails."""
        wanted = [s for s in specs if normalize(s) in candidates]
        try:
            return self.client.deplist(wanted)
        except NebulaError as e:
            logger.warning(f"Batched deplist failed, continuing without dependencies: {e}")
            return ""
