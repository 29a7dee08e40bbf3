"""
Bounded-concurrency fetch of per-package dependencies and categories.

One unit of work per candidate runs on a thread pool. Each external query
is made while holding one permit of a shared semaphore, so at most
`concurrency_limit` dnf/rpm processes are alive at any time, whatever the
pool size. A unit releases its permit before parsing or issuing the next
query.

Failures stay local to the package they concern: a query that fails leaves
that package with no dependencies or an Unknown category, and the batch
goes on. The sorted result is always written to the cache.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Iterable, List, Optional

from .cache import CacheStore
from .config import DEFAULT_CONCURRENCY
from .deplist import parse_multi, parse_single
from .errors import CacheWriteError, NebulaError
from .groups import classify
from .models import AggregatedPackage, Category

logger = logging.getLogger(__name__)

# Upper bound on pool threads; permits, not threads, bound the processes
MAX_POOL_WORKERS = 32

QueryFunc = Callable[[str], str]


class FetchOrchestrator:
    """Builds AggregatedPackage records for a set of candidate names."""

    def __init__(self, cache: Optional[CacheStore] = None):
        """Initialize orchestrator.

        Args:
            cache: Store the result is persisted to (None = don't persist)
        """
        self.cache = cache

    def refresh(
        self,
        candidate_names: Iterable[str],
        query_dependencies: QueryFunc,
        query_category: QueryFunc,
        concurrency_limit: int = DEFAULT_CONCURRENCY,
    ) -> List[AggregatedPackage]:
        """Query dependencies and category of every candidate.

        Args:
            candidate_names: Base names, duplicates are collapsed
            query_dependencies: name -> requirement listing text
            query_category: name -> rpm group text
            concurrency_limit: Maximum queries in flight

        Returns:
            Records sorted by name, one per candidate
        """
        names = sorted({n for n in candidate_names if n})
        permits = self._permits(concurrency_limit)

        def fetch_one(name: str) -> AggregatedPackage:
            deps = []
            text = self._guarded(permits, query_dependencies, name, "dependencies")
            if text is not None:
                deps = parse_single(text, name)
            return AggregatedPackage.build(
                name, self._category(permits, query_category, name), deps
            )

        packages = self._run_all(names, fetch_one)
        return self._finish(packages)

    def refresh_from_deplist(
        self,
        candidate_names: Iterable[str],
        deplist_text: str,
        query_category: QueryFunc,
        concurrency_limit: int = DEFAULT_CONCURRENCY,
    ) -> List[AggregatedPackage]:
        """Like refresh(), with dependencies taken from one batched deplist.

        Candidates missing from the deplist get no dependencies.
        """
        names = sorted({n for n in candidate_names if n})
        permits = self._permits(concurrency_limit)
        deps_map: Dict[str, List[str]] = parse_multi(deplist_text or "")

        def fetch_one(name: str) -> AggregatedPackage:
            return AggregatedPackage.build(
                name,
                self._category(permits, query_category, name),
                deps_map.get(name, ()),
            )

        packages = self._run_all(names, fetch_one)
        return self._finish(packages)

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _permits(concurrency_limit: int) -> threading.BoundedSemaphore:
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")
        return threading.BoundedSemaphore(concurrency_limit)

    @staticmethod
    def _guarded(permits, query: QueryFunc, name: str, what: str) -> Optional[str]:
        """Run one query under a permit; None if it failed."""
        try:
            with permits:
                return query(name)
        except NebulaError as e:
            logger.debug(f"{what} query for {name} failed ({e.kind.value}): {e}")
            return None

    def _category(self, permits, query_category: QueryFunc, name: str) -> Category:
        text = self._guarded(permits, query_category, name, "category")
        if text is None:
            return Category.UNKNOWN
        return classify(text)

    @staticmethod
    def _run_all(names: List[str], fetch_one) -> List[AggregatedPackage]:
        if not names:
            return []

        packages = []
        workers = min(MAX_POOL_WORKERS, len(names))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(fetch_one, name): name for name in names}
            for future in as_completed(futures):
                name = futures[future]
                try:
                    packages.append(future.result())
                except Exception:
                    logger.exception(f"Fetch task for {name} failed, skipping it")
        return packages

    def _finish(self, packages: List[AggregatedPackage]) -> List[AggregatedPackage]:
        packages.sort(key=lambda p: p.name)
        if self.cache is not None:
            try:
                self.cache.save(packages)
            except CacheWriteError as e:
                logger.warning(f"Could not persist package cache: {e}")
        return packages
