"""
On-disk cache of aggregated user packages.

The cache is one JSON array of AggregatedPackage records sorted by name.
Three states are distinguished on load:

    file absent            -> None  (never computed, or invalidated)
    file holds []          -> []    (computed, zero user packages)
    file holds records     -> list

Saves go to a temporary file that replaces the target, under a process
lock and an flock on <cache>.lock so concurrent refreshes cannot interleave.
"""

import fcntl
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from .config import get_cache_path
from .errors import CacheReadError, CacheWriteError
from .models import AggregatedPackage

logger = logging.getLogger(__name__)


class CacheStore:
    """Handle on the aggregated package cache file."""

    def __init__(self, path: Path = None):
        """Initialize cache store.

        Args:
            path: Cache file (default: per-user cache directory)
        """
        self.path = Path(path) if path is not None else get_cache_path()
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._lock = threading.Lock()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[List[AggregatedPackage]]:
        """Load cached records.

        Returns:
            None if there is no cache file, otherwise the stored records

        Raises:
            CacheReadError: file unreadable or not a valid record array
        """
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f"Cannot read cache {self.path}: {e}")

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise CacheReadError(f"Corrupt cache {self.path}: {e}")

        if not isinstance(data, list):
            raise CacheReadError(f"Corrupt cache {self.path}: expected a list")

        try:
            packages = [AggregatedPackage.from_dict(entry) for entry in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise CacheReadError(f"Corrupt cache entry in {self.path}: {e}")

        packages.sort(key=lambda p: p.name)
        logger.debug(f"Loaded {len(packages)} packages from {self.path}")
        return packages

    def save(self, packages: Iterable[AggregatedPackage]):
        """Write records, replacing any previous cache.

        Raises:
            CacheWriteError: directory or file cannot be written
        """
        records = sorted(packages, key=lambda p: p.name)
        payload = json.dumps([p.to_dict() for p in records], indent=2)

        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CacheWriteError(f"Cannot create cache directory {self.path.parent}: {e}")

            try:
                with open(self.lock_path, 'w') as lock_fd:
                    fcntl.flock(lock_fd, fcntl.LOCK_EX)
                    try:
                        self._write_atomic(payload)
                    finally:
                        fcntl.flock(lock_fd, fcntl.LOCK_UN)
            except OSError as e:
                raise CacheWriteError(f"Cannot write cache {self.path}: {e}")

        logger.debug(f"Saved {len(records)} packages to {self.path}")

    def _write_atomic(self, payload: str):
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def invalidate(self):
        """Delete the cache file so the next listing recomputes.

        Raises:
            CacheWriteError: file exists but cannot be removed
        """
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                return
            except OSError as e:
                raise CacheWriteError(f"Cannot remove cache {self.path}: {e}")
        logger.debug(f"Invalidated cache {self.path}")
