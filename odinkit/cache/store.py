"""
Content cache storing directory trees by key.

The acquisition engine only needs two operations from a cache service: store
a set of paths under a key and restore them later. This module defines that
interface and a local implementation that keeps one .tar.gz archive per key
and an index file protected by a cross-process lock.

Example:
    >>> cache = LocalContentCache(Path("~/.odinkit/cache").expanduser())
    >>> cache.save([Path("/opt/odin")], "odin-v1-linux-x64-master-abc")
    True
    >>> cache.restore([Path("/opt/odin")], "odin-v1-linux-x64-master-abc")
    'odin-v1-linux-x64-master-abc'
"""

import hashlib
import json
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from filelock import FileLock, Timeout

from odinkit.core.exceptions import CacheError, CacheLockTimeout
from odinkit.core.filesystem import (
    FilesystemError,
    atomic_write,
    create_tar_archive,
    extract_archive,
)

logger = logging.getLogger(__name__)


class ContentCache(ABC):
    """Cache service storing and restoring path sets by key."""

    @abstractmethod
    def restore(
        self, paths: Sequence[Path], key: str, restore_keys: Sequence[str] = ()
    ) -> Optional[str]:
        """
        Restore paths from the entry matching key.

        Args:
            paths: Paths that were saved together under the key
            key: Exact key to look for
            restore_keys: Prefixes tried in order when the exact key is missing

        Returns:
            The key of the restored entry, or None on a miss
        """
        pass

    @abstractmethod
    def save(self, paths: Sequence[Path], key: str) -> bool:
        """
        Save paths under key.

        Returns:
            True if an entry was written, False if the key already existed
        """
        pass


def _filesystem_root(path: Path) -> Path:
    return Path(path.anchor)


class LocalContentCache(ContentCache):
    """
    Content cache kept in a local directory.

    Entries are stored as <cache_dir>/entries/<sha256(key)>.tar.gz. Paths are
    archived relative to their filesystem root, so restoring puts them back
    at the same absolute locations.
    """

    def __init__(self, cache_dir: Path, lock_timeout: int = 60):
        """
        Initialize local content cache.

        Args:
            cache_dir: Directory holding the index and archives
            lock_timeout: Timeout in seconds for acquiring the index lock
        """
        self.cache_dir = Path(cache_dir)
        self.entries_dir = self.cache_dir / "entries"
        self.index_path = self.cache_dir / "index.json"
        self.lock_path = self.cache_dir / "lock" / "index.lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized content cache at {self.cache_dir}")

    def _load_index(self) -> dict:
        if not self.index_path.exists():
            return {"version": 1, "entries": {}}

        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load cache index: {e}")
            raise CacheError(f"Failed to load cache index: {e}") from e

        if "entries" not in data:
            logger.warning("Invalid cache index format, resetting")
            return {"version": 1, "entries": {}}

        return data

    def _save_index(self, data: dict):
        try:
            atomic_write(self.index_path, json.dumps(data, indent=2))
        except OSError as e:
            raise CacheError(f"Failed to save cache index: {e}") from e

    @contextmanager
    def _lock(self):
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                yield
        except Timeout as e:
            raise CacheLockTimeout(
                f"Could not acquire cache lock within {self.lock_timeout} seconds"
            ) from e

    def _archive_path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.entries_dir / f"{digest}.tar.gz"

    def _find_entry(self, index: dict, key: str, restore_keys: Sequence[str]):
        entries = index["entries"]
        if key in entries:
            return key

        for prefix in restore_keys:
            candidates = [k for k in entries if k.startswith(prefix)]
            if candidates:
                return max(candidates, key=lambda k: entries[k]["created"])

        return None

    def list_keys(self) -> List[str]:
        """List keys of all stored entries."""
        with self._lock():
            return sorted(self._load_index()["entries"])

    def restore(
        self, paths: Sequence[Path], key: str, restore_keys: Sequence[str] = ()
    ) -> Optional[str]:
        with self._lock():
            index = self._load_index()
            matched = self._find_entry(index, key, restore_keys)

            if matched is None:
                logger.debug(f"No cache entry for key: {key}")
                return None

            archive = self._archive_path(matched)
            if not archive.exists():
                logger.warning(f"Cache entry {matched} is missing its archive")
                return None

            paths = [Path(p).absolute() for p in paths]
            root = _filesystem_root(paths[0]) if paths else Path("/")

            try:
                extract_archive(archive, root)
            except FilesystemError as e:
                raise CacheError(f"Failed to restore cache entry {matched}: {e}") from e

            logger.debug(f"Restored cache entry {matched} from {archive}")
            return matched

    def save(self, paths: Sequence[Path], key: str) -> bool:
        paths = [Path(p).absolute() for p in paths]
        if not any(p.exists() for p in paths):
            raise CacheError(f"None of the paths to cache exist: {paths}")

        with self._lock():
            index = self._load_index()
            if key in index["entries"]:
                logger.info(f"Cache entry already exists for key: {key}")
                return False

            archive = self._archive_path(key)
            try:
                create_tar_archive(archive, paths, _filesystem_root(paths[0]))
            except OSError as e:
                raise CacheError(f"Failed to save cache entry {key}: {e}") from e

            index["entries"][key] = {
                "archive": archive.name,
                "paths": [str(p) for p in paths],
                "size_bytes": archive.stat().st_size,
                "created": datetime.now().isoformat(),
            }
            self._save_index(index)

        logger.debug(f"Saved cache entry {key} to {archive}")
        return True


__all__ = ["ContentCache", "LocalContentCache"]
