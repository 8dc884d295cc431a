"""
Snapshot Cache Module.

This module keeps recently computed analytics snapshots on the local disk so
that re-analyzing a repository within the time-to-live skips the GitHub API.
Entries are keyed by ``<prefix><owner>/<repo>`` and stored as one JSON file
per key together with the time they were cached.
"""

import json
import time
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from config import logger
from analyzers.models import AnalyticsSnapshot


class SnapshotCache:
    """
    Time-limited local storage of analytics snapshots.
    Reads treat expired or unreadable entries as misses; writes are best effort.
    """

    def __init__(
        self,
        cache_dir: str,
        prefix: str = "repo-analytics-",
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the snapshot cache.

        Args:
            cache_dir (str): Directory holding the cache entries.
            prefix (str): Prefix of every cache key.
            ttl_seconds (int): Entry lifetime in seconds.
            clock (Callable[[], float]): Returns the current Unix time.
        """
        self.storage_dir = Path(cache_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def cache_key(self, owner: str, repo: str) -> str:
        return f"{self.prefix}{owner}/{repo}"

    def _get_entry_path(self, key: str) -> Path:
        """Generate the file path of a cache entry.

        Args:
            key (str): Cache key.

        Returns:
            Path: File path for the entry.
        """
        # Convert key to safe filename
        safe_name = key.replace("/", "_").replace("\\", "_")
        return self.storage_dir / f"{safe_name}.json"

    def _entry_paths(self) -> List[Path]:
        safe_prefix = self.prefix.replace("/", "_").replace("\\", "_")
        return sorted(self.storage_dir.glob(f"{safe_prefix}*.json"))

    def get(self, owner: str, repo: str) -> Optional[AnalyticsSnapshot]:
        """Return the cached snapshot of a repository, if still fresh.

        Args:
            owner (str): Repository owner.
            repo (str): Repository name.

        Returns:
            Optional[AnalyticsSnapshot]: The snapshot, or None on a miss.
        """
        key = self.cache_key(owner, repo)
        path = self._get_entry_path(key)
        if not path.exists():
            return None

        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
            cached_at = float(entry["cached_at"])
            if self._clock() - cached_at > self.ttl_seconds:
                path.unlink(missing_ok=True)
                logger.debug({"message": "Cache entry expired", "key": key})
                return None

            snapshot = AnalyticsSnapshot.model_validate(entry["snapshot"])
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            logger.warning(
                {"message": "Cache read failed", "key": key, "error": str(e)}
            )
            return None

        logger.info({"message": "Cache hit", "key": key})
        return snapshot

    def set(self, owner: str, repo: str, snapshot: AnalyticsSnapshot) -> None:
        """Store a snapshot.

        On a write failure every entry under the prefix is purged and the
        write is abandoned.

        Args:
            owner (str): Repository owner.
            repo (str): Repository name.
            snapshot (AnalyticsSnapshot): Snapshot to store.
        """
        key = self.cache_key(owner, repo)
        entry = {
            "cached_at": self._clock(),
            "snapshot": snapshot.model_dump(mode="json", by_alias=True),
        }

        try:
            self._get_entry_path(key).write_text(
                json.dumps(entry), encoding="utf-8"
            )
            logger.debug({"message": "Cached snapshot", "key": key})
        except OSError as e:
            logger.warning(
                {"message": "Cache write failed", "key": key, "error": str(e)}
            )
            self.clear()

    def clear(self) -> int:
        """Remove every entry under the prefix.

        Returns:
            int: Number of removed entries.
        """
        removed = 0
        for path in self._entry_paths():
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning(
                    {
                        "message": "Failed to remove cache entry",
                        "file": str(path),
                        "error": str(e),
                    }
                )
        return removed
