"""
Version cache — last-known-good versions with a time-to-live.

The cache is one JSON file named after a versioned key::

    ~/.cache/latest-stack/latest-stack-versions-v7.json
    {"data": {"python": "3.13.1", ...}, "expires": 1760000000000}

Bumping CACHE_KEY orphans files written by an older schema instead of
migrating them.  Only non-empty versions are ever written, so a
transient lookup failure can never erase a known-good value.

Writes are atomic (write to temp file, then rename) and best-effort:
a failed write is logged and reported as False, never raised.
"""

from __future__ import annotations

import json
import logging
import tempfile
import time
from collections.abc import Callable, Mapping
from pathlib import Path

from latest_stack.core.config.settings import DEFAULT_CACHE_TTL
from latest_stack.core.models.cache import CacheEntry

logger = logging.getLogger(__name__)

CACHE_KEY = "latest-stack-versions-v7"


def default_cache_path(cache_dir: Path) -> Path:
    """Get the cache file path inside a cache directory."""
    return cache_dir / f"{CACHE_KEY}.json"


def _now_ms() -> int:
    return int(time.time() * 1000)


class VersionCache:
    """File-backed cache of stack id → version.

    Args:
        path: Cache file location.
        ttl_seconds: Lifetime of a written snapshot.
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        path: Path,
        ttl_seconds: int = DEFAULT_CACHE_TTL,
        clock: Callable[[], int] = _now_ms,
    ):
        self.path = path
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def read_entry(self) -> CacheEntry | None:
        """Raw entry on disk (expired or not), or None if missing/corrupt."""
        if not self.path.is_file():
            logger.debug("No cache file at %s", self.path)
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
            return CacheEntry.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            logger.warning("Corrupt cache file %s: %s — ignoring", self.path, e)
            return None
        except Exception as e:
            logger.warning("Cannot load cache from %s: %s — ignoring", self.path, e)
            return None

    def load(self) -> dict[str, str] | None:
        """Cached versions, or None if missing, corrupt, expired or empty."""
        entry = self.read_entry()
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            logger.info("Cache at %s expired — ignoring", self.path)
            return None

        known = entry.known_versions()
        if not known:
            return None

        logger.debug("Loaded %d cached versions from %s", len(known), self.path)
        return known

    def save(self, versions: Mapping[str, str]) -> bool:
        """Persist the non-empty versions with a fresh expiry.

        Returns:
            True if a snapshot was written.  Nothing is written when no
            version is known.
        """
        data = {k: v for k, v in versions.items() if v}
        if not data:
            logger.debug("No known versions — cache left untouched")
            return False

        entry = CacheEntry(data=data, expires=self._clock() + self.ttl_seconds * 1000)
        content = json.dumps(entry.model_dump(mode="json"), indent=2, sort_keys=True) + "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            _fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=".cache_",
                suffix=".tmp",
            )
            tmp = Path(tmp_path)
            try:
                with open(_fd, "w", encoding="utf-8") as fh:
                    fh.write(content)
                tmp.replace(self.path)
            except Exception:
                tmp.unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.warning("Failed to save cache to %s: %s", self.path, e)
            return False

        logger.debug("Cached %d versions to %s", len(data), self.path)
        return True

    def clear(self) -> bool:
        """Delete the cache file. Returns True if one existed."""
        if not self.path.is_file():
            return False
        self.path.unlink(missing_ok=True)
        logger.info("Cleared cache at %s", self.path)
        return True
