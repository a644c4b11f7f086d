"""
Cache entry — the persisted snapshot of last-known-good versions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Serialized as ``{"data": {id: version}, "expires": epoch_ms}``."""

    data: dict[str, str] = Field(default_factory=dict)
    expires: int = 0

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.expires

    def known_versions(self) -> dict[str, str]:
        """Entries with a non-empty version only."""
        return {k: v for k, v in self.data.items() if v}
