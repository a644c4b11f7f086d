"""
Mock source — test double for resolution without network access.

Returns a configured version, or raises to simulate a source whose
failure escapes (which real sources never allow).
"""

from __future__ import annotations

import httpx

from latest_stack.adapters.base import VersionSource


class MockSource(VersionSource):
    """Configurable source for testing.

    Args:
        version: Version returned by ``fetch``.
        error: If set, ``fetch`` itself raises this exception, bypassing
            the usual never-raise guarantee.
    """

    def __init__(
        self,
        source_name: str = "mock",
        version: str = "1.0.0",
        error: Exception | None = None,
    ):
        self._name = source_name
        self.version = version
        self.error = error
        self.call_count = 0

    @property
    def name(self) -> str:
        return self._name

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        return self.version

    async def fetch(self, client: httpx.AsyncClient) -> str:
        self.call_count += 1
        if self.error is not None:
            raise self.error
        return await super().fetch(client)

    def reset(self) -> None:
        """Clear the call counter."""
        self.call_count = 0
