"""
Source base — the contract between the resolver and version sources.

Every source knows one external endpoint: how to call it and how to
pull a version string out of the response.  The resolver only talks to
sources through this interface.

Sources NEVER raise.  Transport errors, non-success statuses, malformed
bodies and missing fields all become an empty string, which means
"unknown version" everywhere downstream.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """Internal signal that a source could not produce a version.

    Raised inside ``_fetch`` implementations and converted to an empty
    result by ``VersionSource.fetch``; it never leaves a source.
    """


class VersionSource(ABC):
    """Abstract base class for all version sources.

    To create a new source:
        1. Subclass VersionSource
        2. Implement name and _fetch
        3. Register it in the SourceRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short human-readable identifier (e.g. 'npm:expo')."""

    @abstractmethod
    async def _fetch(self, client: httpx.AsyncClient) -> str:
        """Fetch and extract the version. May raise; ``fetch`` catches."""

    async def fetch(self, client: httpx.AsyncClient) -> str:
        """Fetch the latest version, or ``""`` if it cannot be determined."""
        try:
            version = await self._fetch(client)
        except Exception as e:
            logger.debug("Source %s failed: %s", self.name, e)
            return ""
        return version or ""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET ``url`` and decode JSON, raising SourceError on a non-2xx status."""
    response = await client.get(url, headers=headers)
    if not response.is_success:
        raise SourceError(f"GET {url} returned HTTP {response.status_code}")
    return response.json()


def first_item(data: Any) -> Any:
    """First element of a JSON array, or None."""
    if isinstance(data, list) and data:
        return data[0]
    return None


def str_field(data: Any, key: str) -> str:
    """String value of ``data[key]``, or ``""`` when absent or not a string."""
    if isinstance(data, dict):
        value = data.get(key)
        if isinstance(value, str):
            return value
    return ""
