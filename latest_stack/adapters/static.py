"""
Static source — products with no queryable "latest version" API.

Protocol versions (HTTP/3, TLS 1.3, OAuth 2.1) change rarely and have
no registry to ask, so the value is a constant.
"""

from __future__ import annotations

import httpx

from latest_stack.adapters.base import VersionSource


class StaticSource(VersionSource):
    """Always returns the same version, without any network call."""

    def __init__(self, product: str, version: str):
        self.product = product
        self.version = version

    @property
    def name(self) -> str:
        return f"static:{self.product}"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        return self.version
