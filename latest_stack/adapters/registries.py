"""
Registry sources — package registries and release-tracking APIs.

Single GET, one named field, no fallback.
"""

from __future__ import annotations

from typing import Any

import httpx

from latest_stack.adapters.base import SourceError, VersionSource, first_item, get_json, str_field
from latest_stack.core.versioning import normalize_tag

NPM_REGISTRY = "https://registry.npmjs.org"
ENDOFLIFE_API = "https://endoflife.date/api"
PYPI_API = "https://pypi.org/pypi"
HEX_API = "https://hex.pm/api/packages"
GO_DOWNLOADS = "https://go.dev/dl/?mode=json"


class NpmSource(VersionSource):
    """``dist-tags.latest`` of an npm package."""

    def __init__(self, package: str):
        self.package = package

    @property
    def name(self) -> str:
        return f"npm:{self.package}"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, f"{NPM_REGISTRY}/{self.package}/latest")
        return str_field(data, "version")


class EndOfLifeSource(VersionSource):
    """Latest release of the newest cycle on endoflife.date.

    Args:
        product: endoflife.date product slug (e.g. 'python').
        cycle_fallback: Use the cycle name when ``latest`` is missing.
    """

    def __init__(self, product: str, cycle_fallback: bool = False):
        self.product = product
        self.cycle_fallback = cycle_fallback

    @property
    def name(self) -> str:
        return f"endoflife:{self.product}"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, f"{ENDOFLIFE_API}/{self.product}.json")
        newest = first_item(data)
        version = str_field(newest, "latest")
        if not version and self.cycle_fallback:
            version = str_field(newest, "cycle")
        return version


class PyPISource(VersionSource):
    """``info.version`` of a PyPI project."""

    def __init__(self, package: str):
        self.package = package

    @property
    def name(self) -> str:
        return f"pypi:{self.package}"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, f"{PYPI_API}/{self.package}/json")
        info = data.get("info") if isinstance(data, dict) else None
        return str_field(info, "version")


class HexSource(VersionSource):
    """``latest_stable_version`` of a hex.pm package."""

    def __init__(self, package: str):
        self.package = package

    @property
    def name(self) -> str:
        return f"hex:{self.package}"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, f"{HEX_API}/{self.package}")
        return str_field(data, "latest_stable_version")


class GoDownloadsSource(VersionSource):
    """First stable release listed on go.dev/dl."""

    @property
    def name(self) -> str:
        return "go.dev:go"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, GO_DOWNLOADS)
        if not isinstance(data, list):
            raise SourceError("Unexpected go.dev/dl payload")
        stable = next((item for item in data if _is_stable(item)), None)
        version = str_field(stable, "version")
        return normalize_tag(version) if version else ""


def _is_stable(item: Any) -> bool:
    return isinstance(item, dict) and item.get("stable") is True


class JsonFieldSource(VersionSource):
    """One string field of a JSON object at a fixed URL."""

    def __init__(self, name: str, url: str, field: str = "version"):
        self._name = name
        self.url = url
        self.field = field

    @property
    def name(self) -> str:
        return self._name

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, self.url)
        return str_field(data, self.field)
