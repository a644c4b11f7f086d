"""
Relay sources — endpoints that need a CORS relay or a fallback path.

Some origins refuse direct cross-origin calls, so the dashboard asks a
chain of public relays instead.  Each relay is an independent attempt:
a network error, a non-2xx status, an unparsable body or an empty parse
result moves on to the next relay.  Only when every attempt fails does
the source give up with an empty result.

Relay URL styles:
    query   prefix + percent-encoded target   (https://api.allorigins.win/raw?url=...)
    path    prefix + raw target               (https://cors-anywhere.com/https://...)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from urllib.parse import quote

import httpx

from latest_stack.adapters.base import VersionSource, first_item, get_json, str_field
from latest_stack.core.versioning import normalize_tag

logger = logging.getLogger(__name__)

Parser = Callable[[Any], str]


class RelayStyle(StrEnum):
    """How the target URL is attached to a relay prefix."""

    QUERY = "query"
    PATH = "path"


@dataclass(frozen=True)
class RelayEndpoint:
    """One CORS relay."""

    prefix: str
    style: RelayStyle = RelayStyle.QUERY

    def wrap(self, url: str) -> str:
        if self.style == RelayStyle.QUERY:
            return self.prefix + quote(url, safe="")
        return self.prefix + url


# Tried in this order
DEFAULT_RELAYS: tuple[RelayEndpoint, ...] = (
    RelayEndpoint("https://api.allorigins.win/raw?url=", RelayStyle.QUERY),
    RelayEndpoint("https://api.cors.lol/?url=", RelayStyle.QUERY),
    RelayEndpoint("https://cors-anywhere.com/", RelayStyle.PATH),
)


async def _attempt(client: httpx.AsyncClient, url: str, parse: Parser) -> str:
    """One fetch-and-parse attempt; any failure is an empty result."""
    try:
        data = await get_json(client, url)
        return parse(data) or ""
    except Exception as e:
        logger.debug("Attempt %s failed: %s", url, e)
        return ""


async def fetch_first_success(
    client: httpx.AsyncClient,
    url: str,
    parse: Parser,
    relays: Sequence[RelayEndpoint] = DEFAULT_RELAYS,
    direct: bool = False,
) -> str:
    """Try the origin (optionally) and then each relay until one parses.

    Args:
        client: Shared HTTP client.
        url: Target URL.
        parse: Extracts a version from decoded JSON (may raise).
        relays: Relays in the order they should be tried.
        direct: Try ``url`` itself before any relay.

    Returns:
        The first non-empty parse result, or ``""``.
    """
    attempts = [url] if direct else []
    attempts.extend(relay.wrap(url) for relay in relays)

    for attempt_url in attempts:
        version = await _attempt(client, attempt_url, parse)
        if version:
            return version

    logger.debug("All %d attempts failed for %s", len(attempts), url)
    return ""


class RelayedSource(VersionSource):
    """A JSON endpoint reached directly and/or through the relay chain."""

    def __init__(
        self,
        name: str,
        url: str,
        parse: Parser,
        relays: Sequence[RelayEndpoint] = DEFAULT_RELAYS,
        direct: bool = True,
    ):
        self._name = name
        self.url = url
        self.parse = parse
        self.relays = tuple(relays)
        self.direct = direct

    @property
    def name(self) -> str:
        return self._name

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        return await fetch_first_success(
            client, self.url, self.parse, relays=self.relays, direct=self.direct,
        )


# ── Parsers for relayed endpoints ───────────────────────────────

ADOPTIUM_URL = "https://api.adoptium.net/v3/info/release_versions?release_type=ga&page_size=1"
R_HUB_URL = "https://api.r-hub.io/rversions/r-release"
GITLAB_RUNNER_URL = (
    "https://gitlab.com/api/v4/projects/gitlab-org%2Fgitlab-runner/releases?per_page=1"
)

_JAVA_VERSION = re.compile(r"^(\d+\.\d+\.\d+)")


def parse_adoptium(data: Any) -> str:
    """``versions[0].openjdk_version`` (or ``semver``) trimmed to X.Y.Z."""
    versions = data.get("versions") if isinstance(data, dict) else None
    latest = first_item(versions)
    raw = str_field(latest, "openjdk_version") or str_field(latest, "semver")
    if not raw:
        return ""
    match = _JAVA_VERSION.match(raw)
    return match.group(1) if match else raw


def parse_r_hub(data: Any) -> str:
    return str_field(data, "version")


def parse_gitlab_release(data: Any) -> str:
    tag = str_field(first_item(data), "tag_name")
    return normalize_tag(tag) if tag else ""


def adoptium_source(relays: Sequence[RelayEndpoint] = DEFAULT_RELAYS) -> RelayedSource:
    """Java (Eclipse Temurin GA releases); direct first, then relays."""
    return RelayedSource("adoptium:java", ADOPTIUM_URL, parse_adoptium, relays, direct=True)


def r_hub_source(relays: Sequence[RelayEndpoint] = DEFAULT_RELAYS) -> RelayedSource:
    """R release; the R-hub API sends no CORS headers, so relays only."""
    return RelayedSource("r-hub:r", R_HUB_URL, parse_r_hub, relays, direct=False)


def gitlab_runner_source(relays: Sequence[RelayEndpoint] = DEFAULT_RELAYS) -> RelayedSource:
    """GitLab Runner lives on gitlab.com; direct first, then relays."""
    return RelayedSource(
        "gitlab:gitlab-runner", GITLAB_RUNNER_URL, parse_gitlab_release, relays, direct=True,
    )
