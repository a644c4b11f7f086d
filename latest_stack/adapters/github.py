"""
GitHub sources — releases, tags, and best-of-tags lookups.

The releases source is the default for any stack with a GitHub repo.
Anonymous calls work but share a small hourly rate limit; a bearer
token raises it.
"""

from __future__ import annotations

import logging

import httpx

from latest_stack.adapters.base import SourceError, VersionSource, first_item, get_json, str_field
from latest_stack.core.versioning import best_version, normalize_tag

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


def github_headers(token: str | None) -> dict[str, str]:
    """Request headers for api.github.com, with auth when a token is set."""
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class _GitHubSource(VersionSource):
    """Shared plumbing for sources bound to one repository."""

    kind = "github"

    def __init__(self, owner: str, repo: str, token: str | None = None):
        self.owner = owner
        self.repo = repo
        self._headers = github_headers(token)

    @property
    def name(self) -> str:
        return f"{self.kind}:{self.owner}/{self.repo}"

    @property
    def releases_url(self) -> str:
        return f"{GITHUB_API}/repos/{self.owner}/{self.repo}/releases/latest"

    def tags_url(self, per_page: int = 1) -> str:
        return f"{GITHUB_API}/repos/{self.owner}/{self.repo}/tags?per_page={per_page}"

    async def _latest_tag(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, self.tags_url(1), headers=self._headers)
        tag = str_field(first_item(data), "name")
        return normalize_tag(tag) if tag else ""


class GitHubReleasesSource(_GitHubSource):
    """Latest GitHub Release, falling back to the newest tag on 404.

    Repos that never publish Releases answer 404 on ``releases/latest``;
    only that status triggers the tags lookup.  Any other non-success
    status (rate limiting included) yields an empty result.
    """

    kind = "releases"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        response = await client.get(self.releases_url, headers=self._headers)

        if response.status_code == 404:
            logger.debug("No releases for %s/%s — trying tags", self.owner, self.repo)
            return await self._latest_tag(client)

        if not response.is_success:
            raise SourceError(f"GET {self.releases_url} returned HTTP {response.status_code}")

        return normalize_tag(str_field(response.json(), "tag_name"))


class GitHubTagsSource(_GitHubSource):
    """Newest tag, for repos that never publish GitHub Releases."""

    kind = "tags"

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        return await self._latest_tag(client)


class GitHubBestTagSource(_GitHubSource):
    """Greatest of the N most recent tags.

    For repos whose tag listing is not newest-first (or contains
    misspelled tags), every candidate is normalized and compared
    numerically instead of trusting the first one.
    """

    kind = "best-tag"

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        per_page: int = 30,
    ):
        super().__init__(owner, repo, token)
        self.per_page = per_page

    async def _fetch(self, client: httpx.AsyncClient) -> str:
        data = await get_json(client, self.tags_url(self.per_page), headers=self._headers)
        if not isinstance(data, list):
            raise SourceError(f"Unexpected tags payload for {self.owner}/{self.repo}")
        return best_version(normalize_tag(str_field(item, "name")) for item in data)
