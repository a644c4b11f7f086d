"""
Source registry — maps version-source keys to sources.

The registry is the single point of strategy selection.  For each stack
exactly one strategy applies:

    1. a recognized ``version_source`` → the registered source
    2. ``version_repo`` or ``github_repo`` → GitHub releases (tags on 404)
    3. neither → no source; the version stays unknown
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from latest_stack.adapters.base import VersionSource
from latest_stack.adapters.github import (
    GitHubBestTagSource,
    GitHubReleasesSource,
    GitHubTagsSource,
)
from latest_stack.adapters.registries import (
    EndOfLifeSource,
    GoDownloadsSource,
    HexSource,
    JsonFieldSource,
    NpmSource,
    PyPISource,
)
from latest_stack.adapters.relay import (
    DEFAULT_RELAYS,
    RelayEndpoint,
    adoptium_source,
    gitlab_runner_source,
    r_hub_source,
)
from latest_stack.adapters.static import StaticSource
from latest_stack.core.config.settings import Settings
from latest_stack.core.models.stack import StackDefinition, VersionSourceKey

logger = logging.getLogger(__name__)

CURSOR_VERSIONS_API = "https://cursor-versions.selfhoster.nl/api/v1/versions?version=latest"


class SourceRegistry:
    """Registry of named sources plus the default GitHub convention.

    Args:
        github_token: Bearer token passed to every GitHub source the
            registry creates for repo-based stacks.
    """

    def __init__(self, github_token: str | None = None):
        self._sources: dict[VersionSourceKey, VersionSource] = {}
        self._github_token = github_token

    def register(self, key: VersionSourceKey, source: VersionSource) -> None:
        """Register a source under a key."""
        if key in self._sources:
            logger.warning("Overwriting existing source: %s", key)
        self._sources[key] = source
        logger.debug("Registered source %s → %s", key, source.name)

    def unregister(self, key: VersionSourceKey) -> None:
        """Remove a source from the registry."""
        self._sources.pop(key, None)

    def get(self, key: VersionSourceKey) -> VersionSource | None:
        """Look up a source by key."""
        return self._sources.get(key)

    def list_sources(self) -> list[str]:
        """List all registered keys."""
        return [k.value for k in self._sources]

    def missing_keys(self) -> list[VersionSourceKey]:
        """Keys of the closed VersionSourceKey set with no source."""
        return [k for k in VersionSourceKey if k not in self._sources]

    def source_for(self, stack: StackDefinition) -> VersionSource | None:
        """Select the single strategy that applies to a stack."""
        key = stack.source_key
        if key is not None:
            source = self._sources.get(key)
            if source is not None:
                return source
            logger.debug("No source registered for '%s' (stack %s)", key, stack.id)

        repo = stack.lookup_repo
        if repo is not None:
            return GitHubReleasesSource(repo.owner, repo.repo, token=self._github_token)

        return None


def build_default_registry(
    settings: Settings | None = None,
    relays: Sequence[RelayEndpoint] = DEFAULT_RELAYS,
) -> SourceRegistry:
    """Build the registry with every known source.

    The GitHub token comes from ``settings`` and is handed to each
    GitHub source explicitly.
    """
    token = settings.github_token if settings else None
    registry = SourceRegistry(github_token=token)

    def releases(owner: str, repo: str) -> GitHubReleasesSource:
        return GitHubReleasesSource(owner, repo, token=token)

    def tags(owner: str, repo: str) -> GitHubTagsSource:
        return GitHubTagsSource(owner, repo, token=token)

    K = VersionSourceKey
    sources: dict[VersionSourceKey, VersionSource] = {
        # GitHub
        K.GCP: releases("actions-hub", "gcloud"),  # mirrors official gcloud versions
        K.DENO: releases("denoland", "deno"),
        K.COREPACK: releases("nodejs", "corepack"),
        K.OPENSEARCH: releases("opensearch-project", "OpenSearch"),
        K.JUNIT: releases("junit-team", "junit5"),
        K.TALOS: releases("siderolabs", "talos"),
        K.AWS: tags("aws", "aws-cli"),
        K.DART: tags("dart-lang", "sdk"),
        K.NIX: tags("NixOS", "nix"),
        K.SQLITE: GitHubBestTagSource("sqlite", "sqlite", token=token, per_page=30),
        # endoflife.date
        K.PYTHON: EndOfLifeSource("python"),
        K.RUBY: EndOfLifeSource("ruby"),
        K.PHP: EndOfLifeSource("php"),
        K.POSTGRESQL: EndOfLifeSource("postgresql"),
        K.MONGODB: EndOfLifeSource("mongodb"),
        K.MYSQL: EndOfLifeSource("mysql"),
        K.ELIXIR: EndOfLifeSource("elixir"),
        K.VISUALSTUDIO: EndOfLifeSource("visual-studio", cycle_fallback=True),
        # npm
        K.EXPO: NpmSource("expo"),
        K.QWIK: NpmSource("@builder.io/qwik"),  # GitHub latest is the eslint plugin
        K.ALPINEJS: NpmSource("alpinejs"),
        K.HTMX: NpmSource("htmx.org"),
        K.APOLLO_SERVER: NpmSource("@apollo/server"),
        K.GRAPHQL: NpmSource("graphql"),
        K.DYNAMODB: NpmSource("@aws-sdk/client-dynamodb"),  # managed service; track the SDK
        K.JSON_SCHEMA: NpmSource("json-schema"),
        # Language package indexes and vendor APIs
        K.DJANGO: PyPISource("Django"),
        K.PHOENIX: HexSource("phoenix"),
        K.GO: GoDownloadsSource(),
        K.CURSOR: JsonFieldSource("cursor-versions:cursor", CURSOR_VERSIONS_API),
        # Relayed
        K.JAVA: adoptium_source(relays),
        K.R: r_hub_source(relays),
        K.GITLAB_RUNNER: gitlab_runner_source(relays),
        # No API
        K.HTTP: StaticSource("http", "3"),
        K.TLS: StaticSource("tls", "1.3"),
        K.OAUTH: StaticSource("oauth", "2.1"),
    }

    for key, source in sources.items():
        registry.register(key, source)

    missing = registry.missing_keys()
    if missing:
        logger.warning("Version sources without an implementation: %s", missing)

    return registry
