"""Adapters — version sources for external registries and APIs.

Public re-exports for convenient access.
"""

from latest_stack.adapters.base import SourceError, VersionSource
from latest_stack.adapters.github import (
    GitHubBestTagSource,
    GitHubReleasesSource,
    GitHubTagsSource,
)
from latest_stack.adapters.mock import MockSource
from latest_stack.adapters.registry import SourceRegistry, build_default_registry
from latest_stack.adapters.relay import RelayEndpoint, RelayStyle
from latest_stack.adapters.static import StaticSource

__all__ = [
    "GitHubBestTagSource",
    "GitHubReleasesSource",
    "GitHubTagsSource",
    "MockSource",
    "RelayEndpoint",
    "RelayStyle",
    "SourceError",
    "SourceRegistry",
    "StaticSource",
    "VersionSource",
    "build_default_registry",
]
