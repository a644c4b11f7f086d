"""
Stack model — a tracked product and where its version comes from.

Stacks are static catalog entries loaded from ``stacks.yml``.  Display
fields (name, url, logo) belong to the dashboard; resolution only reads
``id``, ``category`` and the three version-lookup fields.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class StackCategory(StrEnum):
    """Dashboard sections a stack can belong to."""

    LANGUAGE = "language"
    FRONTEND = "frontend"
    BACKEND = "backend"
    TOOLING = "tooling"
    EDITORS = "editors"
    CICD = "cicd"
    DATABASE = "database"
    CLOUD = "cloud"
    TESTING = "testing"
    DEVOPS = "devops"
    MOBILE = "mobile"


class VersionSourceKey(StrEnum):
    """Named version sources that replace the GitHub-repo convention.

    This is a closed set: every member must have a source registered
    in the default registry.
    """

    GCP = "gcp"
    JAVA = "java"
    PYTHON = "python"
    GO = "go"
    RUBY = "ruby"
    PHP = "php"
    AWS = "aws"
    POSTGRESQL = "postgresql"
    MONGODB = "mongodb"
    MYSQL = "mysql"
    DJANGO = "django"
    ELIXIR = "elixir"
    DART = "dart"
    SQLITE = "sqlite"
    EXPO = "expo"
    GITLAB_RUNNER = "gitlab-runner"
    R = "r"
    VISUALSTUDIO = "visualstudio"
    CURSOR = "cursor"
    QWIK = "qwik"
    PHOENIX = "phoenix"
    ALPINEJS = "alpinejs"
    HTMX = "htmx"
    APOLLO_SERVER = "apollo-server"
    GRAPHQL = "graphql"
    DENO = "deno"
    COREPACK = "corepack"
    OPENSEARCH = "opensearch"
    DYNAMODB = "dynamodb"
    JUNIT = "junit"
    NIX = "nix"
    TALOS = "talos"
    HTTP = "http"
    TLS = "tls"
    OAUTH = "oauth"
    JSON_SCHEMA = "json-schema"

    @classmethod
    def parse(cls, value: str | None) -> VersionSourceKey | None:
        """Return the matching key, or None if unset or unrecognized."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class GitHubRepo(BaseModel):
    """A GitHub repository reference."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


def _coerce_repo(value: Any) -> Any:
    # Accept the "owner/repo" shorthand used in catalog files
    if isinstance(value, str):
        owner, sep, repo = value.partition("/")
        if not sep or not owner or not repo:
            raise ValueError(f"expected 'owner/repo', got {value!r}")
        return {"owner": owner, "repo": repo}
    return value


class StackDefinition(BaseModel):
    """A tracked product (immutable, loaded once at startup)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: StackCategory
    url: str = ""
    logo: str = ""

    # Version lookup: version_source > version_repo > github_repo
    github_repo: GitHubRepo | None = None
    version_repo: GitHubRepo | None = None
    version_source: str | None = None
    version_url: str | None = None  # human-readable page, never fetched

    @field_validator("github_repo", "version_repo", mode="before")
    @classmethod
    def _parse_repo(cls, value: Any) -> Any:
        return _coerce_repo(value)

    @field_validator("id")
    @classmethod
    def _non_empty_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("stack id must not be empty")
        return value

    @property
    def source_key(self) -> VersionSourceKey | None:
        """The recognized version source, if any."""
        return VersionSourceKey.parse(self.version_source)

    @property
    def lookup_repo(self) -> GitHubRepo | None:
        """Repository used for version lookup (``version_repo`` wins)."""
        return self.version_repo or self.github_repo

    @property
    def is_resolvable(self) -> bool:
        """Whether any resolution strategy applies to this stack."""
        return self.source_key is not None or self.lookup_repo is not None
