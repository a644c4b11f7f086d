"""
Tests for core models — StackDefinition, GitHubRepo, VersionSourceKey, CacheEntry.
"""

import pytest
from pydantic import ValidationError

from latest_stack.core.models import (
    CacheEntry,
    GitHubRepo,
    StackCategory,
    StackDefinition,
    VersionSourceKey,
)


class TestVersionSourceKey:
    def test_parse_known(self):
        """Known keys parse to members."""
        assert VersionSourceKey.parse("gitlab-runner") is VersionSourceKey.GITLAB_RUNNER
        assert VersionSourceKey.parse("json-schema") is VersionSourceKey.JSON_SCHEMA

    def test_parse_unknown(self):
        """Unknown or empty keys parse to None."""
        assert VersionSourceKey.parse("cobol") is None
        assert VersionSourceKey.parse("") is None
        assert VersionSourceKey.parse(None) is None

    def test_values_unique(self):
        """Key values are unique."""
        values = [k.value for k in VersionSourceKey]
        assert len(values) == len(set(values))


class TestGitHubRepo:
    def test_slug(self):
        """Slug joins owner and repo."""
        assert GitHubRepo(owner="golang", repo="go").slug == "golang/go"

    def test_frozen(self):
        """Repo references are immutable."""
        repo = GitHubRepo(owner="a", repo="b")
        with pytest.raises(ValidationError):
            repo.owner = "c"


class TestStackDefinition:
    def test_minimal(self):
        """A stack needs only id, name and category."""
        s = StackDefinition(id="bun", name="Bun", category="language")
        assert s.category is StackCategory.LANGUAGE
        assert s.url == ""
        assert s.lookup_repo is None
        assert not s.is_resolvable

    def test_repo_shorthand(self):
        """Shorthand "owner/repo" strings are accepted."""
        s = StackDefinition.model_validate(
            {"id": "react", "name": "React", "category": "frontend", "github_repo": "facebook/react"}
        )
        assert s.github_repo == GitHubRepo(owner="facebook", repo="react")

    def test_repo_mapping(self):
        """Mapping form of a repo is accepted."""
        s = StackDefinition.model_validate({
            "id": "react",
            "name": "React",
            "category": "frontend",
            "github_repo": {"owner": "facebook", "repo": "react"},
        })
        assert s.github_repo.slug == "facebook/react"

    @pytest.mark.parametrize("bad", ["react", "/react", "facebook/"])
    def test_bad_repo_shorthand(self, bad):
        """Malformed shorthand is rejected."""
        with pytest.raises(ValidationError):
            StackDefinition(id="x", name="X", category="frontend", github_repo=bad)

    def test_version_repo_wins(self):
        """version_repo overrides github_repo for lookup."""
        s = StackDefinition(
            id="docker", name="Docker", category="devops",
            github_repo="docker/cli", version_repo="moby/moby",
        )
        assert s.lookup_repo.slug == "moby/moby"
        assert s.is_resolvable

    def test_source_key(self):
        """A known version_source is resolvable."""
        s = StackDefinition(id="py", name="Python", category="language", version_source="python")
        assert s.source_key is VersionSourceKey.PYTHON
        assert s.is_resolvable

    def test_unknown_source_key_is_kept_but_unresolvable(self):
        """An unknown version_source is kept but not used."""
        s = StackDefinition(id="x", name="X", category="tooling", version_source="nope")
        assert s.version_source == "nope"
        assert s.source_key is None
        assert not s.is_resolvable

    def test_empty_id_rejected(self):
        """Blank ids are rejected."""
        with pytest.raises(ValidationError):
            StackDefinition(id="  ", name="X", category="tooling")

    def test_unknown_category_rejected(self):
        """Categories outside the enum are rejected."""
        with pytest.raises(ValidationError):
            StackDefinition(id="x", name="X", category="favorites")


class TestCacheEntry:
    def test_expiry_boundary(self):
        """An entry expires strictly after its timestamp."""
        entry = CacheEntry(data={"a": "1"}, expires=1000)
        assert not entry.is_expired(1000)
        assert entry.is_expired(1001)

    def test_known_versions(self):
        """Empty versions are not known."""
        entry = CacheEntry(data={"a": "1", "b": ""}, expires=0)
        assert entry.known_versions() == {"a": "1"}
