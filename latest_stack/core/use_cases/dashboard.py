"""
Dashboard use case — group resolved versions into display sections.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from latest_stack.core.config.stack_loader import CATEGORY_LABELS, CATEGORY_ORDER
from latest_stack.core.models.stack import StackCategory, StackDefinition

UNKNOWN_VERSION = "—"

ADVISORY_MESSAGE = (
    "Could not fetch versions (GitHub API rate limit?). "
    "Set LATEST_STACK_GITHUB_TOKEN or try again later."
)


@dataclass
class DashboardEntry:
    id: str
    name: str
    url: str
    version: str = ""

    @property
    def display_version(self) -> str:
        return self.version or UNKNOWN_VERSION

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "url": self.url, "version": self.version}


@dataclass
class DashboardSection:
    category: str
    entries: list[DashboardEntry] = field(default_factory=list)

    @property
    def label(self) -> str:
        return CATEGORY_LABELS.get(self.category, self.category)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "label": self.label,
            "stacks": [e.to_dict() for e in self.entries],
        }


@dataclass
class Dashboard:
    """Everything a renderer needs."""

    sections: list[DashboardSection] = field(default_factory=list)
    is_loading: bool = False
    advisory: str | None = None

    @property
    def total(self) -> int:
        return sum(len(s.entries) for s in self.sections)

    @property
    def known(self) -> int:
        return sum(1 for s in self.sections for e in s.entries if e.version)

    def to_dict(self) -> dict:
        result: dict = {
            "is_loading": self.is_loading,
            "total": self.total,
            "known": self.known,
            "sections": [s.to_dict() for s in self.sections],
        }
        if self.advisory:
            result["advisory"] = self.advisory
        return result


def _sort_key(stack: StackDefinition) -> str:
    return stack.name.casefold()


def _excluded(stack: StackDefinition, category: StackCategory) -> bool:
    # R is a language; a stray catalog entry must not also show under Tooling
    return category == StackCategory.TOOLING and stack.name == "R"


def matches_search(stack: StackDefinition, query: str) -> bool:
    """Case-insensitive substring match on the stack name."""
    needle = query.strip().casefold()
    return not needle or needle in stack.name.casefold()


def build_dashboard(
    stacks: Sequence[StackDefinition],
    versions: Mapping[str, str],
    is_loading: bool = False,
    search: str = "",
) -> Dashboard:
    """Group stacks by category in display order.

    Args:
        stacks: The catalog.
        versions: Resolved versions (missing or empty means unknown).
        is_loading: A first resolution is still running.
        search: Optional name filter.

    Returns:
        Dashboard with non-empty sections only.  ``advisory`` is set when
        nothing is loading and no version at all is known.
    """
    by_category: dict[StackCategory, list[StackDefinition]] = {}
    for stack in stacks:
        by_category.setdefault(stack.category, []).append(stack)

    sections: list[DashboardSection] = []
    for category in CATEGORY_ORDER:
        members = [
            s for s in by_category.get(category, [])
            if not _excluded(s, category) and matches_search(s, search)
        ]
        if not members:
            continue
        entries = [
            DashboardEntry(id=s.id, name=s.name, url=s.url, version=versions.get(s.id, ""))
            for s in sorted(members, key=_sort_key)
        ]
        sections.append(DashboardSection(category=category.value, entries=entries))

    advisory = None
    if not is_loading and not any(versions.values()):
        advisory = ADVISORY_MESSAGE

    return Dashboard(sections=sections, is_loading=is_loading, advisory=advisory)
