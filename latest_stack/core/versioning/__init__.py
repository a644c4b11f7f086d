"""Version string helpers — tag normalization and numeric comparison."""

from latest_stack.core.versioning.semver import best_version, compare_versions
from latest_stack.core.versioning.tags import normalize_tag

__all__ = [
    "best_version",
    "compare_versions",
    "normalize_tag",
]
