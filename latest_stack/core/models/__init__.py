"""
Domain models — Pydantic types for stacks and the version cache.

All models are re-exported here for convenient access:

    from latest_stack.core.models import StackDefinition, CacheEntry
"""

from latest_stack.core.models.cache import CacheEntry
from latest_stack.core.models.stack import (
    GitHubRepo,
    StackCategory,
    StackDefinition,
    VersionSourceKey,
)

__all__ = [
    # cache.py
    "CacheEntry",
    # stack.py
    "GitHubRepo",
    "StackCategory",
    "StackDefinition",
    "VersionSourceKey",
]
