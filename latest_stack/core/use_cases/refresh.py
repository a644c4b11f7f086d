"""
Refresh use case — stale-while-revalidate over the version cache.

Per session:
    cold start (no valid cache)  → is_loading, resolve once, save, show the result
    warm start (valid cache)     → show the cached snapshot at once and
                                   revalidate in the background

A background revalidation merges fresh results over the served snapshot
(fresh wins, but only with a non-empty value), always re-saves the
merge, and notifies the consumer once and only if something changed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field

from latest_stack.core.models.stack import StackDefinition
from latest_stack.core.persistence.version_cache import VersionCache

logger = logging.getLogger(__name__)

ResolveFn = Callable[[Sequence[StackDefinition]], Awaitable[dict[str, str]]]
UpdateFn = Callable[[dict[str, str]], None]


@dataclass
class InitialState:
    """What the consumer can show before any network call."""

    versions: dict[str, str] = field(default_factory=dict)
    is_loading: bool = True


def has_changes(prev: Mapping[str, str], new: Mapping[str, str]) -> bool:
    """True if the maps differ in size or in any id's value."""
    if len(prev) != len(new):
        return True
    return any(prev.get(stack_id) != version for stack_id, version in new.items())


def merge_versions(cached: Mapping[str, str], fresh: Mapping[str, str]) -> dict[str, str]:
    """Overlay fresh non-empty versions on the cached ones."""
    merged = dict(cached)
    for stack_id, version in fresh.items():
        if version:
            merged[stack_id] = version
    return merged


class VersionRefresher:
    """Serve cached versions instantly and keep them fresh.

    Args:
        cache: Persisted last-known-good versions.
        resolve: Coroutine function resolving a catalog to a version map.
    """

    def __init__(self, cache: VersionCache, resolve: ResolveFn):
        self.cache = cache
        self._resolve = resolve
        self._tasks: set[asyncio.Task[dict[str, str]]] = set()

    @property
    def is_revalidating(self) -> bool:
        """A background revalidation is still running."""
        return any(not task.done() for task in self._tasks)

    def initial_state(self) -> InitialState:
        """Cached snapshot (not loading) or an empty loading state."""
        cached = self.cache.load()
        if cached:
            return InitialState(versions=dict(cached), is_loading=False)
        return InitialState()

    async def fetch_all_versions(
        self,
        stacks: Sequence[StackDefinition],
        on_update: UpdateFn | None = None,
    ) -> dict[str, str]:
        """Return versions now; revalidate in the background if cached.

        Cold start resolves, saves and returns the full result (empty
        values included).  Warm start returns the cached snapshot and
        schedules ``revalidate``; use ``wait_for_background`` to join it.
        """
        cached = self.cache.load()

        if cached:
            served = dict(cached)
            logger.info("Serving %d cached versions, revalidating", len(served))
            self.refresh_in_background(stacks, served, on_update)
            return served

        logger.info("No valid cache — resolving %d stacks", len(stacks))
        return await self.resolve_and_save(stacks)

    async def resolve_and_save(self, stacks: Sequence[StackDefinition]) -> dict[str, str]:
        """Resolve every stack now and persist the known versions."""
        fresh = await self._resolve(stacks)
        self.cache.save(fresh)
        return fresh

    def refresh_in_background(
        self,
        stacks: Sequence[StackDefinition],
        served: Mapping[str, str],
        on_update: UpdateFn | None = None,
    ) -> asyncio.Task[dict[str, str]]:
        """Start ``revalidate`` as a task on the running loop."""
        task = asyncio.create_task(self.revalidate(stacks, dict(served), on_update))
        self._tasks.add(task)
        return task

    async def revalidate(
        self,
        stacks: Sequence[StackDefinition],
        served: Mapping[str, str],
        on_update: UpdateFn | None = None,
    ) -> dict[str, str]:
        """Resolve again, merge over ``served``, save, and notify on change."""
        fresh = await self._resolve(stacks)
        merged = merge_versions(served, fresh)
        self.cache.save(merged)

        if has_changes(served, merged):
            logger.info("Revalidation changed versions — notifying")
            if on_update is not None:
                on_update(merged)
        else:
            logger.debug("Revalidation found no changes")

        return merged

    async def wait_for_background(self) -> None:
        """Wait until every background revalidation has finished.

        Tasks are kept until awaited here, so an error raised by
        ``on_update`` surfaces even if the task finished earlier.
        """
        tasks = list(self._tasks)
        self._tasks.clear()
        if tasks:
            await asyncio.gather(*tasks)
