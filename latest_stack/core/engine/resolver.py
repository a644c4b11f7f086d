"""
Resolver — fan out version lookups across the whole catalog.

Flow:
    stacks → select source per stack → fetch all concurrently → join → version map

Every fetch runs at once on one event loop with one shared HTTP client.
Results are collected only after all of them have settled, so the map
never depends on completion order and each id is written exactly once.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

import httpx

from latest_stack import __version__
from latest_stack.adapters.registry import SourceRegistry
from latest_stack.core.config.settings import DEFAULT_HTTP_TIMEOUT
from latest_stack.core.models.stack import StackDefinition

logger = logging.getLogger(__name__)

USER_AGENT = f"latest-stack/{__version__}"


def make_client(timeout: float = DEFAULT_HTTP_TIMEOUT) -> httpx.AsyncClient:
    """HTTP client shared by every source during one pass."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


async def _resolve_one(
    stack: StackDefinition,
    registry: SourceRegistry,
    client: httpx.AsyncClient,
) -> tuple[str, str]:
    source = registry.source_for(stack)
    if source is None:
        return stack.id, ""
    version = await source.fetch(client)
    logger.debug("%s → %r via %s", stack.id, version, source.name)
    return stack.id, version


async def resolve_all(
    stacks: Sequence[StackDefinition],
    registry: SourceRegistry,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> dict[str, str]:
    """Resolve the latest version of every stack concurrently.

    Stacks without a source map to ``""`` without any network call.  A
    stack whose lookup fails outside its source (which sources never
    allow, but the join tolerates) is left out of the map.

    Args:
        stacks: Catalog to resolve.
        registry: Strategy selection.
        client: Shared HTTP client; one is created (and closed) if omitted.
        timeout: Request timeout for a client created here.

    Returns:
        Mapping of stack id → version (``""`` when unknown).
    """
    if client is None:
        async with make_client(timeout) as owned:
            return await resolve_all(stacks, registry, client=owned)

    start_time = time.monotonic()

    results = await asyncio.gather(
        *(_resolve_one(stack, registry, client) for stack in stacks),
        return_exceptions=True,
    )

    versions: dict[str, str] = {}
    for stack, result in zip(stacks, results):
        if isinstance(result, BaseException):
            logger.warning("Resolving %s failed: %s", stack.id, result)
            continue
        stack_id, version = result
        versions[stack_id] = version

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    known = sum(1 for v in versions.values() if v)
    logger.info("Resolved %d/%d versions in %dms", known, len(stacks), elapsed_ms)
    return versions


class Resolver:
    """A registry bound to an HTTP timeout, callable as ``await resolver(stacks)``."""

    def __init__(self, registry: SourceRegistry, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.registry = registry
        self.timeout = timeout

    async def __call__(self, stacks: Sequence[StackDefinition]) -> dict[str, str]:
        return await resolve_all(stacks, self.registry, timeout=self.timeout)
