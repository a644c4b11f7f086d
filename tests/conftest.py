"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from latest_stack.core.models.stack import StackDefinition


class FakeHttp:
    """Routes requests to canned responses and records every call.

    Routes match the full URL exactly, then by prefix in registration
    order.  Unmatched URLs answer 404.
    """

    def __init__(self) -> None:
        self._routes: list[tuple[str, Callable[[httpx.Request], httpx.Response]]] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        url: str,
        json: Any = None,
        status: int = 200,
        text: str | None = None,
        error: type[httpx.TransportError] | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error("simulated failure", request=request)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json)

        self._routes.append((url, respond))

    @property
    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        for route, respond in self._routes:
            if url == route:
                return respond(request)
        for route, respond in self._routes:
            if url.startswith(route):
                return respond(request)
        return httpx.Response(404, json={"message": "Not Found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_http() -> FakeHttp:
    """Canned HTTP responses for sources."""
    return FakeHttp()


@pytest.fixture
def make_stack() -> Callable[..., StackDefinition]:
    """Factory for stack definitions with sensible defaults."""

    def _make(stack_id: str = "demo", **fields: Any) -> StackDefinition:
        data: dict[str, Any] = {
            "id": stack_id,
            "name": fields.pop("name", stack_id.title()),
            "category": fields.pop("category", "tooling"),
        }
        data.update(fields)
        return StackDefinition.model_validate(data)

    return _make


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for the version cache."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return cache_dir


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """CLI tests reconfigure the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
