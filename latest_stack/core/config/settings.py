"""
Settings — runtime configuration read from the environment.

Read once by the entry point and passed down explicitly.  Nothing here
is required: without a GitHub token requests go out anonymously and
are subject to tighter rate limits, which is a degradation and not an
error.

    LATEST_STACK_GITHUB_TOKEN   bearer token for api.github.com (or GITHUB_TOKEN)
    LATEST_STACK_CACHE_DIR      cache directory (default ~/.cache/latest-stack)
    LATEST_STACK_CACHE_TTL      cache lifetime in seconds (default 3600)
    LATEST_STACK_HTTP_TIMEOUT   per-request timeout in seconds (default 10)
    LATEST_STACK_CATALOG        catalog YAML overriding the bundled one
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "LATEST_STACK_"

DEFAULT_CACHE_TTL = 60 * 60  # 1 hour
DEFAULT_HTTP_TIMEOUT = 10.0


def default_cache_dir() -> Path:
    return Path.home() / ".cache" / "latest-stack"


class Settings(BaseModel):
    """Resolved configuration for one process."""

    github_token: str | None = None
    cache_dir: Path = Field(default_factory=default_cache_dir)
    cache_ttl: int = DEFAULT_CACHE_TTL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    catalog_path: Path | None = None

    @property
    def has_github_token(self) -> bool:
        return bool(self.github_token)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from (default: ``os.environ``).

    Returns:
        Settings with defaults applied for anything unset or invalid.
    """
    env = os.environ if environ is None else environ

    token = env.get(f"{ENV_PREFIX}GITHUB_TOKEN") or env.get("GITHUB_TOKEN") or None
    if token is None:
        logger.info("No GitHub token configured — using anonymous API access")

    cache_dir_raw = env.get(f"{ENV_PREFIX}CACHE_DIR")
    cache_dir = Path(cache_dir_raw).expanduser() if cache_dir_raw else default_cache_dir()

    catalog_raw = env.get(f"{ENV_PREFIX}CATALOG")

    return Settings(
        github_token=token,
        cache_dir=cache_dir,
        cache_ttl=int(_number(env, f"{ENV_PREFIX}CACHE_TTL", DEFAULT_CACHE_TTL)),
        http_timeout=_number(env, f"{ENV_PREFIX}HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        catalog_path=Path(catalog_raw).expanduser() if catalog_raw else None,
    )


def _number(env: Mapping[str, str], key: str, default: float) -> float:
    """Read a positive number, falling back to ``default`` with a warning."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number (using %s)", key, raw, default)
        return default
    if not math.isfinite(value):
        logger.warning("Ignoring %s=%r: not a finite number (using %s)", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive (using %s)", key, raw, default)
        return default
    return value
