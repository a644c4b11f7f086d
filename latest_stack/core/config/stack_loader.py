"""
Stack loader — loads the stack catalog from YAML.

The bundled catalog lives in ``latest_stack/data/stacks.yml``.  A
different file can be supplied with ``--catalog`` or the
``LATEST_STACK_CATALOG`` environment variable.

Expected shape::

    stacks:
      - id: python
        name: Python
        category: language
        url: https://www.python.org
        version_source: python
      - id: react
        name: React
        category: frontend
        github_repo: facebook/react
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from latest_stack.core.models.stack import StackCategory, StackDefinition

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).resolve().parents[2] / "data" / "stacks.yml"

# Display order of dashboard sections
CATEGORY_ORDER: tuple[StackCategory, ...] = (
    StackCategory.LANGUAGE,
    StackCategory.FRONTEND,
    StackCategory.BACKEND,
    StackCategory.TOOLING,
    StackCategory.EDITORS,
    StackCategory.CICD,
    StackCategory.DATABASE,
    StackCategory.CLOUD,
    StackCategory.TESTING,
    StackCategory.DEVOPS,
    StackCategory.MOBILE,
)

CATEGORY_LABELS: dict[str, str] = {
    StackCategory.LANGUAGE: "Languages",
    StackCategory.FRONTEND: "Frontend",
    StackCategory.BACKEND: "Backend",
    StackCategory.TOOLING: "Tooling",
    StackCategory.EDITORS: "Editors & IDEs",
    StackCategory.CICD: "CI/CD",
    StackCategory.DATABASE: "Databases",
    StackCategory.CLOUD: "Cloud",
    StackCategory.TESTING: "Testing",
    StackCategory.DEVOPS: "DevOps",
    StackCategory.MOBILE: "Mobile",
}


class ConfigError(Exception):
    """Raised when the stack catalog is missing or invalid."""


def load_catalog(path: Path | None = None) -> list[StackDefinition]:
    """Load and validate the stack catalog.

    Individual invalid entries are skipped with a warning so one typo
    does not hide the whole dashboard.

    Args:
        path: Catalog YAML file (default: the bundled catalog).

    Returns:
        Stack definitions in file order, unique by id.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a list.
    """
    path = path or BUNDLED_CATALOG

    if not path.is_file():
        raise ConfigError(f"Catalog file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # The file may wrap entries under a "stacks" key or be a bare list
    if isinstance(data, dict):
        data = data.get("stacks")

    if not isinstance(data, list):
        raise ConfigError(f"Expected a list of stacks in {path}, got {type(data).__name__}")

    stacks: list[StackDefinition] = []
    seen: set[str] = set()

    for index, entry in enumerate(data):
        stack = _parse_entry(entry, index, path)
        if stack is None:
            continue
        if stack.id in seen:
            logger.warning("Duplicate stack id '%s' in %s — keeping the first", stack.id, path)
            continue
        seen.add(stack.id)
        stacks.append(stack)

    logger.info("Loaded %d stacks from %s", len(stacks), path)
    return stacks


def _parse_entry(entry: object, index: int, path: Path) -> StackDefinition | None:
    """Validate one catalog entry, or return None if it is invalid."""
    if not isinstance(entry, dict):
        logger.warning("Stack #%d in %s is not a mapping, skipping", index, path)
        return None

    try:
        stack = StackDefinition.model_validate(entry)
    except ValidationError as e:
        logger.warning("Invalid stack #%d in %s, skipping: %s", index, path, e)
        return None

    if stack.version_source and stack.source_key is None:
        logger.warning(
            "Stack '%s' declares unknown version_source '%s'; "
            "falling back to its GitHub repo",
            stack.id, stack.version_source,
        )
    elif not stack.is_resolvable:
        logger.debug("Stack '%s' has no version source — version stays unknown", stack.id)

    logger.debug("Loaded stack: %s", stack.id)
    return stack
