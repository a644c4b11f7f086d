"""
Tag normalization — turn ecosystem-specific release tags into bare versions.

Projects publish tags in many shapes (``v1.2.3``, ``go1.22.0``,
``swift-6.2.3-RELEASE``, ``version-3.51.2``).  The rules below strip
those conventions so versions from different products look alike and
can be compared numerically.

Rules run in order and each fires at most once.  ``-RELEASE`` is
stripped after ``swift-`` so ``swift-6.2.3-RELEASE`` becomes ``6.2.3``.
"""

from __future__ import annotations

import re

_RULES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^docker-v"),           # moby/moby: docker-v29.2.1
    re.compile(r"^go"),                 # golang/go: go1.22.0
    re.compile(r"^swift-"),             # swiftlang/swift: swift-6.2.3-RELEASE
    re.compile(r"-RELEASE$", re.IGNORECASE),
    re.compile(r"^(vesion|version)-"),  # sqlite/sqlite, including the typo tags
    re.compile(r"^v"),
)


def normalize_tag(tag: str) -> str:
    """Strip known prefix/suffix conventions from a release tag.

    Unmatched input is returned unchanged.  Never raises.
    """
    result = tag
    for rule in _RULES:
        result = rule.sub("", result, count=1)
    return result
