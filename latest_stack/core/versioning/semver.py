"""
Semver comparator — plain numeric comparison of dot-delimited versions.

This is deliberately simple: ``1.2`` equals ``1.2.0`` (missing
segments count as zero) and there is no pre-release ordering.

Known limitation: a non-numeric segment such as ``3-beta`` cannot be
compared.  The first differing pair involving such a segment makes the
whole comparison report 0 ("not greater"), so a candidate with a
suffix never displaces the current best in ``best_version``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable


def _segment(part: str) -> float:
    """Parse one segment; empty counts as 0, non-numeric as NaN."""
    text = part.strip()
    if not text:
        return 0
    if text.isdecimal():
        return int(text)
    return math.nan


def compare_versions(a: str, b: str) -> int:
    """Three-way compare two dot-delimited versions.

    Returns a negative number if ``a < b``, zero if equal (or
    incomparable), positive if ``a > b``.
    """
    pa = [_segment(p) for p in a.split(".")]
    pb = [_segment(p) for p in b.split(".")]

    for i in range(max(len(pa), len(pb))):
        x = pa[i] if i < len(pa) else 0
        y = pb[i] if i < len(pb) else 0
        if x != y:
            if math.isnan(x) or math.isnan(y):
                return 0
            return int(x - y)
    return 0


def best_version(candidates: Iterable[str]) -> str:
    """Pick the greatest non-empty candidate; first one wins on ties."""
    best = ""
    for candidate in candidates:
        if candidate and (not best or compare_versions(candidate, best) > 0):
            best = candidate
    return best
