"""
Tests for version helpers — tag normalization and numeric comparison.
"""

import pytest

from latest_stack.core.versioning import best_version, compare_versions, normalize_tag

# ── Tag Normalizer ───────────────────────────────────────────────────


class TestNormalizeTag:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("docker-v29.2.1", "29.2.1"),
            ("go1.22.0", "1.22.0"),
            ("swift-6.2.3-RELEASE", "6.2.3"),
            ("version-3.51.2", "3.51.2"),
            ("vesion-3.45.1", "3.45.1"),
            ("v1.2.3", "1.2.3"),
            ("1.2.3", "1.2.3"),
        ],
    )
    def test_known_conventions(self, tag, expected):
        """Each ecosystem convention strips to a bare version."""
        assert normalize_tag(tag) == expected

    def test_release_suffix_case_insensitive(self):
        """The -RELEASE suffix matches any case."""
        assert normalize_tag("5.10-release") == "5.10"

    def test_strips_single_leading_v(self):
        """Only one leading v is stripped."""
        assert normalize_tag("vv1.0") == "v1.0"

    def test_unmatched_passes_through(self):
        """Unmatched tags are returned unchanged."""
        assert normalize_tag("release-2024-01") == "release-2024-01"
        assert normalize_tag("") == ""

    @pytest.mark.parametrize(
        "tag",
        ["docker-v29.2.1", "go1.22.0", "swift-6.2.3-RELEASE", "version-3.51.2", "v18.3.1", "2.1"],
    )
    def test_idempotent(self, tag):
        """Normalizing twice changes nothing for real tags."""
        once = normalize_tag(tag)
        assert normalize_tag(once) == once


# ── Semver Comparator ────────────────────────────────────────────────


class TestCompareVersions:
    def test_equal(self):
        """Equal versions compare as 0."""
        assert compare_versions("1.2.3", "1.2.3") == 0

    def test_greater_minor(self):
        """A higher minor wins."""
        assert compare_versions("1.3.0", "1.2.9") > 0

    def test_less(self):
        """A lower version compares negative."""
        assert compare_versions("1.2.9", "1.3.0") < 0

    def test_missing_segment_is_zero(self):
        """Missing segments count as zero."""
        assert compare_versions("1.2", "1.2.0") == 0
        assert compare_versions("1.2.0.1", "1.2") > 0

    def test_numeric_not_lexical(self):
        """Segments compare numerically."""
        assert compare_versions("3.10.0", "3.9.9") > 0

    def test_non_numeric_segment_is_incomparable(self):
        """Non-numeric segments compare as equal."""
        # Known limitation: pre-release suffixes are not ordered
        assert compare_versions("1.2.3-beta", "1.2.4") == 0
        assert compare_versions("1.2.4", "1.2.3-beta") == 0

    def test_difference_before_non_numeric_segment_still_counts(self):
        """An earlier numeric difference still decides."""
        assert compare_versions("2.0.x", "1.9.0") > 0


class TestBestVersion:
    def test_picks_greatest(self):
        """The greatest candidate wins."""
        assert best_version(["3.45.1", "3.51.2", "3.9.0"]) == "3.51.2"

    def test_skips_empty(self):
        """Empty candidates are ignored."""
        assert best_version(["", "1.0", ""]) == "1.0"

    def test_empty_input(self):
        """No candidates gives an empty string."""
        assert best_version([]) == ""

    def test_first_wins_on_tie(self):
        """The first of equal candidates wins."""
        assert best_version(["1.2", "1.2.0"]) == "1.2"

    def test_suffix_candidate_never_displaces_best(self):
        """A suffixed candidate does not displace the best one."""
        assert best_version(["3.51.2", "3.51.3-rc1"]) == "3.51.2"
