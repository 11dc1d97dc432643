"""Tests for qualifier-aware version ordering."""

import pytest

from pomver.versioning.comparator import (
    compare_versions,
    is_stable,
    latest_stable_version,
    latest_version,
    split_version,
    version_key,
)


class TestCompareVersions:
    """Test pairwise version comparison."""

    @pytest.mark.parametrize("newer,older", [
        ("1.2.0", "1.2"),
        ("2.0-rc", "2.0-beta"),
        ("1.0", "1.0-beta"),
        ("1.10", "1.9"),
        ("1.0.1", "1.0.0"),
        ("1.0-final", "1.0-rc"),
        ("1.0-rc10", "1.0-rc2"),
        ("3.0-beta", "3.0-alpha"),
    ])
    def test_orders_pairs(self, newer, older):
        """Test that the newer version compares greater in both directions."""
        assert compare_versions(newer, older) == 1
        assert compare_versions(older, newer) == -1

    def test_equal_strings_compare_equal(self):
        """Test that identical strings compare as zero."""
        assert compare_versions("1.2.3", "1.2.3") == 0

    def test_case_variants_are_not_equal(self):
        """Test that keys tying on case still give a strict, antisymmetric order."""
        forward = compare_versions("1.0-RC", "1.0-rc")
        assert forward != 0
        assert compare_versions("1.0-rc", "1.0-RC") == -forward

    def test_leading_v_is_ignored_for_ordering(self):
        """Test that a leading v does not change the numeric order."""
        assert compare_versions("v2.0", "1.9") == 1
        assert split_version("v1.2.3") == ["1", "2", "3"]

    def test_separators(self):
        """Test that dots, dashes and underscores all split segments."""
        assert split_version("1.2-beta_3") == ["1", "2", "beta", "3"]

    def test_unknown_qualifier_sits_between_end_and_numbers(self):
        """Test placement of unrecognised qualifiers."""
        assert compare_versions("1.0-foo", "1.0") == 1
        assert compare_versions("1.0-foo", "1.0.1") == -1

    def test_short_milestone(self):
        """Test that M<n> tags rank as milestones, below the release."""
        assert compare_versions("5.0.0-M1", "5.0.0") == -1
        assert compare_versions("5.0.0-M2", "5.0.0-M1") == 1
        assert compare_versions("5.0.0-RC1", "5.0.0-M3") == 1
        assert compare_versions("5.0.0-M1", "5.0.0-beta2") == 1
        assert latest_stable_version(["5.0.0", "5.0.0-M1"]) == "5.0.0"

    def test_sort_key(self):
        """Test sorting a list with the version key."""
        versions = ["1.10", "1.2", "1.2-rc1", "1.2.1"]
        assert sorted(versions, key=version_key) == ["1.2-rc1", "1.2", "1.2.1", "1.10"]


class TestLatestVersion:
    """Test selection helpers."""

    def test_latest_version_empty(self):
        """Test that an empty input yields None."""
        assert latest_version([]) is None

    def test_latest_stable_skips_prereleases(self):
        """Test that beta versions lose to stable ones."""
        assert latest_stable_version(["1.0.0", "1.2.0", "1.1.0-beta"]) == "1.2.0"
        assert latest_stable_version(["1.0.0", "2.0.0-SNAPSHOT"]) == "1.0.0"

    def test_latest_stable_falls_back_to_any(self):
        """Test fallback to the highest version when nothing is stable."""
        assert latest_stable_version(["1.0-SNAPSHOT", "2.0-beta"]) == "2.0-beta"

    def test_is_stable(self):
        """Test the unstable markers, case-insensitively."""
        assert is_stable("1.0.0")
        assert is_stable("2.0-rc1")
        assert not is_stable("1.0-SNAPSHOT")
        assert not is_stable("1.0-Alpha2")
