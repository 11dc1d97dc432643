"""Tests for property placeholder handling."""

import pytest

from pomver.exceptions import ErrorKind, VersionUpdateError
from pomver.manifest.models import Dependency, Manifest
from pomver.manifest.properties import (
    extract_literal,
    format_dependency_versions,
    is_literal,
    placeholder_name,
    rewrite_to_property,
    update_version,
)


def make_manifest(*deps, managed=(), properties=None):
    """Helper to build a manifest around some dependencies."""
    return Manifest(
        artifact_id="app",
        group_id="com.example",
        version="1.0",
        properties=dict(properties or {}),
        dependencies=list(deps),
        managed_dependencies=list(managed),
    )


class TestRewriteToProperty:
    """Test moving literal versions into properties."""

    def test_round_trip(self):
        """Test that the rewritten placeholder expands back to the literal."""
        dep = Dependency("org.example", "lib", "1.0.0")
        manifest = make_manifest(dep)

        assert rewrite_to_property(manifest, dep) is True

        assert dep.version == "${lib.version}"
        assert manifest.properties["lib.version"] == "1.0.0"
        assert extract_literal(manifest, dep) == "1.0.0"

    def test_idempotent(self):
        """Test that a second rewrite changes nothing."""
        dep = Dependency("org.example", "lib", "1.0.0")
        manifest = make_manifest(dep)
        rewrite_to_property(manifest, dep)
        before = dict(manifest.properties)

        assert rewrite_to_property(manifest, dep) is False
        assert dep.version == "${lib.version}"
        assert manifest.properties == before

    def test_missing_version_untouched(self):
        """Test that dependencies without a version are skipped."""
        dep = Dependency("org.example", "managed-lib")
        manifest = make_manifest(dep)

        assert rewrite_to_property(manifest, dep) is False
        assert dep.version is None
        assert manifest.properties == {}

    def test_overwrites_existing_property(self):
        """Test that an existing property of the same name is replaced."""
        dep = Dependency("org.example", "lib", "2.0")
        manifest = make_manifest(dep, properties={"lib.version": "1.0"})

        rewrite_to_property(manifest, dep)

        assert manifest.properties["lib.version"] == "2.0"

    def test_format_covers_managed(self):
        """Test that managed dependencies are rewritten too."""
        direct = Dependency("org.example", "lib", "1.0")
        managed = Dependency("org.example", "bom", "3.1")
        manifest = make_manifest(direct, managed=[managed])

        rewritten = format_dependency_versions(manifest)

        assert rewritten == [direct, managed]
        assert manifest.properties == {"lib.version": "1.0", "bom.version": "3.1"}


class TestExtractLiteral:
    """Test placeholder expansion."""

    def test_unknown_placeholder_is_kept(self):
        """Test that references with no property stay unresolved."""
        dep = Dependency("org.example", "lib", "${missing}")
        assert extract_literal(make_manifest(dep), dep) == "${missing}"

    def test_composite_expression(self):
        """Test that every known reference in an expression is expanded."""
        dep = Dependency("org.example", "lib", "${major}.${minor}")
        manifest = make_manifest(dep, properties={"major": "2", "minor": "5"})
        assert extract_literal(manifest, dep) == "2.5"

    def test_helpers(self):
        """Test placeholder_name and is_literal."""
        assert placeholder_name("${lib.version}") == "lib.version"
        assert placeholder_name("${a}.${b}") is None
        assert placeholder_name("1.0") is None
        assert is_literal("1.0")
        assert not is_literal("${x}")
        assert not is_literal("  ")
        assert not is_literal(None)


class TestUpdateVersion:
    """Test applying a new version."""

    def test_updates_backing_property(self):
        """Test that a placeholder is updated through its property."""
        dep = Dependency("org.example", "lib", "${lib.version}")
        manifest = make_manifest(dep, properties={"lib.version": "1.0.0"})

        update_version(manifest, dep, "1.2.0")

        assert manifest.properties["lib.version"] == "1.2.0"
        assert dep.version == "${lib.version}"

    def test_updates_literal_directly(self):
        """Test that a literal version is replaced on the dependency."""
        dep = Dependency("org.example", "lib", "1.0.0")
        manifest = make_manifest(dep)

        update_version(manifest, dep, "1.1.0")

        assert dep.version == "1.1.0"
        assert manifest.properties == {}

    def test_missing_property(self):
        """Test failure when the placeholder's property does not exist."""
        dep = Dependency("org.example", "lib", "${lib.version}")
        manifest = make_manifest(dep)

        with pytest.raises(VersionUpdateError) as exc_info:
            update_version(manifest, dep, "1.2.0")

        assert "Property not found: lib.version" in str(exc_info.value)
        assert exc_info.value.kind is ErrorKind.VERSION_UPDATE
        assert exc_info.value.target_version == "1.2.0"

    def test_composite_rejected(self):
        """Test that composite expressions are not updated."""
        dep = Dependency("org.example", "lib", "${major}.${minor}")
        manifest = make_manifest(dep, properties={"major": "1", "minor": "0"})

        with pytest.raises(VersionUpdateError):
            update_version(manifest, dep, "2.0")
        assert manifest.properties == {"major": "1", "minor": "0"}

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_value_rejected(self, value):
        """Test that blank versions are refused."""
        dep = Dependency("org.example", "lib", "1.0")
        with pytest.raises(VersionUpdateError):
            update_version(make_manifest(dep), dep, value)
        assert dep.version == "1.0"
