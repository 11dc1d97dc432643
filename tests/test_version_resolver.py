"""Tests for the latest-version fallback chain."""

import pytest

from pomver.exceptions import ErrorKind, RepositoryAccessError, VersionResolutionError
from pomver.manifest.models import Dependency, Manifest, Repository
from pomver.manifest.properties import update_version
from pomver.versioning.models import VersionSource
from pomver.versioning.resolver import (
    VersionResolver,
    candidate_repositories,
    is_update_needed,
)


class FakeFetcher:
    """Records calls; answers from fixed tables."""

    def __init__(self, index=None, index_error=None, metadata=None, metadata_forbidden=False):
        self.index = index
        self.index_error = index_error
        self.metadata = metadata or {}
        self.metadata_forbidden = metadata_forbidden
        self.index_calls = []
        self.metadata_calls = []

    def search_index(self, coordinate):
        self.index_calls.append(coordinate)
        if self.index_error is not None:
            raise self.index_error
        return self.index

    def fetch_metadata(self, repository_url, coordinate):
        if self.metadata_forbidden:
            raise AssertionError("repository metadata must not be consulted")
        self.metadata_calls.append(repository_url)
        value = self.metadata.get(repository_url)
        if isinstance(value, Exception):
            raise value
        return value


class FakeScanner:
    """Local repository stand-in."""

    def __init__(self, versions=None, error=None, forbidden=False):
        self.versions = versions or []
        self.error = error
        self.forbidden = forbidden
        self.calls = 0

    def scan(self, coordinate):
        if self.forbidden:
            raise AssertionError("local repository must not be consulted")
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.versions)


def make_resolver(fetcher, scanner, well_known=()):
    return VersionResolver(fetcher=fetcher, scanner=scanner, well_known_repositories=well_known)


class TestResolveLatest:
    """Test source ordering and fallbacks."""

    def test_search_index_wins(self):
        """Test that an index hit short-circuits the remaining sources."""
        fetcher = FakeFetcher(index="5.0.0", metadata_forbidden=True)
        resolver = make_resolver(fetcher, FakeScanner(forbidden=True), ["https://repo.example.com"])

        result = resolver.resolve_latest(Dependency("org.example", "lib", "1.0.0"))

        assert result.value == "5.0.0"
        assert result.source is VersionSource.REMOTE_INDEX

    def test_local_cache_short_circuits_metadata(self):
        """Test that a local hit picks the highest stable version and stops."""
        fetcher = FakeFetcher(index=None, metadata_forbidden=True)
        scanner = FakeScanner(["1.0.0", "1.2.0", "1.1.0-beta"])
        resolver = make_resolver(fetcher, scanner, ["https://repo.example.com"])

        result = resolver.resolve_latest(Dependency("org.example", "lib", "1.0.0"))

        assert result.value == "1.2.0"
        assert result.source is VersionSource.LOCAL_CACHE
        assert scanner.calls == 1

    def test_metadata_repositories_in_order(self):
        """Test manifest repositories are tried before the well-known ones."""
        fetcher = FakeFetcher(metadata={
            "https://repo.example.com/maven": None,
            "https://central.example.org": "3.0",
        })
        manifest = Manifest(
            artifact_id="app",
            repositories=[Repository(url="https://repo.example.com/maven/")],
        )
        resolver = make_resolver(fetcher, FakeScanner(), ["https://central.example.org"])

        result = resolver.resolve_latest(Dependency("org.example", "lib", "1.0"), manifest)

        assert result.value == "3.0"
        assert result.source is VersionSource.REMOTE_METADATA
        assert fetcher.metadata_calls == ["https://repo.example.com/maven", "https://central.example.org"]

    def test_index_failure_does_not_abort(self):
        """Test that a failing index falls through to the local cache."""
        fetcher = FakeFetcher(index_error=RepositoryAccessError("https://search.example", 503))
        resolver = make_resolver(fetcher, FakeScanner(["2.1"]))

        result = resolver.resolve_latest(Dependency("org.example", "lib", "1.0"))

        assert result.value == "2.1"
        assert result.source is VersionSource.LOCAL_CACHE

    def test_unchanged_on_exhaustion(self):
        """Test that the current version is returned when every source is silent."""
        dep = Dependency("org.example", "lib", "${lib.version}")
        manifest = Manifest(artifact_id="app", properties={"lib.version": "1.4"}, dependencies=[dep])
        resolver = make_resolver(FakeFetcher(), FakeScanner(), ["https://repo.example.com"])

        result = resolver.resolve_latest(dep, manifest)

        assert result.value == "1.4"
        assert result.source is VersionSource.UNCHANGED

    def test_unchanged_when_network_sources_fail(self):
        """Test that failing remote sources and an empty local cache keep the current version."""
        fetcher = FakeFetcher(
            index_error=RepositoryAccessError("https://search.example", -1, "connection refused"),
            metadata={"https://repo.example.com": RepositoryAccessError("https://repo.example.com", 503)},
        )
        scanner = FakeScanner([])
        resolver = make_resolver(fetcher, scanner, ["https://repo.example.com"])

        result = resolver.resolve_latest(Dependency("org.example", "lib", "1.0.0"))

        assert result.value == "1.0.0"
        assert result.source is VersionSource.UNCHANGED
        assert scanner.calls == 1
        assert fetcher.metadata_calls == ["https://repo.example.com"]

    def test_error_when_nothing_to_fall_back_to(self):
        """Test failure carries the suppressed source errors."""
        index_error = RepositoryAccessError("https://search.example", -1, "timed out")
        repo_error = RepositoryAccessError("https://repo.example.com", 500)
        fetcher = FakeFetcher(index_error=index_error,
                              metadata={"https://repo.example.com": repo_error})
        scanner = FakeScanner(error=PermissionError("denied"))
        resolver = make_resolver(fetcher, scanner, ["https://repo.example.com"])

        with pytest.raises(VersionResolutionError) as exc_info:
            resolver.resolve_latest(Dependency("org.example", "lib"))

        err = exc_info.value
        assert err.kind is ErrorKind.VERSION_RESOLUTION
        assert err.suppressed[0] is index_error
        assert isinstance(err.suppressed[1], PermissionError)
        assert err.suppressed[2] is repo_error
        assert len(err.details()["suppressed"]) == 3

    @pytest.mark.parametrize("group_id,artifact_id", [(None, "lib"), ("org.example", ""), ("  ", "lib")])
    def test_incomplete_coordinate(self, group_id, artifact_id):
        """Test that incomplete coordinates are rejected before any lookup."""
        fetcher = FakeFetcher()
        resolver = make_resolver(fetcher, FakeScanner(forbidden=True))

        with pytest.raises(VersionResolutionError):
            resolver.resolve_latest(Dependency(group_id, artifact_id, "1.0"))
        assert fetcher.index_calls == []

    def test_local_scan_then_property_update(self):
        """Test resolving from the local cache and writing through the property."""
        dep = Dependency("org.example", "lib", "${lib.version}")
        manifest = Manifest(artifact_id="app", properties={"lib.version": "1.0.0"}, dependencies=[dep])
        scanner = FakeScanner(["1.0.0", "1.2.0", "1.1.0-beta"])
        resolver = make_resolver(FakeFetcher(metadata_forbidden=True), scanner)

        result = resolver.resolve_latest(dep, manifest)
        assert is_update_needed(result.value, "1.0.0")
        update_version(manifest, dep, result.value)

        assert manifest.properties["lib.version"] == "1.2.0"
        assert dep.version == "${lib.version}"


class TestHelpers:
    """Test repository ordering and the update decision."""

    def test_candidate_repositories_dedup(self):
        """Test normalisation and de-duplication keep first occurrence order."""
        manifest = Manifest(artifact_id="app", repositories=[
            Repository(url="https://b.example/"),
            Repository(url="https://a.example"),
        ])
        urls = candidate_repositories(manifest, ["https://a.example/", "https://c.example"])
        assert urls == ["https://b.example", "https://a.example", "https://c.example"]

    def test_candidate_repositories_without_manifest(self):
        """Test that only the defaults are used without a manifest."""
        assert candidate_repositories(None, ["https://c.example/"]) == ["https://c.example"]

    def test_is_update_needed(self):
        """Test byte-wise comparison."""
        assert is_update_needed("1.0.0", "1.0")
        assert not is_update_needed("1.0", "1.0")
        assert not is_update_needed(None, "1.0")
        assert is_update_needed("1.0", None)
