"""Latest-version resolution across an ordered chain of sources.

Sources are consulted strictly in this order and the first one that
produces a version wins:

1. remote search index
2. local repository cache (highest stable version)
3. repository metadata: repositories declared by the manifest, then the
   well-known public repositories
4. the dependency's current version, unchanged

Source failures never abort the chain; they are logged and kept so that a
final VersionResolutionError can report them.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..constants import Constants
from ..common.logging_utils import extra_context, is_debug_enabled, Timer
from ..exceptions import RepositoryAccessError, VersionResolutionError
from ..manifest.models import Dependency, Manifest
from ..manifest.properties import extract_literal
from ..registry.maven import LocalRepositoryScanner, RemoteMetadataFetcher
from .comparator import latest_stable_version
from .models import Coordinate, ResolvedVersion, VersionSource

logger = logging.getLogger(__name__)


def _normalize_repo_url(url: str) -> str:
    return url.strip().rstrip("/")


def candidate_repositories(manifest: Optional[Manifest],
                           well_known: Optional[Iterable[str]] = None) -> List[str]:
    """Manifest repositories first, then the well-known ones, without duplicates."""
    urls: List[str] = []
    seen = set()
    declared = [r.url for r in manifest.repositories] if manifest is not None else []
    defaults = list(well_known) if well_known is not None else list(Constants.WELL_KNOWN_REPOSITORIES)
    for url in declared + defaults:
        if not url or not url.strip():
            continue
        norm = _normalize_repo_url(url)
        if norm in seen:
            continue
        seen.add(norm)
        urls.append(norm)
    return urls


def is_update_needed(resolved: Optional[str], current: Optional[str]) -> bool:
    """True when the resolved version differs from the current one.

    Byte-for-byte comparison: ``1.0`` and ``1.0.0`` count as different.
    """
    return resolved is not None and resolved != current


class VersionResolver:
    """Finds the latest version of a dependency."""

    def __init__(
        self,
        fetcher: Optional[RemoteMetadataFetcher] = None,
        scanner: Optional[LocalRepositoryScanner] = None,
        well_known_repositories: Optional[Iterable[str]] = None,
    ):
        self.fetcher = fetcher or RemoteMetadataFetcher()
        self.scanner = scanner or LocalRepositoryScanner()
        self._well_known = list(well_known_repositories) if well_known_repositories is not None else None

    def resolve_latest(self, dependency: Dependency,
                       manifest: Optional[Manifest] = None) -> ResolvedVersion:
        """Run the fallback chain for ``dependency``.

        Args:
            dependency: Dependency whose coordinate is looked up.
            manifest: Owning manifest; supplies declared repositories and
                the properties used to expand the current version.

        Returns:
            ResolvedVersion carrying the version and the source that produced it.

        Raises:
            VersionResolutionError: the coordinate is incomplete, or every
                source was silent and there is no current version.
        """
        coordinate = dependency.coordinate
        if not coordinate.is_complete:
            raise VersionResolutionError(
                coordinate.group_id, coordinate.artifact_id, "Missing groupId or artifactId"
            )

        failures: List[BaseException] = []
        with Timer() as timer:
            resolved = (
                self._from_search_index(coordinate, failures)
                or self._from_local_repository(coordinate, failures)
                or self._from_repository_metadata(coordinate, manifest, failures)
            )

        if resolved is not None:
            if is_debug_enabled(logger):
                logger.debug("Version resolved", extra=extra_context(
                    event="function_exit", component="resolver", action="resolve_latest",
                    outcome=resolved.source.value, package=str(coordinate),
                    duration_ms=timer.duration_ms()
                ))
            return resolved

        current = extract_literal(manifest, dependency) if manifest is not None else dependency.version
        if current is None:
            raise VersionResolutionError(
                coordinate.group_id, coordinate.artifact_id,
                "No version found in any repository and no current version specified",
                suppressed=failures,
            )
        logger.debug("No source produced a version for %s; keeping %s", coordinate, current)
        return ResolvedVersion(current, VersionSource.UNCHANGED)

    def _from_search_index(self, coordinate: Coordinate,
                           failures: List[BaseException]) -> Optional[ResolvedVersion]:
        try:
            version = self.fetcher.search_index(coordinate)
        except RepositoryAccessError as exc:
            logger.warning("Search index lookup failed for %s: %s", coordinate, exc)
            failures.append(exc)
            return None
        return ResolvedVersion(version, VersionSource.REMOTE_INDEX) if version else None

    def _from_local_repository(self, coordinate: Coordinate,
                               failures: List[BaseException]) -> Optional[ResolvedVersion]:
        try:
            versions = self.scanner.scan(coordinate)
        except OSError as exc:
            logger.debug("Local repository check failed for %s: %s", coordinate, exc)
            failures.append(exc)
            return None
        version = latest_stable_version(versions)
        return ResolvedVersion(version, VersionSource.LOCAL_CACHE) if version else None

    def _from_repository_metadata(self, coordinate: Coordinate, manifest: Optional[Manifest],
                                  failures: List[BaseException]) -> Optional[ResolvedVersion]:
        for repo_url in candidate_repositories(manifest, self._well_known):
            try:
                version = self.fetcher.fetch_metadata(repo_url, coordinate)
            except RepositoryAccessError as exc:
                # The shipped fetcher reports failures as None; injected ones may raise.
                logger.debug("Repository %s failed for %s: %s", repo_url, coordinate, exc)
                failures.append(exc)
                continue
            if version:
                return ResolvedVersion(version, VersionSource.REMOTE_METADATA)
        return None
