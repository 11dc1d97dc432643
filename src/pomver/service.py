"""Batch operations over POM files.

Per-item failures are recorded in a BatchReport and never abort the
batch; only whole-batch preconditions (a missing project root) raise.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .common.logging_utils import extra_context, Timer
from .exceptions import ErrorKind, PomverError
from .manifest.cache import ResolutionSession
from .manifest.discovery import find_poms
from .manifest.inheritance import ManifestInheritanceResolver
from .manifest.models import Dependency, Manifest
from .manifest.pom import save_pom
from .manifest.properties import extract_literal, format_dependency_versions, update_version
from .versioning.models import InspectDependencyResult
from .versioning.resolver import VersionResolver, is_update_needed

logger = logging.getLogger(__name__)


@dataclass
class ItemOutcome:
    """Result for one file or dependency in a batch."""
    item: str
    ok: bool
    detail: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    value: Any = None

    @classmethod
    def failure(cls, item: str, exc: BaseException) -> "ItemOutcome":
        kind = exc.kind if isinstance(exc, PomverError) else None
        return cls(item=item, ok=False, error_kind=kind, error=str(exc))


@dataclass
class BatchReport:
    """Successes and failures of a batch, in processing order."""
    outcomes: List[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def successes(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failures(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


def format_dependency(dep: Dependency) -> str:
    """``groupId:artifactId:version (scope) [type]``; version shows ``managed`` when absent."""
    text = f"{dep.group_id}:{dep.artifact_id}:{dep.version if dep.version is not None else 'managed'}"
    if dep.scope is not None:
        text += f" ({dep.scope})"
    if dep.type is not None and dep.type != "jar":
        text += f" [{dep.type}]"
    return text


class ManifestService:
    """Facade running the core over a project tree for one session."""

    def __init__(
        self,
        session: Optional[ResolutionSession] = None,
        resolver: Optional[VersionResolver] = None,
    ):
        self.session = session or ResolutionSession()
        self.inheritance = ManifestInheritanceResolver(self.session)
        self.resolver = resolver or VersionResolver()

    def find_models(self, root) -> Tuple[List[Manifest], BatchReport]:
        """Load and resolve every POM under ``root``.

        Returns:
            Resolved manifests plus a report with one outcome per file.
        """
        resolved: List[Manifest] = []
        report = BatchReport()
        for _path, _original, manifest in self._iter_resolved(root, report):
            resolved.append(manifest)
        return resolved, report

    def mapped_models(self, root) -> Dict[str, Tuple[Manifest, Manifest]]:
        """Map each POM path to its ``(original, resolved)`` manifests."""
        report = BatchReport()
        return {path: (original, manifest)
                for path, original, manifest in self._iter_resolved(root, report)}

    def _iter_resolved(self, root, report: BatchReport):
        for path in find_poms(root):
            try:
                original = self.inheritance.load_manifest(path)
                result = self.inheritance.resolve_detailed(original)
            except PomverError as exc:
                logger.error("Failed to process POM at %s: %s", path, exc)
                report.add(ItemOutcome.failure(path, exc))
                continue
            report.add(ItemOutcome(item=path, ok=True, detail=result.state.value))
            yield path, original, result.manifest

    @staticmethod
    def view_dependencies(manifest: Manifest) -> List[str]:
        """Human-readable lines for direct and managed dependencies."""
        return [format_dependency(dep) for dep in manifest.all_dependencies()]

    def format_dependencies(self, path, save: bool = True) -> Manifest:
        """Move every literal dependency version into a property.

        Raises:
            ModelLoadError: the POM cannot be read.
            ManifestSaveError: the POM cannot be written back.
        """
        manifest = self.inheritance.load_manifest(path)
        rewritten = format_dependency_versions(manifest)
        logger.info("Moved %d dependency versions into properties", len(rewritten))
        if save and rewritten:
            save_pom(manifest)
        return manifest

    def update_dependencies(self, path, save: bool = True) -> BatchReport:
        """Update each dependency of the POM at ``path`` to its latest version.

        Raises:
            ModelLoadError: the POM cannot be read.
            ManifestSaveError: the POM cannot be written back.
        """
        manifest = self.inheritance.load_manifest(path)
        report = BatchReport()
        updated = 0
        with Timer() as timer:
            for dep in manifest.all_dependencies():
                item = f"{dep.group_id}:{dep.artifact_id}"
                try:
                    changed = self.update_dependency(manifest, dep)
                except PomverError as exc:
                    logger.warning("Failed to update %s: %s", item, exc)
                    report.add(ItemOutcome.failure(item, exc))
                    continue
                updated += int(changed)
                report.add(ItemOutcome(item=item, ok=True,
                                       detail="updated" if changed else "unchanged",
                                       value=extract_literal(manifest, dep)))

        if report.failures:
            logger.warning("Failed to update %d dependencies", len(report.failures))
        if updated == 0:
            logger.info("All dependencies are already at their latest versions")
        else:
            logger.info("Updated %d dependencies to their latest versions", updated,
                        extra=extra_context(event="batch_summary", component="service",
                                            duration_ms=timer.duration_ms()))
            if save:
                save_pom(manifest)
        return report

    def update_dependency(self, manifest: Manifest, dep: Dependency) -> bool:
        """Resolve and apply the latest version of one dependency.

        Returns:
            True when the manifest was changed.

        Raises:
            VersionResolutionError: no version could be determined.
            VersionUpdateError: the new version could not be applied.
        """
        current = extract_literal(manifest, dep)
        resolved = self.resolver.resolve_latest(dep, manifest)
        if not is_update_needed(resolved.value, current):
            return False
        update_version(manifest, dep, resolved.value)
        logger.info("Updating %s:%s from %s to %s", dep.group_id, dep.artifact_id,
                    current, resolved.value)
        return True

    def inspect_dependencies(self, manifest: Manifest) -> List[InspectDependencyResult]:
        """Inspection record for each dependency; resolution errors are kept per record."""
        results = []
        for dep in manifest.all_dependencies():
            current = extract_literal(manifest, dep) or "unknown"
            latest = current
            source = None
            error = None
            try:
                resolved = self.resolver.resolve_latest(dep, manifest)
                latest, source = resolved.value, resolved.source
            except PomverError as exc:
                logger.debug("Could not determine latest version for %s:%s: %s",
                             dep.group_id, dep.artifact_id, exc)
                error = str(exc)
            results.append(InspectDependencyResult(
                group_id=dep.group_id,
                artifact_id=dep.artifact_id,
                current_version=current,
                latest_version=latest,
                type=dep.effective_type,
                scope=dep.effective_scope,
                available_versions=list(dict.fromkeys([current, latest])),
                is_latest=current == latest,
                source=source,
                error=error,
            ))
        return results


__all__ = [
    "BatchReport",
    "ItemOutcome",
    "ManifestService",
    "format_dependency",
]
