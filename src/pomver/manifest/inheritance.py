"""Parent POM lookup and coordinate inheritance."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import Constants
from .cache import ResolutionSession
from .models import Manifest, ParentRef
from .pom import load_pom

logger = logging.getLogger(__name__)


class InheritanceState(Enum):
    """Terminal states of one resolution; all of them mean "done"."""
    RESOLVED = "resolved"
    RESOLVED_AS_IS = "resolved_as_is"
    INHERITED_RESOLVED = "inherited_resolved"


@dataclass
class InheritanceResult:
    """Resolved manifest plus the state it ended in."""
    manifest: Manifest
    state: InheritanceState
    parent: Optional[Manifest] = None


def matches_parent_coordinates(candidate: Optional[Manifest], ref: ParentRef) -> bool:
    """True when the candidate's own groupId/artifactId/version equal the reference."""
    if candidate is None:
        return False
    return (candidate.group_id == ref.group_id
            and candidate.artifact_id == ref.artifact_id
            and candidate.version == ref.version)


def inherit_from_parent(child: Manifest, parent: Manifest) -> Manifest:
    """Copy of ``child`` with groupId and version filled from ``parent`` where unset."""
    overrides = {}
    if child.group_id is None and parent.group_id is not None:
        overrides["group_id"] = parent.group_id
    if child.version is None and parent.version is not None:
        overrides["version"] = parent.version
    return child.derive(**overrides)


class ManifestInheritanceResolver:
    """Completes manifest coordinates from their parent POM.

    Parsed files are memoized by absolute path and matched parents by
    ``groupId:artifactId:version`` in the session caches.
    """

    def __init__(
        self,
        session: Optional[ResolutionSession] = None,
        loader: Callable[[str], Manifest] = load_pom,
    ):
        self.session = session or ResolutionSession()
        self._loader = loader

    def load_manifest(self, path) -> Manifest:
        """Parse ``path`` at most once per session.

        Raises:
            ModelLoadError: the file is missing or malformed.
        """
        key = os.path.abspath(os.fspath(path))
        return self.session.model_cache.get_or_load(key, self._loader)

    def resolve(self, manifest: Manifest) -> Manifest:
        """Return ``manifest`` with inherited coordinates filled in.

        The input is never modified; when inheritance applies a new
        manifest is returned.
        """
        return self.resolve_detailed(manifest).manifest

    def resolve_detailed(self, manifest: Manifest) -> InheritanceResult:
        """Like :meth:`resolve` but also reports how resolution ended."""
        if manifest.has_complete_coordinates:
            return InheritanceResult(manifest, InheritanceState.RESOLVED)

        ref = manifest.parent
        if ref is None:
            return InheritanceResult(manifest, InheritanceState.RESOLVED_AS_IS)

        if not ref.is_complete:
            logger.warning(
                "Parent reference %s of %s is incomplete; inheritance skipped",
                ref.gav(), manifest.source_file or manifest.artifact_id,
            )
            return InheritanceResult(manifest, InheritanceState.RESOLVED_AS_IS)

        parent = self.resolve_parent(ref, manifest.source_file)
        if parent is None:
            return InheritanceResult(manifest, InheritanceState.RESOLVED_AS_IS)

        return InheritanceResult(
            inherit_from_parent(manifest, parent),
            InheritanceState.INHERITED_RESOLVED,
            parent,
        )

    def resolve_parent(self, ref: ParentRef, child_path: Optional[str]) -> Optional[Manifest]:
        """Find the parent manifest for ``ref``, consulting the parent cache first."""
        key = ref.gav()
        cached = self.session.parent_cache.get(key)
        if cached is not None:
            return cached

        parent = self._find_parent(ref, child_path)
        if parent is None:
            return None
        return self.session.parent_cache.put_if_absent(key, parent)

    def _find_parent(self, ref: ParentRef, child_path: Optional[str]) -> Optional[Manifest]:
        if not child_path:
            return None
        child_dir = os.path.dirname(os.path.abspath(child_path))

        candidates = []
        if ref.relative_path:
            candidates.append(("relative_path", self._relative_parent_path(child_dir, ref.relative_path)))
        candidates.append(("default_location",
                           os.path.join(os.path.dirname(child_dir), Constants.POM_XML_FILE)))

        for label, path in candidates:
            if not os.path.isfile(path):
                continue
            candidate = self.load_manifest(path)
            if matches_parent_coordinates(candidate, ref):
                if is_debug_enabled(logger):
                    logger.debug("Parent POM located", extra=extra_context(
                        event="function_exit", component="inheritance", action="find_parent",
                        outcome=label, target=path, parent=ref.gav()
                    ))
                return candidate
            logger.debug("Parent candidate %s (%s) is %s, expected %s",
                         path, label, candidate.gav(), ref.gav())
        return None

    @staticmethod
    def _relative_parent_path(child_dir: str, relative_path: str) -> str:
        path = os.path.normpath(os.path.join(child_dir, relative_path))
        if os.path.basename(path) != Constants.POM_XML_FILE and not os.path.isfile(path):
            path = os.path.join(path, Constants.POM_XML_FILE)
        return path
