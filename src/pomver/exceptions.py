"""Error taxonomy for version resolution and manifest handling.

Every error carries an ``ErrorKind`` and a ``details()`` mapping so batch
reports can record failures as data instead of relying on the class
hierarchy.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorKind(Enum):
    """Failure categories reported by the core."""
    REPOSITORY_ACCESS = "repository_access"
    VERSION_RESOLUTION = "version_resolution"
    VERSION_UPDATE = "version_update"
    MODEL_LOAD = "model_load"
    MANIFEST_SAVE = "manifest_save"


class PomverError(Exception):
    """Base class for all project errors."""

    kind: ErrorKind

    def details(self) -> Dict[str, Any]:
        """Structured fields describing the failure."""
        return {}


class RepositoryAccessError(PomverError):
    """A remote source was unreachable or answered with an unexpected status.

    ``status_code`` is -1 when the failure happened below HTTP (timeout,
    connection refused, DNS).
    """

    kind = ErrorKind.REPOSITORY_ACCESS

    def __init__(self, url: str, status_code: int = -1, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code >= 0:
            message = f"Failed to access repository {url} (HTTP {status_code})"
        else:
            message = f"Failed to access repository {url}"
        if reason:
            message = f"{message} - {reason}"
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"url": self.url, "status_code": self.status_code, "reason": self.reason}


class VersionResolutionError(PomverError):
    """No source produced a version and there was nothing to fall back to."""

    kind = ErrorKind.VERSION_RESOLUTION

    def __init__(
        self,
        group_id: Optional[str],
        artifact_id: Optional[str],
        reason: str,
        suppressed: Optional[Sequence[BaseException]] = None,
    ) -> None:
        self.group_id = group_id
        self.artifact_id = artifact_id
        self.reason = reason
        self.suppressed: List[BaseException] = list(suppressed or [])
        super().__init__(f"Failed to resolve version for {group_id}:{artifact_id} - {reason}")

    def details(self) -> Dict[str, Any]:
        return {
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "reason": self.reason,
            "suppressed": [str(e) for e in self.suppressed],
        }


class VersionUpdateError(PomverError):
    """A discovered version could not be written into the manifest."""

    kind = ErrorKind.VERSION_UPDATE

    def __init__(  # pylint: disable=too-many-arguments, too-many-positional-arguments
        self,
        group_id: Optional[str],
        artifact_id: Optional[str],
        current_version: Optional[str],
        target_version: Optional[str],
        reason: str,
    ) -> None:
        self.group_id = group_id
        self.artifact_id = artifact_id
        self.current_version = current_version
        self.target_version = target_version
        self.reason = reason
        super().__init__(
            f"Failed to update {group_id}:{artifact_id} from version "
            f"{current_version} to {target_version} - {reason}"
        )

    def details(self) -> Dict[str, Any]:
        return {
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "current_version": self.current_version,
            "target_version": self.target_version,
            "reason": self.reason,
        }


class ModelLoadError(PomverError):
    """A manifest file is missing or could not be parsed."""

    kind = ErrorKind.MODEL_LOAD

    def __init__(self, path: Any, reason: str = "") -> None:
        self.path = str(path)
        self.reason = reason
        message = f"Failed to load POM from {self.path}"
        super().__init__(f"{message} - {reason}" if reason else message)

    def details(self) -> Dict[str, Any]:
        return {"path": self.path, "reason": self.reason}


class ManifestSaveError(PomverError):
    """A manifest could not be written back to disk."""

    kind = ErrorKind.MANIFEST_SAVE

    def __init__(self, path: Any, reason: str = "") -> None:
        self.path = str(path)
        self.reason = reason
        message = f"Failed to save POM to {self.path}"
        super().__init__(f"{message} - {reason}" if reason else message)

    def details(self) -> Dict[str, Any]:
        return {"path": self.path, "reason": self.reason}
