"""Data models for versioning and dependency resolution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class VersionSource(Enum):
    """Where a resolved version came from."""
    REMOTE_INDEX = "remote-index"
    LOCAL_CACHE = "local-cache"
    REMOTE_METADATA = "remote-metadata"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Coordinate:
    """groupId/artifactId pair identifying an artifact family."""
    group_id: Optional[str]
    artifact_id: Optional[str]

    @property
    def is_complete(self) -> bool:
        """True when both parts are present and non-blank."""
        return bool(self.group_id and self.group_id.strip()
                    and self.artifact_id and self.artifact_id.strip())

    @property
    def group_path(self) -> str:
        """groupId with dots mapped to path separators (``org.x`` -> ``org/x``)."""
        return (self.group_id or "").replace(".", "/")

    def key(self, version: Optional[str] = None) -> str:
        """Cache key ``groupId:artifactId`` or ``groupId:artifactId:version``."""
        base = f"{self.group_id}:{self.artifact_id}"
        return f"{base}:{version}" if version is not None else base

    def __str__(self) -> str:
        return self.key()


@dataclass(frozen=True)
class ResolvedVersion:
    """Resolution outcome of the fallback chain."""
    value: str
    source: VersionSource


@dataclass
class InspectDependencyResult:
    """Inspection summary for one dependency."""
    group_id: Optional[str]
    artifact_id: Optional[str]
    current_version: str
    latest_version: str
    type: str
    scope: str
    available_versions: List[str] = field(default_factory=list)
    is_latest: bool = False
    source: Optional[VersionSource] = None
    error: Optional[str] = None
