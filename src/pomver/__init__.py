"""pomver - latest-version resolution and parent inheritance for Maven POMs."""

from .exceptions import (
    ErrorKind,
    ManifestSaveError,
    ModelLoadError,
    PomverError,
    RepositoryAccessError,
    VersionResolutionError,
    VersionUpdateError,
)
from .manifest.cache import ResolutionSession
from .manifest.inheritance import ManifestInheritanceResolver
from .service import BatchReport, ItemOutcome, ManifestService
from .versioning.comparator import compare_versions
from .versioning.models import Coordinate, ResolvedVersion, VersionSource
from .versioning.resolver import VersionResolver

__version__ = "0.1.0"

__all__ = [
    "BatchReport",
    "Coordinate",
    "ErrorKind",
    "ItemOutcome",
    "ManifestInheritanceResolver",
    "ManifestSaveError",
    "ManifestService",
    "ModelLoadError",
    "PomverError",
    "RepositoryAccessError",
    "ResolutionSession",
    "ResolvedVersion",
    "VersionResolutionError",
    "VersionResolver",
    "VersionSource",
    "VersionUpdateError",
    "compare_versions",
]
