"""Manifest (POM) data model.

Plain data holders: parsing lives in :mod:`pomver.manifest.pom`, behaviour
in the property and inheritance modules.
"""
from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..versioning.models import Coordinate


@dataclass
class Dependency:
    """A ``<dependency>`` entry; ``version`` may be a literal or a ``${name}`` placeholder."""
    group_id: Optional[str]
    artifact_id: Optional[str]
    version: Optional[str] = None
    scope: Optional[str] = None
    type: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    @property
    def effective_scope(self) -> str:
        return self.scope or "compile"

    @property
    def effective_type(self) -> str:
        return self.type or "jar"


@dataclass
class ParentRef:
    """A ``<parent>`` reference."""
    group_id: Optional[str]
    artifact_id: Optional[str]
    version: Optional[str]
    relative_path: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.group_id and self.artifact_id and self.version)

    def gav(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class Repository:
    """A ``<repository>`` entry."""
    url: str
    id: Optional[str] = None


@dataclass
class Manifest:
    """Parsed project descriptor.

    ``group_id`` and ``version`` may be absent when they are meant to be
    inherited from the parent.
    """
    artifact_id: Optional[str]
    group_id: Optional[str] = None
    version: Optional[str] = None
    packaging: Optional[str] = None
    parent: Optional[ParentRef] = None
    properties: Dict[str, str] = field(default_factory=dict)
    dependencies: List[Dependency] = field(default_factory=list)
    managed_dependencies: List[Dependency] = field(default_factory=list)
    repositories: List[Repository] = field(default_factory=list)
    source_file: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    @property
    def has_complete_coordinates(self) -> bool:
        return self.group_id is not None and self.version is not None

    def gav(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def all_dependencies(self) -> List[Dependency]:
        """Direct dependencies followed by managed ones."""
        return list(self.dependencies) + list(self.managed_dependencies)

    def derive(self, **overrides) -> "Manifest":
        """Return an independent copy with ``overrides`` applied.

        Containers are deep-copied so changes to the derived manifest never
        reach this one.
        """
        clone = dataclasses.replace(
            self,
            parent=copy.deepcopy(self.parent),
            properties=dict(self.properties),
            dependencies=copy.deepcopy(self.dependencies),
            managed_dependencies=copy.deepcopy(self.managed_dependencies),
            repositories=copy.deepcopy(self.repositories),
        )
        return dataclasses.replace(clone, **overrides) if overrides else clone
