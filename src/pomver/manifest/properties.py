"""Property indirection for dependency versions.

Literal versions can be moved into ``<properties>`` as ``${artifactId.version}``
placeholders, and placeholders can be expanded or updated through the
manifest's property table.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..exceptions import VersionUpdateError
from .models import Dependency, Manifest

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"^\$\{([^${}]+)\}$")
_REFERENCE = re.compile(r"\$\{([^${}]+)\}")


def placeholder_name(value: Optional[str]) -> Optional[str]:
    """Return ``name`` when ``value`` is exactly ``${name}``, else None."""
    if value is None:
        return None
    match = _PLACEHOLDER.match(value.strip())
    return match.group(1) if match else None


def is_literal(value: Optional[str]) -> bool:
    """True for a concrete version with no ``${...}`` references."""
    return bool(value and value.strip()) and "${" not in value


def property_name_for(dependency: Dependency) -> str:
    return f"{dependency.artifact_id}.version"


def extract_literal(manifest: Manifest, dependency: Dependency) -> Optional[str]:
    """Expand the dependency version through the manifest properties.

    References with no matching property are left as-is, so the result may
    still contain ``${...}``; callers treat that as an unknown version.
    """
    version = dependency.version
    if version is None or "${" not in version:
        return version

    def _expand(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in manifest.properties:
            return manifest.properties[name]
        return match.group(0)

    return _REFERENCE.sub(_expand, version)


def rewrite_to_property(manifest: Manifest, dependency: Dependency) -> bool:
    """Move a literal version into ``${artifactId.version}``.

    Overwrites any existing property of that name. Placeholders and missing
    versions are left untouched, which makes the call idempotent.

    Returns:
        True when the dependency was rewritten.
    """
    if not is_literal(dependency.version):
        return False
    name = property_name_for(dependency)
    manifest.properties[name] = dependency.version
    dependency.version = f"${{{name}}}"
    return True


def format_dependency_versions(manifest: Manifest) -> List[Dependency]:
    """Rewrite every literal version (direct and managed) to a property.

    Returns:
        The dependencies that were rewritten.
    """
    return [dep for dep in manifest.all_dependencies() if rewrite_to_property(manifest, dep)]


def update_version(manifest: Manifest, dependency: Dependency, new_value: str) -> None:
    """Apply ``new_value`` to the dependency.

    Placeholders are updated through their backing property; the
    dependency's own field keeps the placeholder text.

    Raises:
        VersionUpdateError: ``new_value`` is blank, the placeholder's
            property is missing, or the version is a composite expression.
    """
    current = dependency.version
    if new_value is None or not str(new_value).strip():
        raise VersionUpdateError(
            dependency.group_id, dependency.artifact_id, current, new_value,
            "New version cannot be null or empty",
        )

    if current is None or "${" not in current:
        dependency.version = new_value
        logger.debug("Updated %s:%s version directly from %s to %s",
                     dependency.group_id, dependency.artifact_id, current, new_value)
        return

    name = placeholder_name(current)
    if name is None:
        raise VersionUpdateError(
            dependency.group_id, dependency.artifact_id, current, new_value,
            "version is a composite expression and cannot be updated",
        )
    if name not in manifest.properties:
        raise VersionUpdateError(
            dependency.group_id, dependency.artifact_id, current, new_value,
            f"Property not found: {name}",
        )
    old_value = manifest.properties[name]
    manifest.properties[name] = new_value
    logger.debug("Updated property %s from %s to %s", name, old_value, new_value)
