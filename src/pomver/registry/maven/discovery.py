"""Repository metadata discovery (maven-metadata.xml)."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

from ...common.http_client import robust_get
from ...common.logging_utils import extra_context, is_debug_enabled, safe_url
from ...constants import Constants
from ...versioning.comparator import latest_stable_version
from ...versioning.models import Coordinate

logger = logging.getLogger(__name__)


def metadata_url(repository_url: str, coordinate: Coordinate) -> str:
    """Construct the metadata document URL for a coordinate in a repository."""
    base = repository_url.rstrip("/")
    return f"{base}/{coordinate.group_path}/{coordinate.artifact_id}/{Constants.METADATA_FILE}"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def _first_text(root: ET.Element, name: str) -> Optional[str]:
    for elem in root.iter():
        if _local_name(elem.tag) == name and elem.text and elem.text.strip():
            return elem.text.strip()
    return None


def metadata_versions(root: ET.Element) -> List[str]:
    """Return versions listed under ``<versions>`` in source order."""
    versions: List[str] = []
    for elem in root.iter():
        if _local_name(elem.tag) != "versions":
            continue
        for item in elem:
            if _local_name(item.tag) == "version" and item.text and item.text.strip():
                versions.append(item.text.strip())
    return versions


def extract_version_from_metadata(xml_text: str) -> Optional[str]:
    """Pick a version from a metadata document.

    Priority: ``<release>``, then ``<latest>``, then the highest stable entry
    of the ``<versions>`` list.
    """
    root = ET.fromstring(xml_text)
    for name in ("release", "latest"):
        value = _first_text(root, name)
        if value:
            return value
    return latest_stable_version(metadata_versions(root))


def fetch_metadata(repository_url: str, coordinate: Coordinate) -> Optional[str]:
    """Best-effort version lookup in one repository.

    Any failure (transport, non-2xx, unparsable document) yields None so
    the caller can move on to the next repository.
    """
    url = metadata_url(repository_url, coordinate)
    status, _, text = robust_get(url)
    if not 200 <= status < 300 or not text:
        if is_debug_enabled(logger):
            logger.debug("Maven metadata fetch failed", extra=extra_context(
                event="function_exit", component="discovery", action="fetch_metadata",
                outcome="fetch_failed", status_code=status, target=safe_url(url),
                package=str(coordinate)
            ))
        return None
    try:
        version = extract_version_from_metadata(text)
    except ET.ParseError:
        if is_debug_enabled(logger):
            logger.debug("Maven metadata parse error", extra=extra_context(
                event="anomaly", component="discovery", action="fetch_metadata",
                outcome="parse_error", target=safe_url(url), package=str(coordinate)
            ))
        return None
    if is_debug_enabled(logger):
        logger.debug("Maven metadata resolved", extra=extra_context(
            event="function_exit", component="discovery", action="fetch_metadata",
            outcome="found" if version else "no_version", target=safe_url(url),
            package=str(coordinate)
        ))
    return version
