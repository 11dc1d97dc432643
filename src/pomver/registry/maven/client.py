"""Maven Central search index client."""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from ...common import http_client
from ...common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from ...constants import Constants
from ...exceptions import RepositoryAccessError
from ...versioning.models import Coordinate

logger = logging.getLogger(__name__)

_LATEST_VERSION_PATTERN = re.compile(r'"latestVersion"\s*:\s*"([^"]+)"')
_V_PATTERN = re.compile(r'"v"\s*:\s*"([^"]+)"')


def _version_from_payload(payload: Any) -> Optional[str]:
    """Pull the version out of a parsed solrsearch response."""
    if not isinstance(payload, dict):
        return None
    response = payload.get("response")
    docs = response.get("docs") if isinstance(response, dict) else None
    if not isinstance(docs, list):
        return None
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        for field in ("latestVersion", "v"):
            value = doc.get(field)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def extract_version_from_json(text: str, payload: Any = None) -> Optional[str]:
    """Extract a version from a search response.

    Structured lookup first; raw ``"latestVersion":"..."`` then ``"v":"..."``
    pattern matching when the body is not the expected shape.
    """
    version = _version_from_payload(payload)
    if version:
        return version
    if not text:
        return None
    for pattern in (_LATEST_VERSION_PATTERN, _V_PATTERN):
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def search_index(coordinate: Coordinate, url: Optional[str] = None) -> Optional[str]:
    """Look up the latest version of ``coordinate`` in the search index.

    Args:
        coordinate: groupId/artifactId to query.
        url: Search endpoint, defaults to Constants.REGISTRY_URL_MAVEN.

    Returns:
        Version string, or None when the index does not know the artifact.

    Raises:
        RepositoryAccessError: non-2xx status other than 404, timeout or
            transport failure (status_code -1).
    """
    endpoint = url or Constants.REGISTRY_URL_MAVEN
    params = {
        "q": f"g:{coordinate.group_id} AND a:{coordinate.artifact_id}",
        "rows": 1,
        "wt": "json",
    }
    headers = {"Accept": "application/json"}

    with Timer() as timer:
        status, _, payload, text = http_client.get_json(endpoint, headers=headers, params=params)

    if status == http_client.TRANSPORT_FAILURE:
        raise RepositoryAccessError(endpoint, -1, text)
    if status == 404:
        if is_debug_enabled(logger):
            logger.debug("Artifact not found in search index", extra=extra_context(
                event="http_response", component="client", action="search_index",
                outcome="not_found", status_code=status, target=safe_url(endpoint),
                package=str(coordinate)
            ))
        return None
    if not 200 <= status < 300:
        raise RepositoryAccessError(endpoint, status, "Unexpected response from search index")

    version = extract_version_from_json(text, payload)
    if is_debug_enabled(logger):
        logger.debug("Search index answered", extra=extra_context(
            event="http_response", component="client", action="search_index",
            outcome="found" if version else "no_version", status_code=status,
            duration_ms=timer.duration_ms(), package=str(coordinate)
        ))
    return version
