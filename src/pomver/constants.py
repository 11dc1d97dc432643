"""Constants used in the project."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_MAVEN = "https://search.maven.org/solrsearch/select"
    WELL_KNOWN_REPOSITORIES = [
        "https://repo1.maven.org/maven2",
        "https://repo.spring.io/release",
    ]
    METADATA_FILE = "maven-metadata.xml"
    POM_XML_FILE = "pom.xml"
    POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
    LOCAL_REPOSITORY = os.path.join(os.path.expanduser("~"), ".m2", "repository")
    TRANSIENT_SUFFIX = ".lastUpdated"
    EXCLUDED_DIRS = ["target", "build", "out", ".git", ".idea", ".mvn", "node_modules"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 10  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 1

    ENV_CONFIG = "POMVER_CONFIG"
    ENV_LOG_LEVEL = "POMVER_LOG_LEVEL"
    DEFAULT_CONFIG_PATHS = [
        "pomver.yml",
        "pomver.yaml",
        os.path.join(os.path.expanduser("~"), ".config", "pomver", "config.yml"),
    ]


def _config_candidates(path: Optional[str]) -> list:
    if path:
        return [path]
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path and env_path.strip():
        return [env_path.strip()]
    return list(Constants.DEFAULT_CONFIG_PATHS)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML configuration mapping.

    Lookup order: explicit path, ``POMVER_CONFIG`` environment variable,
    then the default locations. The first existing file wins.

    Args:
        path: Optional explicit config path.

    Returns:
        Parsed mapping, or an empty dict when no usable file exists.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    for candidate in _config_candidates(path):
        if not os.path.isfile(candidate):
            continue
        try:
            with open(candidate, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to load config %s: %s", candidate, exc)
            return {}
        if isinstance(data, dict):
            logger.debug("Loaded config from %s", candidate)
            return data
        logger.warning("Ignoring config %s: top level is not a mapping", candidate)
        return {}
    return {}


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply recognised config keys onto Constants.

    Unknown keys are ignored and bad values are logged and skipped.
    """
    if not isinstance(cfg, dict):
        return

    http_cfg = cfg.get("http") or {}
    if isinstance(http_cfg, dict):
        for key, attr in (("timeout", "REQUEST_TIMEOUT"), ("retries", "HTTP_RETRY_MAX")):
            if key not in http_cfg:
                continue
            try:
                value = int(http_cfg[key])
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid http.%s value: %r", key, http_cfg[key])
                continue
            if value < 1:
                logger.warning("Ignoring non-positive http.%s value: %r", key, value)
                continue
            setattr(Constants, attr, value)

    repo_cfg = cfg.get("repositories") or {}
    if isinstance(repo_cfg, dict):
        local = repo_cfg.get("local")
        if isinstance(local, str) and local.strip():
            Constants.LOCAL_REPOSITORY = os.path.expanduser(local.strip())
        remote = repo_cfg.get("remote")
        if isinstance(remote, list):
            urls = [u.strip() for u in remote if isinstance(u, str) and u.strip()]
            Constants.WELL_KNOWN_REPOSITORIES = urls
        elif remote is not None:
            logger.warning("Ignoring repositories.remote: expected a list of URLs")

    registry_cfg = cfg.get("registry") or {}
    if isinstance(registry_cfg, dict):
        search_url = registry_cfg.get("search_url")
        if isinstance(search_url, str) and search_url.strip():
            Constants.REGISTRY_URL_MAVEN = search_url.strip()
