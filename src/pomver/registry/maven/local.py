"""Local repository scanner (``~/.m2/repository`` layout)."""
from __future__ import annotations

import logging
import os
import re
from typing import List, Optional

from ...constants import Constants
from ...versioning.models import Coordinate

logger = logging.getLogger(__name__)

_VERSION_DIR = re.compile(r"^\d+\.\d+.*")


def is_version_dir_name(name: str) -> bool:
    """True for names like ``1.2`` or ``3.0.1-rc1``, excluding transient downloads."""
    return bool(_VERSION_DIR.match(name)) and not name.endswith(Constants.TRANSIENT_SUFFIX)


class LocalRepositoryScanner:
    """Lists versions of a coordinate present in the local repository cache."""

    def __init__(self, root: Optional[str] = None):
        self._root = root

    @property
    def root(self) -> str:
        """Repository root; falls back to the configured default at call time."""
        return self._root or Constants.LOCAL_REPOSITORY

    def artifact_dir(self, coordinate: Coordinate) -> str:
        """Directory holding the version folders of ``coordinate``."""
        parts = (coordinate.group_id or "").split(".")
        return os.path.join(self.root, *parts, coordinate.artifact_id or "")

    def scan(self, coordinate: Coordinate) -> List[str]:
        """Return version directory names in listing order.

        A missing artifact directory yields an empty list. Other OS errors
        propagate to the caller.
        """
        path = self.artifact_dir(coordinate)
        try:
            entries = sorted(os.scandir(path), key=lambda e: e.name)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("No local repository entry at %s", path)
            return []
        return [e.name for e in entries if e.is_dir() and is_version_dir_name(e.name)]
