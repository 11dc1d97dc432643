"""Locate POM files under a project root."""
from __future__ import annotations

import os
from typing import List

from ..constants import Constants


def find_poms(root) -> List[str]:
    """Return every ``pom.xml`` below ``root`` in a stable order.

    Build-output and VCS directories listed in Constants.EXCLUDED_DIRS are
    not descended into.

    Raises:
        FileNotFoundError: ``root`` is not an existing directory.
    """
    root = os.fspath(root)
    if not os.path.isdir(root):
        raise FileNotFoundError(f"Project root not found: {root}")

    excluded = set(Constants.EXCLUDED_DIRS)
    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        if Constants.POM_XML_FILE in filenames:
            found.append(os.path.abspath(os.path.join(dirpath, Constants.POM_XML_FILE)))
    return found
