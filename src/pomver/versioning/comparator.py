"""Qualifier-aware version ordering.

Versions are split on ``.``, ``-`` and ``_`` into segments and compared
segment by segment through a sort key, which makes the order total:

    pre-release qualifiers (alpha < beta < milestone/M<n> < rc < snapshot)
      < end of version
      < release qualifiers (release < final < ga)
      < unrecognised qualifiers (case-insensitive lexical)
      < numbers (integer order)

So ``1.0-beta < 1.0 < 1.0.0 < 1.0.1`` and ``1.0-rc < 1.0-final``. Versions
whose keys tie (``1.0-RC`` and ``1.0-rc``) are ordered by the raw string,
so ``compare_versions(a, b) == 0`` only when ``a == b``.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

_SEPARATORS = re.compile(r"[.\-_]")
_NUMERIC = re.compile(r"^\d+$")
_MILESTONE_SHORT = re.compile(r"^m(\d+)$")  # 5.0.0-M1

QUALIFIER_ORDER = ["alpha", "beta", "milestone", "rc", "snapshot", "release", "final", "ga"]
_PRE_RELEASE = {"alpha", "beta", "milestone", "rc", "snapshot"}
UNSTABLE_MARKERS = ("snapshot", "beta", "alpha")

# Segment classes, ordered.
_PRE = 0
_END = 1
_RELEASE = 2
_UNKNOWN = 3
_NUMBER = 4

SegmentKey = Tuple
VersionKey = Tuple[Tuple[SegmentKey, ...], str]


def split_version(version: str) -> List[str]:
    """Strip one leading ``v`` and split into non-empty segments."""
    text = version[1:] if version.startswith("v") else version
    return [seg for seg in _SEPARATORS.split(text) if seg]


def _qualifier(segment: str) -> Optional[Tuple[int, str]]:
    """Return ``(rank, remainder)`` for a known qualifier, else None."""
    lowered = segment.lower()
    short = _MILESTONE_SHORT.match(lowered)
    if short:
        return QUALIFIER_ORDER.index("milestone"), short.group(1)
    for idx, name in enumerate(QUALIFIER_ORDER):
        if lowered.startswith(name):
            return idx, segment[len(name):]
    return None


def _remainder_key(remainder: str) -> Tuple[int, int, str]:
    # "rc2" vs "rc10": compare the tail numerically when it is a number
    if not remainder:
        return (0, 0, "")
    if _NUMERIC.match(remainder):
        return (1, int(remainder), "")
    return (2, 0, remainder.lower())


def _segment_key(segment: str) -> SegmentKey:
    if _NUMERIC.match(segment):
        return (_NUMBER, int(segment))
    qualifier = _qualifier(segment)
    if qualifier is None:
        return (_UNKNOWN, segment.lower())
    rank, remainder = qualifier
    tail = _remainder_key(remainder)
    if QUALIFIER_ORDER[rank] in _PRE_RELEASE:
        return (_PRE, rank, tail)
    return (_RELEASE, rank, tail)


def version_key(version: str) -> VersionKey:
    """Sort key implementing the order described in the module docstring."""
    segments = tuple(_segment_key(seg) for seg in split_version(version or ""))
    return segments + ((_END,),), version or ""


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``."""
    ka, kb = version_key(a), version_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def is_stable(version: str) -> bool:
    """True unless the version looks like a snapshot, alpha or beta."""
    lowered = version.lower()
    return not any(marker in lowered for marker in UNSTABLE_MARKERS)


def latest_version(versions: Iterable[str]) -> Optional[str]:
    """Highest version of the iterable, or None when empty."""
    candidates = [v for v in versions if v]
    if not candidates:
        return None
    return max(candidates, key=version_key)


def latest_stable_version(versions: Iterable[str]) -> Optional[str]:
    """Highest stable version, falling back to the highest of any kind."""
    candidates = [v for v in versions if v]
    stable = [v for v in candidates if is_stable(v)]
    return latest_version(stable) or latest_version(candidates)
