"""Per-run memoization of parsed and resolved manifests."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

from .models import Manifest

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SessionCache(Generic[K, V]):
    """Write-once mapping guarded by a lock.

    A key, once populated, keeps its first value for the life of the cache.
    Loaders run outside the lock: two threads racing on the same key may
    both load, but only the first stored value is ever returned.
    """

    def __init__(self, name: str = "cache"):
        self.name = name
        self._entries: Dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def put_if_absent(self, key: K, value: V) -> V:
        """Store ``value`` unless the key exists; return the stored value."""
        with self._lock:
            return self._entries.setdefault(key, value)

    def get_or_load(self, key: K, loader: Callable[[K], V]) -> V:
        """Return the cached value, calling ``loader(key)`` on a miss.

        Exceptions from the loader propagate and leave the key absent.
        """
        with self._lock:
            if key in self._entries:
                return self._entries[key]
        value = loader(key)
        return self.put_if_absent(key, value)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class ResolutionSession:
    """Caches that live for one top-level operation.

    ``model_cache`` maps absolute POM paths to parsed manifests and
    ``parent_cache`` maps ``groupId:artifactId:version`` keys to resolved
    parent manifests.
    """

    def __init__(self) -> None:
        self.model_cache: SessionCache[str, Manifest] = SessionCache("models")
        self.parent_cache: SessionCache[str, Manifest] = SessionCache("parents")

    def close(self) -> None:
        """Discard everything cached during the run."""
        self.model_cache.clear()
        self.parent_cache.clear()

    def __enter__(self) -> "ResolutionSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
