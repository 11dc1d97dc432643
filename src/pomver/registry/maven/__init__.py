"""Maven registry package.

This package provides the version sources consulted by the resolver:
- client.py: latest version lookup in the Maven Central search index
- discovery.py: maven-metadata.xml lookup in a remote repository
- local.py: version directories present in the local repository cache
"""

from .client import search_index
from .discovery import fetch_metadata
from .local import LocalRepositoryScanner


class RemoteMetadataFetcher:
    """Network-facing version sources bundled for injection into the resolver."""

    def search_index(self, coordinate):
        """See :func:`client.search_index`."""
        return search_index(coordinate)

    def fetch_metadata(self, repository_url, coordinate):
        """See :func:`discovery.fetch_metadata`."""
        return fetch_metadata(repository_url, coordinate)


__all__ = [
    "LocalRepositoryScanner",
    "RemoteMetadataFetcher",
    "fetch_metadata",
    "search_index",
]
