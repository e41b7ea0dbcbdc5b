"""Remote repository client: GitHub REST access with a fixed error taxonomy."""

from repoprofiler.engines.github.cache import CachedContentSource
from repoprofiler.engines.github.client import GitHubClient
from repoprofiler.engines.github.protocols import ContentSource, RepositorySource

__all__ = ["CachedContentSource", "ContentSource", "GitHubClient", "RepositorySource"]
