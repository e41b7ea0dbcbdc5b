"""Structural interfaces the engine depends on, so tests can inject fakes."""

from __future__ import annotations

from typing import Protocol

from repoprofiler.models import FileEntry, RepositoryMetadata


class ContentSource(Protocol):
    """Anything that can fetch a single file's text; ``None`` means absent."""

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str | None: ...


class RepositorySource(ContentSource, Protocol):
    """Full remote surface used by an analysis run."""

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata: ...

    async def fetch_tree(self, owner: str, repo: str, ref: str = "HEAD") -> list[FileEntry]: ...

    async def list_directory(self, owner: str, repo: str, path: str = "") -> list[FileEntry]: ...
