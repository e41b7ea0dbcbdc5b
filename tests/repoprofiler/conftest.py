"""Shared fixtures for repoprofiler tests (no network required)."""

from __future__ import annotations

import pytest

from repoprofiler.models import FileEntry, RepositoryMetadata


class FakeSource:
    """In-memory repository: a tree plus a path -> text map of readable files."""

    def __init__(
        self,
        tree: list[FileEntry] | None = None,
        files: dict[str, str] | None = None,
        *,
        metadata: RepositoryMetadata | None = None,
        tree_error: Exception | None = None,
        shallow: list[FileEntry] | None = None,
    ) -> None:
        self.metadata = metadata or RepositoryMetadata(
            name="demo",
            description="Demo project",
            language="JavaScript",
            html_url="https://github.com/acme/demo",
            clone_url="https://github.com/acme/demo.git",
        )
        self.tree = list(tree or [])
        self.files = dict(files or {})
        self.tree_error = tree_error
        self.shallow = list(shallow or [])
        self.content_calls: list[str] = []
        self.tree_refs: list[str] = []

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        return self.metadata

    async def fetch_tree(self, owner: str, repo: str, ref: str = "HEAD") -> list[FileEntry]:
        self.tree_refs.append(ref)
        if self.tree_error is not None:
            raise self.tree_error
        return list(self.tree)

    async def list_directory(self, owner: str, repo: str, path: str = "") -> list[FileEntry]:
        return list(self.shallow)

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str | None:
        self.content_calls.append(path)
        return self.files.get(path)


def build_tree(*paths: str) -> list[FileEntry]:
    """File entries for *paths*; a trailing slash marks a directory."""
    entries = []
    for raw in paths:
        kind = "directory" if raw.endswith("/") else "file"
        path = raw.rstrip("/")
        entries.append(FileEntry(path=path, name=path.rsplit("/", 1)[-1], type=kind))
    return entries


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_tree():
    return build_tree


@pytest.fixture
def fake_source():
    return FakeSource
