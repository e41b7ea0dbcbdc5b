"""Read-only inputs shared by every detector in one analysis run."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from repoprofiler.engines.github.protocols import ContentSource
from repoprofiler.engines.manifest.models import ManifestData
from repoprofiler.models import CodeSnippet, FileEntry


@dataclass(frozen=True)
class DetectionContext:
    client: ContentSource
    owner: str
    repo: str
    tree: Sequence[FileEntry]
    snippets: Sequence[CodeSnippet] = ()
    manifest: ManifestData = field(default_factory=ManifestData)
    language: str | None = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def files(self) -> list[FileEntry]:
        return [entry for entry in self.tree if entry.type == "file"]

    def find_by_name(self, *names: str) -> list[FileEntry]:
        """File entries anywhere in the tree whose base name matches, case-insensitively."""
        wanted = {name.lower() for name in names}
        return [entry for entry in self.files if entry.name.lower() in wanted]

    async def read(self, path: str) -> str | None:
        return await self.client.fetch_file_content(self.owner, self.repo, path)
