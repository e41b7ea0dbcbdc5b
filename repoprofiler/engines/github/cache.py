"""Per-run memo of file reads, shared by the sampler, the manifest loader and the detectors."""

from __future__ import annotations

import asyncio

from repoprofiler.engines.github.protocols import ContentSource


class CachedContentSource:
    """Fetch each path at most once per analysis run.

    Concurrent readers of the same path await a single in-flight request.
    Absent results are cached too.
    """

    def __init__(self, source: ContentSource) -> None:
        self._source = source
        self._reads: dict[tuple[str, str, str], asyncio.Task[str | None]] = {}

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str | None:
        key = (owner, repo, path)
        task = self._reads.get(key)
        if task is None:
            task = asyncio.ensure_future(self._source.fetch_file_content(owner, repo, path))
            self._reads[key] = task
        return await asyncio.shield(task)
