"""Parser for Go go.mod files."""

from __future__ import annotations

import re

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser

# Single require: require github.com/foo/bar v1.2.3
_SINGLE_RE = re.compile(r"^require\s+(\S+)\s+(\S+)")

# Inside require block: github.com/foo/bar v1.2.3
_BLOCK_RE = re.compile(r"^(\S+)\s+(v\S+)")

_BLOCK_OPEN_RE = re.compile(r"^require\s*\($")


class GoModParser:
    """Every ``require (...)`` block contributes, not only the first."""

    file_name = "go.mod"
    package_manager = "go"

    def parse(self, content: str) -> ParsedManifest:
        deps: dict[str, str] = {}
        in_require_block = False

        for raw_line in content.splitlines():
            line = raw_line.split("//", 1)[0].strip()
            if not line:
                continue

            if _BLOCK_OPEN_RE.match(line):
                in_require_block = True
                continue
            if in_require_block and line == ")":
                in_require_block = False
                continue

            m = _BLOCK_RE.match(line) if in_require_block else _SINGLE_RE.match(line)
            if m:
                deps[m.group(1)] = m.group(2)

        return ParsedManifest(dependencies=deps)


register_parser(GoModParser())
