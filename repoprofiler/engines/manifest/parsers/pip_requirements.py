"""Parser for pip requirements.txt files."""

from __future__ import annotations

import re

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser

# Matches: package_name, optional extras, then everything else as the constraint
_REQ_RE = re.compile(
    r"^([A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)"  # package name
    r"(\[[^\]]*\])?"  # optional extras
    r"\s*"
    r"(.*)?$",
)


class PipRequirementsParser:
    file_name = "requirements.txt"
    package_manager = "pip"

    def parse(self, content: str) -> ParsedManifest:
        deps: dict[str, str] = {}

        for raw_line in content.splitlines():
            line = raw_line.split(" #", 1)[0].strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith(("-r", "-c", "-e", "--")):
                continue

            # Strip environment markers
            line = line.split(";", 1)[0].strip()

            m = _REQ_RE.match(line)
            if not m:
                continue
            deps[m.group(1)] = (m.group(4) or "").strip() or "*"

        return ParsedManifest(dependencies=deps)


register_parser(PipRequirementsParser())
