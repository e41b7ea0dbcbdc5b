"""Parser for Ruby Gemfiles."""

from __future__ import annotations

import re

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser

# gem 'rails', '~> 7.0'
_GEM_RE = re.compile(r"""^gem\s+['"]([^'"]+)['"](?:\s*,\s*['"]([^'"]+)['"])?""")


class GemfileParser:
    file_name = "Gemfile"
    package_manager = "bundler"

    def parse(self, content: str) -> ParsedManifest:
        deps: dict[str, str] = {}
        for raw_line in content.splitlines():
            m = _GEM_RE.match(raw_line.strip())
            if m:
                deps[m.group(1)] = m.group(2) or "*"
        return ParsedManifest(dependencies=deps)


register_parser(GemfileParser())
