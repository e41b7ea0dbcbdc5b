"""Parser for Rust Cargo.toml files."""

from __future__ import annotations

import sys

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser
from repoprofiler.errors import ManifestParseError

_DEP_SECTIONS = ("dependencies", "dev-dependencies", "build-dependencies")


def _parse_version(spec: str | dict) -> str:
    """Version constraint of a dependency spec; ``*`` for path/git deps."""
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict) and isinstance(spec.get("version"), str):
        return spec["version"]
    return "*"


class CargoTomlParser:
    file_name = "Cargo.toml"
    package_manager = "cargo"

    def parse(self, content: str) -> ParsedManifest:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestParseError(self.file_name, str(exc)) from exc

        deps: dict[str, str] = {}
        for section in _DEP_SECTIONS:
            table = data.get(section)
            if not isinstance(table, dict):
                continue
            for name, spec in table.items():
                deps[name] = _parse_version(spec)

        return ParsedManifest(dependencies=deps)


register_parser(CargoTomlParser())
