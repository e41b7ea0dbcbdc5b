"""Parser for Python pyproject.toml files (PEP 621 and Poetry tables)."""

from __future__ import annotations

import re
import sys

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser
from repoprofiler.errors import ManifestParseError

# PEP 508 simplified: name followed by optional extras and version specifiers
_PEP508_RE = re.compile(
    r"^([A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)"  # package name
    r"(\[[^\]]*\])?"  # optional extras [extra1,extra2]
    r"\s*"
    r"(.*)?$",  # version specifiers
)


def _table(parent: dict, key: str) -> dict:
    """Sub-table *key* of *parent*, or an empty one when absent or not a table."""
    value = parent.get(key)
    return value if isinstance(value, dict) else {}


def _pep508_pairs(requirements: object) -> dict[str, str]:
    deps: dict[str, str] = {}
    if not isinstance(requirements, list):
        return deps
    for raw in requirements:
        if not isinstance(raw, str):
            continue
        line = raw.split(";", 1)[0].strip()
        m = _PEP508_RE.match(line)
        if m:
            deps[m.group(1)] = (m.group(4) or "").strip() or "*"
    return deps


def _poetry_pairs(table: object) -> dict[str, str]:
    deps: dict[str, str] = {}
    if not isinstance(table, dict):
        return deps
    for name, spec in table.items():
        if name.lower() == "python":
            continue
        if isinstance(spec, str):
            deps[name] = spec
        elif isinstance(spec, dict):
            deps[name] = str(spec.get("version", "*"))
        else:
            deps[name] = "*"
    return deps


class PyprojectTomlParser:
    file_name = "pyproject.toml"
    package_manager = "pip"

    def parse(self, content: str) -> ParsedManifest:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestParseError(self.file_name, str(exc)) from exc

        project = _table(data, "project")
        poetry = _table(_table(data, "tool"), "poetry")

        deps = _pep508_pairs(project.get("dependencies"))
        for group in _table(project, "optional-dependencies").values():
            deps.update(_pep508_pairs(group))

        deps.update(_poetry_pairs(poetry.get("dependencies")))
        deps.update(_poetry_pairs(poetry.get("dev-dependencies")))
        for group in _table(poetry, "group").values():
            if isinstance(group, dict):
                deps.update(_poetry_pairs(group.get("dependencies")))

        scripts: dict[str, str] = {}
        for table in (project.get("scripts"), poetry.get("scripts")):
            if isinstance(table, dict):
                scripts.update({k: v for k, v in table.items() if isinstance(v, str)})

        return ParsedManifest(dependencies=deps, scripts=scripts)


register_parser(PyprojectTomlParser())
