"""Parser for Maven pom.xml files."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser
from repoprofiler.errors import ManifestParseError

_NS = "{http://maven.apache.org/POM/4.0.0}"

_PROP_RE = re.compile(r"\$\{([^}]+)\}")


def _resolve_props(value: str, props: dict[str, str]) -> str:
    """Replace ${property} placeholders with values from <properties>."""
    return _PROP_RE.sub(lambda m: props.get(m.group(1), m.group(0)), value)


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


def _extract_properties(root: ET.Element) -> dict[str, str]:
    props: dict[str, str] = {}
    for ns in (_NS, ""):
        props_el = root.find(f"{ns}properties")
        if props_el is None:
            continue
        for child in props_el:
            tag = child.tag.split("}")[-1]
            if child.text:
                props[tag] = child.text.strip()
    return props


class MavenPomParser:
    file_name = "pom.xml"
    package_manager = "maven"

    def parse(self, content: str) -> ParsedManifest:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ManifestParseError(self.file_name, str(exc)) from exc

        props = _extract_properties(root)
        deps: dict[str, str] = {}

        # Try both namespaced and non-namespaced
        for ns in (_NS, ""):
            for dep_el in root.iter(f"{ns}dependency"):
                group_id = _text(dep_el.find(f"{ns}groupId"))
                artifact_id = _text(dep_el.find(f"{ns}artifactId"))
                if not artifact_id:
                    continue
                version = _text(dep_el.find(f"{ns}version"))
                name = f"{group_id}:{artifact_id}" if group_id else artifact_id
                deps[name] = _resolve_props(version, props) if version else "*"

        return ParsedManifest(dependencies=deps)


register_parser(MavenPomParser())
