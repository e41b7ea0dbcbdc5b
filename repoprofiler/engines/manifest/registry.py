"""Parser registry: map manifest file names to parsers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from repoprofiler.engines.manifest.models import ParsedManifest


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    file_name: str
    package_manager: str

    def parse(self, content: str) -> ParsedManifest: ...


PARSER_REGISTRY: dict[str, ManifestParser] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by its (lower-cased) manifest file name."""
    PARSER_REGISTRY[parser.file_name.lower()] = parser


def get_parser(file_name: str) -> ManifestParser | None:
    return PARSER_REGISTRY.get(file_name.lower())
