"""Manifest engine: decode the language's dependency manifest."""

from repoprofiler.engines.manifest.loader import (
    detect_package_managers,
    load_manifest,
    select_manifest,
)
from repoprofiler.engines.manifest.models import ManifestData, ParsedManifest

__all__ = [
    "ManifestData",
    "ParsedManifest",
    "detect_package_managers",
    "load_manifest",
    "select_manifest",
]
