"""Manifest parsers: auto-registered on import."""

from repoprofiler.engines.manifest.parsers import (
    cargo_toml,  # noqa: F401
    composer_json,  # noqa: F401
    gemfile,  # noqa: F401
    go_mod,  # noqa: F401
    maven_pom,  # noqa: F401
    package_json,  # noqa: F401
    pip_requirements,  # noqa: F401
    pyproject_toml,  # noqa: F401
)
