"""File tree normalizer: one listing per analysis, shared read-only."""

from repoprofiler.engines.file_tree.normalizer import (
    IGNORED_DIRS,
    filter_ignored,
    is_ignored,
    load_file_tree,
    render_file_tree,
)

__all__ = ["IGNORED_DIRS", "filter_ignored", "is_ignored", "load_file_tree", "render_file_tree"]
