"""Content resolution: index, manifest and URL building."""

from .content import ContentResolver
from .index import (
    ContentIndex,
    LinkPath,
    PathEntry,
    build_index,
    build_index_from_root,
    parse_link_path,
    resolve,
    resolve_url,
)
from .manifest import load_markdown_files

__all__ = [
    "ContentIndex",
    "ContentResolver",
    "LinkPath",
    "PathEntry",
    "build_index",
    "build_index_from_root",
    "load_markdown_files",
    "parse_link_path",
    "resolve",
    "resolve_url",
]
