"""Content index for resolving wiki-link pages to files.

The index keeps two lookups:

- ``path_index``: normalized full path -> PathEntry
- ``basename_index``: normalized basename (NFC, lower case) -> paths sharing
  that basename, in insertion order

Every path listed in a basename bucket is a key of ``path_index``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..utils import normalize_name, normalize_path, normalize_root, split_extension, split_path

log = logging.getLogger(__name__)

DEFAULT_NOTE_EXTENSIONS = ("mdx", "md")

_EXTENSION = re.compile(r"\.[^/.]+$")
_EDGE_SLASHES = re.compile(r"^/+|/+$")


@dataclass(frozen=True)
class PathEntry:
    """An indexed file."""

    path: str
    basename: str
    ext: str


@dataclass
class ContentIndex:
    """Two-map lookup from paths and basenames to indexed files."""

    path_index: dict[str, PathEntry] = field(default_factory=dict)
    basename_index: dict[str, list[str]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.path_index)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self.path_index

    def add_file(self, file_path: str) -> None:
        """Index a file. Adding a path twice keeps its original bucket position."""
        normalized = normalize_path(file_path)
        _, filename = split_path(normalized)
        basename, ext = split_extension(filename)

        self.path_index[normalized] = PathEntry(path=normalized, basename=basename, ext=ext)

        bucket = self.basename_index.setdefault(normalize_name(basename), [])
        if normalized not in bucket:
            bucket.append(normalized)

    def remove_file(self, file_path: str) -> None:
        """Remove a file, pruning its basename bucket. Unknown paths are ignored."""
        normalized = normalize_path(file_path)
        entry = self.path_index.pop(normalized, None)
        if entry is None:
            return

        key = normalize_name(entry.basename)
        bucket = self.basename_index.get(key)
        if bucket is None:
            return

        remaining = [path for path in bucket if path != normalized]
        if remaining:
            self.basename_index[key] = remaining
        else:
            del self.basename_index[key]

    def candidates(self, name: str) -> list[str]:
        """Return the paths whose basename matches ``name``."""
        return list(self.basename_index.get(normalize_name(name), []))


def build_index(paths: Iterable[str]) -> ContentIndex:
    """Build a ContentIndex from file paths."""
    index = ContentIndex()
    for path in paths:
        index.add_file(path)
    return index


def build_index_from_root(root: Path | str) -> ContentIndex:
    """Build a ContentIndex from every regular file below ``root``.

    Args:
        root: Content root directory.

    Returns:
        ContentIndex of all files, empty if ``root`` does not exist.
    """
    root_path = Path(normalize_root(root))
    if not root_path.is_dir():
        log.debug("Content root %s does not exist, using an empty index", root_path)
        return ContentIndex()

    files = sorted(path for path in root_path.rglob("*") if path.is_file())
    log.debug("Indexed %d files under %s", len(files), root_path)
    return build_index(str(path) for path in files)


# ─────────────────────────────────────────────────────────────────────────────
# Resolution
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LinkPath:
    """A page reference split into lookup components.

    ``[[notes/Project A.md]]`` gives ``name="Project A"``, ``ext="md"`` and
    ``path_hint="notes"``.
    """

    name: str
    ext: str | None = None
    path_hint: str | None = None

    @property
    def filename(self) -> str:
        return f"{self.name}.{self.ext}" if self.ext else self.name


def parse_link_path(page: str) -> LinkPath | None:
    """Split a page reference (anchor already removed) into a LinkPath.

    Returns:
        LinkPath, or None for an empty page.
    """
    directory, filename = split_path(page)
    if not filename:
        return None
    name, ext = split_extension(filename)
    if not name:
        # Dotfiles such as ".env" have no extension
        name, ext = filename, ""
    return LinkPath(name=name, ext=ext or None, path_hint=directory or None)


def _hinted_paths(target: LinkPath, content_root: str | None) -> list[str]:
    extensions = (target.ext,) if target.ext else DEFAULT_NOTE_EXTENSIONS
    prefixes = [""]
    if content_root:
        prefixes.append(normalize_root(content_root).rstrip("/") + "/")

    return [
        normalize_path(f"{prefix}{target.path_hint}/{target.name}.{ext}")
        for ext in extensions
        for prefix in prefixes
    ]


def _prefer_hinted(candidates: list[str], path_hint: str) -> list[str]:
    hint = normalize_path(path_hint).strip("/").lower()
    preferred = []
    for candidate in candidates:
        directory, _ = split_path(candidate)
        directory = directory.lower()
        if directory == hint or directory.endswith(f"/{hint}"):
            preferred.append(candidate)
    return preferred or candidates


def resolve(
    index: ContentIndex,
    target: LinkPath,
    content_root: str | None = None,
) -> str | None:
    """Resolve a LinkPath to an indexed path.

    Resolution order:
    1. With a path hint, the exact hinted path (``hint/name.ext``; ``mdx``
       then ``md`` when no extension is given), as written and below
       ``content_root``.
    2. The basename bucket, filtered to the requested extension.
    3. A dotted name with no match is retried as an extension-less basename.

    Several remaining candidates are narrowed to those inside the hinted
    directory, then the lexicographically first path wins.

    Args:
        index: Content index to search.
        target: Parsed page reference.
        content_root: Root prepended to hinted paths.

    Returns:
        The resolved path, or None if nothing matches.
    """
    if target.path_hint:
        for hinted in _hinted_paths(target, content_root):
            if hinted in index.path_index:
                return hinted

    candidates = index.candidates(target.name)
    if target.ext:
        wanted = target.ext.lower()
        candidates = [
            candidate
            for candidate in candidates
            if index.path_index[candidate].ext.lower() == wanted
        ]
        if not candidates:
            # "v1.2 notes" is a name, not a "2 notes" extension
            candidates = index.candidates(target.filename)

    if not candidates:
        log.debug("No file matches %r", target.filename)
        return None

    if len(candidates) == 1:
        return candidates[0]

    if target.path_hint:
        candidates = _prefer_hinted(candidates, target.path_hint)

    chosen = sorted(candidates)[0]
    if len(candidates) > 1:
        log.debug("Ambiguous link %r matches %s, using %s", target.filename, candidates, chosen)
    return chosen


def resolve_url(
    resolved_path: str,
    content_root: str | None = None,
    url_prefix: str = "",
    keep_extension: bool = False,
) -> str:
    """Build the public URL for a resolved path.

    Args:
        resolved_path: Path returned by ``resolve``.
        content_root: Root stripped from the front of the path.
        url_prefix: Prefix joined in front of the path (``/docs``).
        keep_extension: Keep the file extension in the URL.

    Returns:
        Absolute URL path, e.g. ``/docs/notes/ProjectA``.
    """
    path = normalize_path(resolved_path)
    prefix = _EDGE_SLASHES.sub("", normalize_path(url_prefix))

    if content_root:
        root = normalize_root(content_root)
        if path == root or path.startswith(f"{root}/"):
            path = path[len(root) :]

    path = path.lstrip("/")
    if not keep_extension:
        path = _EXTENSION.sub("", path)

    if not prefix:
        return f"/{path}"
    if not path:
        return f"/{prefix}"
    return f"/{prefix}/{path}"
