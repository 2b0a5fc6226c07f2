"""Resolution facade combining the content index and the manifest."""

from __future__ import annotations

from pathlib import Path

from ..models import MarkdownFile, WikiOptions
from ..utils import normalize_path, normalize_root, slugify
from .index import (
    ContentIndex,
    build_index,
    build_index_from_root,
    parse_link_path,
    resolve,
    resolve_url,
)


class ContentResolver:
    """Resolve wiki-link pages to files and URLs for one processing context.

    Sources are a directory scanned into a ContentIndex and an optional
    ``markdownFiles`` manifest. Manifest entries are added to the same index
    so both resolve through the same lookup rules. The resolver never changes
    the index after construction.
    """

    def __init__(
        self,
        index: ContentIndex | None = None,
        content_root: Path | str | None = None,
        url_prefix: str = "",
        base_url: str = "",
        manifest: list[MarkdownFile] | None = None,
    ) -> None:
        self.content_root = normalize_root(content_root) if content_root else None
        self.url_prefix = url_prefix
        self.base_url = base_url
        self.manifest = manifest

        if index is None:
            index = build_index_from_root(self.content_root) if self.content_root else ContentIndex()

        self._entries: dict[str, MarkdownFile] = {
            normalize_path(entry.file): entry for entry in manifest or []
        }
        if self._entries:
            # Index a copy so a caller-owned index is left untouched
            index = build_index([*index.path_index, *self._entries])
        self.index = index

    @classmethod
    def from_options(cls, options: WikiOptions, index: ContentIndex | None = None) -> ContentResolver:
        return cls(
            index=index,
            content_root=options.content_root,
            url_prefix=options.content_root_url_prefix,
            base_url=options.base_url,
            manifest=options.markdown_files,
        )

    @property
    def has_sources(self) -> bool:
        """True if a content root or manifest was configured."""
        return self.content_root is not None or self.manifest is not None

    def resolve(self, page: str) -> str | None:
        """Resolve a page reference to an indexed path, or None."""
        if not page or not self.has_sources:
            return None
        target = parse_link_path(page)
        if target is None:
            return None
        return resolve(self.index, target, self.content_root)

    def entry(self, resolved_path: str) -> MarkdownFile | None:
        """Return the manifest entry for a resolved path, if there is one."""
        return self._entries.get(normalize_path(resolved_path))

    def page_url(self, resolved_path: str) -> str | None:
        """URL of a resolved page, without extension.

        Manifest entries use their permalink; manifest entries without one
        have no content URL and fall back to the slug URL.
        """
        entry = self.entry(resolved_path)
        if entry is not None:
            if entry.permalink:
                return self._join_base(entry.permalink)
            return None
        return resolve_url(resolved_path, self.content_root, self.url_prefix)

    def embed_url(self, resolved_path: str, keep_extension: bool = True) -> str:
        """URL of a resolved embed target."""
        return resolve_url(
            resolved_path,
            self.content_root,
            self.url_prefix,
            keep_extension=keep_extension,
        )

    def slug_url(self, page: str) -> str:
        """Fallback URL built from the page slug and the base URL."""
        return self._join_base(slugify(page))

    def _join_base(self, path: str) -> str:
        base = self.base_url.rstrip("/")
        return f"{base}/{path.strip('/')}"
