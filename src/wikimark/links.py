"""Turn wiki-link nodes into ordinary links."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .ast import Link, Node, Text, WikiLink
from .models import Hook
from .resolver import ContentResolver
from .target import ParsedTarget, parse_target
from .utils import slugify

log = logging.getLogger(__name__)

NOT_FOUND_CLASS = "not-found"

# Same-document heading links drop dots and commas only
_HEADING_ONLY_REMOVE = re.compile(r"[.,]")


@dataclass(frozen=True)
class WikiLinkPathTransformContext:
    """Passed to the ``wikiLinkPathTransform`` hook."""

    target: ParsedTarget
    content_root: Path | None = None
    resolved_path: str | None = None
    resolved_url: str | None = None


@dataclass
class ResolvedLink:
    """Outcome of resolving a wiki link."""

    url: str
    title: str | None = None
    display_children: list[Node] = field(default_factory=list)
    not_found: bool = False

    def to_node(self) -> Link:
        return Link(
            children=list(self.display_children),
            url=self.url,
            title=self.title,
            class_names=[NOT_FOUND_CLASS] if self.not_found else [],
        )


def get_wiki_link_target(node: WikiLink) -> ParsedTarget | None:
    """Parse the target of a wiki-link node, or None if it is empty."""
    return parse_target(node.value, node.alias or None)


def anchor_fragment(target: ParsedTarget) -> str:
    """Return the URL fragment for the target's anchor ("" without one)."""
    if not target.anchor:
        return ""
    if target.anchor_kind == "block":
        return f"#^{target.anchor}"
    if target.anchor_kind == "heading":
        remove = _HEADING_ONLY_REMOVE if not target.page else None
        return f"#{slugify(target.anchor, remove=remove)}"
    return ""


def link_text(target: ParsedTarget) -> str:
    """Alias if it differs from the raw target, else the page, else the anchor."""
    if target.alias and target.alias != target.value:
        return target.alias
    return target.page or target.anchor


def build_link(
    target: ParsedTarget,
    resolver: ContentResolver,
    path_transform: Hook | None = None,
) -> ResolvedLink:
    """Resolve a parsed target into a ResolvedLink.

    Page URL precedence: ``path_transform`` result, resolved content URL (or
    manifest permalink), then the slug URL. A configured source that does
    not know the page marks the link as not found.

    Args:
        target: Parsed wiki-link target.
        resolver: Resolution context.
        path_transform: Optional ``wikiLinkPathTransform`` hook.

    Returns:
        ResolvedLink for the target.
    """
    text = link_text(target)
    fragment = anchor_fragment(target)
    children: list[Node] = [Text(value=text)] if text else []

    if not target.page:
        return ResolvedLink(url=fragment or "#", title=text or None, display_children=children)

    resolved_path = resolver.resolve(target.page)
    resolved_url = resolver.page_url(resolved_path) if resolved_path else None

    if path_transform is not None:
        context = WikiLinkPathTransformContext(
            target=target,
            content_root=Path(resolver.content_root) if resolver.content_root else None,
            resolved_path=resolved_path,
            resolved_url=resolved_url,
        )
        transformed = path_transform(context)
        if isinstance(transformed, str):
            resolved_url = transformed

    not_found = resolver.has_sources and resolved_path is None
    if not_found:
        log.debug("Wiki link target not found: %s", target.page)

    page_url = resolved_url or resolver.slug_url(target.page)
    return ResolvedLink(
        url=f"{page_url}{fragment}",
        title=text or None,
        display_children=children,
        not_found=not_found,
    )


def create_link(
    node: WikiLink,
    resolver: ContentResolver,
    path_transform: Hook | None = None,
) -> Link | None:
    """Build the Link node replacing ``node``, or None if its target is empty."""
    target = get_wiki_link_target(node)
    if target is None:
        return None
    return build_link(target, resolver, path_transform).to_node()
