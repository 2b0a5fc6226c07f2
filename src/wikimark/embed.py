"""Embed classification and rendering for ``![[target]]``.

Kinds are decided by the file extension of the page:

    no extension, md, mdx  -> note
    apng, avif, gif, ...   -> image
    m4v, mov, mp4, ...     -> video
    anything else          -> unsupported (left as raw text)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from PIL import Image as PILImage

from .ast import FlowElement, Image, Node, Text, TextElement
from .models import EmbedRenderingOptions, Hook
from .resolver import ContentResolver
from .target import ParsedTarget
from .utils import split_path

log = logging.getLogger(__name__)

EmbedKind = Literal["note", "image", "video", "unsupported"]

NOTE_EXTENSIONS = frozenset({"", "md", "mdx"})
IMAGE_EXTENSIONS = frozenset({"apng", "avif", "gif", "jpeg", "jpg", "png", "svg", "webp"})
VIDEO_EXTENSIONS = frozenset({"m4v", "mov", "mp4", "ogv", "webm"})

NOT_FOUND_CLASS = "embed-not-found"


@dataclass(frozen=True)
class EmbedPathTransformContext:
    """Passed to the ``embeddingPathTransform`` hook."""

    kind: EmbedKind
    target: ParsedTarget
    content_root: Path | None = None
    resolved_path: str | None = None
    resolved_url: str | None = None


@dataclass(frozen=True)
class EmbedRenderContext:
    """Passed to the ``embedRendering`` hooks."""

    target: ParsedTarget
    kind: EmbedKind
    is_resolved: bool
    content_root: Path | None = None
    resolved_path: str | None = None
    resolved_url: str | None = None
    alias: str | None = None
    image_width: int | None = None
    image_height: int | None = None


NoteRenderer = Callable[[EmbedRenderContext], Node | None]


def file_extension(page: str) -> str:
    """Lower-case extension of the page's filename ("" if it has none)."""
    _, filename = split_path(page)
    dot = filename.rfind(".")
    if dot <= 0 or dot == len(filename) - 1:
        return ""
    return filename[dot + 1 :].lower()


def classify(target: ParsedTarget) -> EmbedKind:
    """Classify an embed target by its extension."""
    ext = file_extension(target.page)
    if ext in NOTE_EXTENSIONS:
        return "note"
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    return "unsupported"


def resolve_embed_url(
    target: ParsedTarget,
    resolver: ContentResolver,
    resolved_path: str | None,
    path_transform: Hook | None = None,
) -> str | None:
    """Compute the embed URL, extension included.

    The ``path_transform`` hook sees the default URL and may return a string
    to replace it; any other return value keeps the default.
    """
    resolved_url = resolver.embed_url(resolved_path) if resolved_path else None

    if path_transform is not None:
        transformed = path_transform(
            EmbedPathTransformContext(
                kind=classify(target),
                target=target,
                content_root=_root(resolver),
                resolved_path=resolved_path,
                resolved_url=resolved_url,
            )
        )
        if isinstance(transformed, str):
            resolved_url = transformed

    return resolved_url


def probe_image_size(path: str | None) -> tuple[int | None, int | None]:
    """Read image dimensions from disk; unknown on any failure."""
    if not path or not Path(path).is_file():
        return None, None
    try:
        with PILImage.open(path) as image:
            width, height = image.size
    except (OSError, ValueError) as e:
        log.debug("Could not read image size of %s: %s", path, e)
        return None, None
    return width, height


def default_image(context: EmbedRenderContext) -> Node:
    return Image(
        url=context.resolved_url or context.target.page,
        alt=context.alias or "",
        width=context.image_width,
        height=context.image_height,
    )


def default_video(context: EmbedRenderContext) -> Node:
    return FlowElement(
        name="video",
        attributes={
            "src": context.resolved_url or context.target.page,
            "controls": "true",
        },
    )


def default_not_found(context: EmbedRenderContext) -> Node:
    return TextElement(
        name="span",
        attributes={"class": NOT_FOUND_CLASS},
        children=[Text(value=f"Embed not found: {context.target.page}")],
    )


def render_embed(
    target: ParsedTarget,
    resolver: ContentResolver,
    rendering: EmbedRenderingOptions | None = None,
    path_transform: Hook | None = None,
    note_renderer: NoteRenderer | None = None,
) -> Node | None:
    """Render an embed target to a tree fragment.

    Args:
        target: Parsed embed target.
        resolver: Resolution context.
        rendering: Caller-supplied per-kind renderers.
        path_transform: Optional ``embeddingPathTransform`` hook.
        note_renderer: Fallback for resolved notes without a ``note`` hook.

    Returns:
        Replacement node, or None to leave the raw embed untouched.
    """
    rendering = rendering or EmbedRenderingOptions()
    kind = classify(target)
    if kind == "unsupported":
        log.debug("Unsupported embed: %s", target.value)
        return None
    if kind == "note" and target.has_anchor:
        # Section and block embeds are not supported
        return None

    resolved_path = resolver.resolve(target.page)
    resolved_url = resolve_embed_url(target, resolver, resolved_path, path_transform)
    width, height = probe_image_size(resolved_path) if kind == "image" else (None, None)

    context = EmbedRenderContext(
        target=target,
        kind=kind,
        is_resolved=not resolver.has_sources or resolved_path is not None,
        content_root=_root(resolver),
        resolved_path=resolved_path,
        resolved_url=resolved_url,
        alias=target.alias,
        image_width=width,
        image_height=height,
    )

    if not context.is_resolved:
        log.debug("Embed target not found: %s", target.page)
        return (rendering.not_found or default_not_found)(context)

    if kind == "image":
        return (rendering.image or default_image)(context)
    if kind == "video":
        return (rendering.video or default_video)(context)

    if rendering.note is not None:
        return rendering.note(context)
    if note_renderer is not None:
        return note_renderer(context)
    return None


def _root(resolver: ContentResolver) -> Path | None:
    return Path(resolver.content_root) if resolver.content_root else None
