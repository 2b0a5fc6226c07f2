"""Callout blockquotes: ``> [!TYPE] optional title``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .ast import Blockquote, Break, FlowElement, Node, Paragraph, Text, to_string
from .models import CalloutOptions

CALLOUT_PATTERN = re.compile(r"^\[!(?P<type>\w+)\]\s*(?P<title>.*)?$")


@dataclass(frozen=True)
class CalloutMarker:
    raw_type: str
    title: str | None = None


def parse_marker(line: str) -> CalloutMarker | None:
    """Match ``[!TYPE] title`` against a single line."""
    match = CALLOUT_PATTERN.match(line)
    if match is None:
        return None
    title = (match.group("title") or "").strip()
    return CalloutMarker(raw_type=match.group("type").lower(), title=title or None)


def resolve_type(raw_type: str, options: CalloutOptions) -> str:
    """Map a raw marker type through the type map, with the default as fallback."""
    mapped = options.type_map.get(raw_type.lower(), "").strip()
    return mapped or options.default_type


def first_line(paragraph: Paragraph) -> str:
    """Flattened text of the paragraph up to the first line ending or hard break."""
    parts = []
    for child in paragraph.children:
        if isinstance(child, Break):
            break
        text = to_string(child)
        if "\n" in text:
            parts.append(text.split("\n", 1)[0])
            break
        parts.append(text)
    return "".join(parts)


def strip_first_line(paragraph: Paragraph) -> Paragraph | None:
    """Return a paragraph with the first line removed, or None if nothing is left.

    Nodes after the first line ending are kept as they are, so emphasis and
    links on later lines survive.
    """
    for index, child in enumerate(paragraph.children):
        if isinstance(child, Break):
            rest = paragraph.children[index + 1 :]
            break
        if isinstance(child, Text) and "\n" in child.value:
            remainder = child.value.split("\n", 1)[1]
            rest = ([Text(value=remainder)] if remainder else []) + paragraph.children[index + 1 :]
            break
    else:
        return None

    if not any(to_string(node).strip() or not isinstance(node, Text) for node in rest):
        return None
    return Paragraph(children=rest, tight=paragraph.tight)


def build_callout(blockquote: Blockquote, options: CalloutOptions | None = None) -> Node | None:
    """Turn a blockquote starting with a callout marker into a callout element.

    Args:
        blockquote: Candidate blockquote.
        options: Callout options (component name, type map, attribute name).

    Returns:
        FlowElement named after ``options.component_name`` carrying the type
        attribute and, when given, a ``title`` attribute. None if the
        blockquote has no marker.
    """
    options = options or CalloutOptions()
    if not blockquote.children or not isinstance(blockquote.children[0], Paragraph):
        return None

    paragraph = blockquote.children[0]
    marker = parse_marker(first_line(paragraph))
    if marker is None:
        return None

    attributes = {options.type_prop_name: resolve_type(marker.raw_type, options)}
    if marker.title:
        attributes["title"] = marker.title

    body = strip_first_line(paragraph)
    children = [body] if body is not None else []
    children.extend(blockquote.children[1:])

    return FlowElement(name=options.component_name, attributes=attributes, children=children)
