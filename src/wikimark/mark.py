"""Highlight spans: ``==text==``."""

from __future__ import annotations

from .ast import Mark, TextElement


def mark_to_element(node: Mark) -> TextElement:
    """Replace a parsed mark with an inline ``mark`` element keeping its children."""
    return TextElement(name="mark", children=node.children)
