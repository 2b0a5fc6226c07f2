"""Markdown parsing for wikimark."""

from .highlight import mark_plugin
from .markdown import ParseError, create_parser, parse_markdown, parse_markdown_file
from .tree import TreeBuilder
from .wikilink import scan_wikilink, wikilink_plugin

__all__ = [
    "ParseError",
    "TreeBuilder",
    "create_parser",
    "mark_plugin",
    "parse_markdown",
    "parse_markdown_file",
    "scan_wikilink",
    "wikilink_plugin",
]
