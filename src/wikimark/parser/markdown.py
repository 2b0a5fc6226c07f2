"""Markdown parsing with the wiki syntax extensions enabled."""

from __future__ import annotations

import logging
from pathlib import Path

from markdown_it import MarkdownIt
from mdit_py_plugins.front_matter import front_matter_plugin

from ..ast import Root
from ..html import WikiHtmlRenderer
from .highlight import mark_plugin
from .tree import TreeBuilder
from .wikilink import DEFAULT_ALIAS_DIVIDER, wikilink_plugin

log = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a markdown file cannot be read."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def create_parser(
    alias_divider: str = DEFAULT_ALIAS_DIVIDER,
    renderer_cls: type[WikiHtmlRenderer] = WikiHtmlRenderer,
) -> MarkdownIt:
    """Create a MarkdownIt instance that understands wiki links and highlights.

    Args:
        alias_divider: Character separating a wiki-link target from its alias.
        renderer_cls: Renderer used for HTML output.

    Returns:
        Configured MarkdownIt instance.
    """
    md = MarkdownIt("commonmark", renderer_cls=renderer_cls)
    md.enable(["table", "strikethrough"])
    md.use(front_matter_plugin)
    md.use(mark_plugin)
    md.use(wikilink_plugin, alias_divider=alias_divider)
    return md


def parse_markdown(
    text: str,
    md: MarkdownIt | None = None,
    builder: TreeBuilder | None = None,
) -> Root:
    """Parse markdown text into a syntax tree.

    Args:
        text: Markdown source.
        md: Parser to use (defaults to ``create_parser()``).
        builder: Tree builder to use (defaults to ``TreeBuilder.default()``).

    Returns:
        Root node of the parsed document.
    """
    md = md or create_parser()
    builder = builder or TreeBuilder.default()
    return builder.build(md.parse(text))


def parse_markdown_file(path: Path, md: MarkdownIt | None = None) -> Root:
    """Parse a markdown file into a syntax tree.

    Raises:
        ParseError: If the file does not exist or cannot be decoded.
    """
    if not path.is_file():
        raise ParseError(path, "File does not exist")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(path, f"Failed to read file: {e}") from e

    log.debug("Parsing %s", path)
    return parse_markdown(text, md)
