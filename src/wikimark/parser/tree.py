"""Build a ``wikimark.ast`` tree from a markdown-it token stream.

markdown-it emits a flat stream of ``<name>_open`` / ``<name>_close`` pairs
plus nesting-0 leaves, with inline content nested under ``inline`` tokens.
The builder keeps a stack of open containers and dispatches on token name:

    builder.register_container("mark", lambda token: Mark())
    builder.register_leaf("wikilink", wikilink_from_token)

Tokens without a handler become ``Unknown`` nodes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from markdown_it.token import Token

from ..ast import (
    Blockquote,
    Break,
    Code,
    Delete,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    ListBlock,
    ListItem,
    Mark,
    Node,
    Paragraph,
    Parent,
    Root,
    Strong,
    Text,
    ThematicBreak,
    Unknown,
    WikiLink,
    to_string,
)

log = logging.getLogger(__name__)

ContainerFactory = Callable[[Token], Parent]
LeafFactory = Callable[[Token], Node | None]


def _attrs(token: Token) -> dict[str, str]:
    return {str(key): str(value) for key, value in token.attrs.items()}


def _heading(token: Token) -> Parent:
    depth = int(token.tag[1:]) if token.tag[1:].isdigit() else 1
    return Heading(depth=depth)


def _ordered_list(token: Token) -> Parent:
    start = token.attrGet("start")
    return ListBlock(ordered=True, start=int(start) if start is not None else None)


def _link(token: Token) -> Parent:
    href = token.attrGet("href")
    title = token.attrGet("title")
    return Link(url=str(href or ""), title=str(title) if title else None)


def _image(token: Token) -> Node:
    alt_holder = Parent()
    TreeBuilder.default().consume(token.children or [], alt_holder)

    title = token.attrGet("title")
    return Image(
        url=str(token.attrGet("src") or ""),
        alt=to_string(alt_holder),
        title=str(title) if title else None,
    )


def _fence(token: Token) -> Node:
    lang = token.info.strip().split(maxsplit=1)[0] if token.info.strip() else None
    return Code(value=token.content, lang=lang)


def wikilink_from_token(token: Token) -> Node:
    """Turn a ``wikilink`` token into a WikiLink node."""
    meta = token.meta or {}
    return WikiLink(
        value=str(meta.get("target", "")).strip(),
        alias=str(meta.get("alias", "")).strip(),
        embed=bool(meta.get("embed", False)),
        raw=token.content,
    )


class TreeBuilder:
    """Token stream to syntax tree conversion with pluggable handlers."""

    def __init__(self) -> None:
        self.containers: dict[str, ContainerFactory] = {}
        self.leaves: dict[str, LeafFactory] = {}

    def register_container(self, name: str, factory: ContainerFactory) -> None:
        """Handle ``<name>_open`` / ``<name>_close`` pairs."""
        self.containers[name] = factory

    def register_leaf(self, token_type: str, factory: LeafFactory) -> None:
        """Handle a nesting-0 token. A factory returning None drops the token."""
        self.leaves[token_type] = factory

    @classmethod
    def default(cls) -> TreeBuilder:
        """Builder with handlers for CommonMark, GFM and the wiki extensions."""
        builder = cls()
        builder.register_container("paragraph", lambda t: Paragraph(tight=t.hidden))
        builder.register_container("heading", _heading)
        builder.register_container("blockquote", lambda t: Blockquote())
        builder.register_container("bullet_list", lambda t: ListBlock(ordered=False))
        builder.register_container("ordered_list", _ordered_list)
        builder.register_container("list_item", lambda t: ListItem())
        builder.register_container("strong", lambda t: Strong())
        builder.register_container("em", lambda t: Emphasis())
        builder.register_container("s", lambda t: Delete())
        builder.register_container("link", _link)
        builder.register_container("mark", lambda t: Mark())

        builder.register_leaf("text", lambda t: Text(value=t.content))
        builder.register_leaf("softbreak", lambda t: Text(value="\n"))
        builder.register_leaf("hardbreak", lambda t: Break())
        builder.register_leaf("code_inline", lambda t: InlineCode(value=t.content))
        builder.register_leaf("html_inline", lambda t: Html(value=t.content))
        builder.register_leaf("html_block", lambda t: Html(value=t.content, block=True))
        builder.register_leaf("code_block", lambda t: Code(value=t.content))
        builder.register_leaf("fence", _fence)
        builder.register_leaf("hr", lambda t: ThematicBreak())
        builder.register_leaf("image", _image)
        builder.register_leaf("wikilink", wikilink_from_token)
        return builder

    def build(self, tokens: Sequence[Token]) -> Root:
        """Build a Root node from a block-level token stream."""
        root = Root()
        self.consume(tokens, root)
        return root

    def consume(self, tokens: Sequence[Token], parent: Parent) -> None:
        """Append nodes for ``tokens`` to ``parent``."""
        stack: list[Parent] = [parent]

        for token in tokens:
            if token.type == "inline":
                self.consume(token.children or [], stack[-1])
                continue

            if token.type == "front_matter" and isinstance(parent, Root):
                parent.front_matter = token.content
                continue

            if token.nesting == 1:
                node = self._open(token)
                _append(stack[-1], node)
                stack.append(node)
            elif token.nesting == -1:
                if len(stack) == 1:
                    log.debug("Unbalanced closing token %s ignored", token.type)
                    continue
                stack.pop()
            else:
                leaf = self._leaf(token)
                if leaf is not None:
                    _append(stack[-1], leaf)

    def _open(self, token: Token) -> Parent:
        name = token.type.removesuffix("_open")
        factory = self.containers.get(name)
        if factory is not None:
            return factory(token)
        return Unknown(
            token_type=name,
            tag=token.tag,
            attributes=_attrs(token),
            block=token.block,
            container=True,
        )

    def _leaf(self, token: Token) -> Node | None:
        factory = self.leaves.get(token.type)
        if factory is not None:
            return factory(token)
        return Unknown(
            token_type=token.type,
            tag=token.tag,
            attributes=_attrs(token),
            block=token.block,
            value=token.content,
        )


def _append(parent: Parent, node: Node) -> None:
    """Append ``node``, merging adjacent text the way mdast does."""
    if isinstance(node, Text) and parent.children and isinstance(parent.children[-1], Text):
        previous = parent.children[-1]
        parent.children[-1] = Text(value=previous.value + node.value)
        return
    parent.children.append(node)
