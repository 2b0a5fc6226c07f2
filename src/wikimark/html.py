"""HTML output for wikimark trees through markdown-it's renderer.

A transformed tree is written back into a markdown-it token stream and
rendered by the parser's renderer, so untouched markdown renders exactly as
``MarkdownIt("commonmark").render()`` would. The wiki additions map onto
tokens as follows:

    Link (not found)   -> link_open with class="not-found"
    Image              -> image, with width/height attributes when known
    FlowElement        -> flow_element_open / flow_element_close (block)
    TextElement        -> text_element_open / text_element_close (inline)
    WikiLink           -> wikilink (raw source text)

Renderers customize elements the way any markdown-it renderer is customized:

    class ComponentRenderer(WikiHtmlRenderer):
        def flow_element_open(self, tokens, idx, options, env):
            ...

    md = create_parser(renderer_cls=ComponentRenderer)
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping, Sequence

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.renderer import RendererHTML
from markdown_it.token import Token
from markdown_it.utils import OptionsDict

from .ast import (
    Blockquote,
    Break,
    Code,
    Delete,
    Element,
    Emphasis,
    FlowElement,
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
    TextElement,
    ThematicBreak,
    Unknown,
    WikiLink,
    is_block,
)

Attributes = dict[str, str | int | float]


class WikiHtmlRenderer(RendererHTML):
    """markdown-it HTML renderer that also knows the wiki token types."""

    def wikilink(
        self,
        tokens: Sequence[Token],
        idx: int,
        options: OptionsDict,
        env: MutableMapping,
    ) -> str:
        # Unreplaced wiki syntax stays visible as written
        return escapeHtml(tokens[idx].content)


def _attributes(values: dict[str, str | int | None]) -> Attributes:
    return {name: value for name, value in values.items() if value is not None}


def _pair(name: str, tag: str, block: bool, attrs: Attributes | None = None) -> tuple[Token, Token]:
    opener = Token(f"{name}_open", tag, 1, attrs=attrs or {}, block=block)
    closer = Token(f"{name}_close", tag, -1, block=block)
    return opener, closer


class TokenWriter:
    """Write a tree back into markdown-it block tokens.

    Inline runs inside block containers are grouped under ``inline`` tokens,
    as markdown-it's block parser produces them.
    """

    def __init__(self) -> None:
        self.containers: dict[str, Callable[[Parent], tuple[Token, Token]]] = {
            Paragraph.type: self._paragraph,
            Heading.type: lambda node: _pair("heading", f"h{node.depth}", True),
            Blockquote.type: lambda node: _pair("blockquote", "blockquote", True),
            ListBlock.type: self._list,
            ListItem.type: lambda node: _pair("list_item", "li", True),
            Strong.type: lambda node: _pair("strong", "strong", False),
            Emphasis.type: lambda node: _pair("em", "em", False),
            Delete.type: lambda node: _pair("s", "s", False),
            Mark.type: lambda node: _pair("mark", "mark", False),
            Link.type: self._link,
            FlowElement.type: lambda node: self._element(node, "flow_element", True),
            TextElement.type: lambda node: self._element(node, "text_element", False),
            Unknown.type: lambda node: _pair(node.token_type, node.tag, node.block, dict(node.attributes)),
        }
        self.leaves: dict[str, Callable[[Node], Token]] = {
            Text.type: lambda node: Token("text", "", 0, content=node.value),
            InlineCode.type: lambda node: Token("code_inline", "code", 0, content=node.value, markup="`"),
            Code.type: self._code,
            Html.type: self._html,
            Break.type: lambda node: Token("hardbreak", "br", 0),
            ThematicBreak.type: lambda node: Token("hr", "hr", 0, markup="---", block=True),
            Image.type: self._image,
            WikiLink.type: lambda node: Token("wikilink", "", 0, content=node.raw),
            Unknown.type: self._unknown_leaf,
        }

    def write(self, tree: Node) -> list[Token]:
        """Return the block token stream for ``tree``."""
        if isinstance(tree, Root):
            return self._flow(tree.children)
        return self._flow([tree])

    def _flow(self, nodes: Sequence[Node]) -> list[Token]:
        tokens: list[Token] = []
        inline: list[Token] = []

        def flush() -> None:
            if inline:
                tokens.append(Token("inline", "", 0, children=list(inline)))
                inline.clear()

        for node in nodes:
            if is_block(node):
                flush()
                tokens.extend(self._block(node))
            else:
                inline.extend(self._inline(node))
        flush()
        return tokens

    def _block(self, node: Node) -> list[Token]:
        if not self._is_container(node):
            return [self._leaf(node)]

        opener, closer = self.containers[node.type](node)
        if isinstance(node, (Paragraph, Heading)):
            body = self._inline_children(node)
            return [opener, Token("inline", "", 0, children=body), closer] if body else [opener, closer]
        return [opener, *self._flow(node.children), closer]

    def _inline(self, node: Node) -> list[Token]:
        if not self._is_container(node):
            return [self._leaf(node)]
        opener, closer = self.containers[node.type](node)
        return [opener, *self._inline_children(node), closer]

    def _inline_children(self, node: Parent) -> list[Token]:
        return [token for child in node.children for token in self._inline(child)]

    def _is_container(self, node: Node) -> bool:
        if isinstance(node, Unknown):
            return node.container
        return isinstance(node, Parent)

    def _leaf(self, node: Node) -> Token:
        factory = self.leaves.get(node.type)
        if factory is None:
            raise KeyError(f"No token mapping for node type {node.type!r}")
        return factory(node)

    def _paragraph(self, node: Paragraph) -> tuple[Token, Token]:
        opener, closer = _pair("paragraph", "p", True)
        opener.hidden = closer.hidden = node.tight
        return opener, closer

    def _list(self, node: ListBlock) -> tuple[Token, Token]:
        if not node.ordered:
            return _pair("bullet_list", "ul", True)
        start = node.start if node.start not in (None, 1) else None
        return _pair("ordered_list", "ol", True, _attributes({"start": start}))

    def _link(self, node: Link) -> tuple[Token, Token]:
        attrs = _attributes(
            {
                "href": node.url,
                "title": node.title,
                "class": " ".join(node.class_names) or None,
            }
        )
        return _pair("link", "a", False, attrs)

    def _element(self, node: Element, name: str, block: bool) -> tuple[Token, Token]:
        opener, closer = _pair(name, node.name, block, dict(node.attributes))
        opener.meta = {"name": node.name}
        return opener, closer

    def _code(self, node: Code) -> Token:
        if node.lang:
            return Token("fence", "code", 0, content=node.value, info=node.lang, markup="```", block=True)
        return Token("code_block", "code", 0, content=node.value, block=True)

    def _html(self, node: Html) -> Token:
        if node.block:
            return Token("html_block", "", 0, content=node.value, block=True)
        return Token("html_inline", "", 0, content=node.value)

    def _image(self, node: Image) -> Token:
        attrs = _attributes(
            {
                "src": node.url,
                "alt": "",
                "title": node.title,
                "width": node.width,
                "height": node.height,
            }
        )
        # The image rule fills "alt" from the children
        children = [Token("text", "", 0, content=node.alt)] if node.alt else None
        return Token("image", "img", 0, attrs=attrs, children=children, content=node.alt)

    def _unknown_leaf(self, node: Unknown) -> Token:
        if not node.tag:
            return Token("text", "", 0, content=node.value)
        return Token(
            node.token_type,
            node.tag,
            0,
            attrs=dict(node.attributes),
            content=node.value,
            block=node.block,
        )


def render_html(tree: Node, md: MarkdownIt | None = None) -> str:
    """Render a tree with the renderer of ``md``.

    Args:
        tree: Tree to render, usually a transformed Root.
        md: Parser whose renderer and options are used. Defaults to a
            CommonMark parser with WikiHtmlRenderer.

    Returns:
        HTML string.
    """
    md = md or MarkdownIt("commonmark", renderer_cls=WikiHtmlRenderer)
    return md.renderer.render(TokenWriter().write(tree), md.options, {})
