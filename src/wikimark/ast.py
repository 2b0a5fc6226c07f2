"""Syntax tree for parsed Markdown documents.

The tree is a closed set of dataclass variants. Every node carries a ``type``
discriminator, container nodes own an ordered ``children`` list, and nothing
the core does not recognize is dropped: such tokens become ``Unknown`` nodes
that keep enough information to be serialized again.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class Node:
    """Base class for all tree nodes."""

    type: ClassVar[str] = "node"


@dataclass
class Parent(Node):
    """A node that owns an ordered sequence of children."""

    children: list[Node] = field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Block containers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class Root(Parent):
    type: ClassVar[str] = "root"

    front_matter: str | None = None


@dataclass
class Paragraph(Parent):
    type: ClassVar[str] = "paragraph"

    tight: bool = False  # paragraph of a tight list item, rendered without <p>


@dataclass
class Heading(Parent):
    type: ClassVar[str] = "heading"

    depth: int = 1


@dataclass
class Blockquote(Parent):
    type: ClassVar[str] = "blockquote"


@dataclass
class ListBlock(Parent):
    type: ClassVar[str] = "list"

    ordered: bool = False
    start: int | None = None


@dataclass
class ListItem(Parent):
    type: ClassVar[str] = "listItem"


# ─────────────────────────────────────────────────────────────────────────────
# Inline containers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class Strong(Parent):
    type: ClassVar[str] = "strong"


@dataclass
class Emphasis(Parent):
    type: ClassVar[str] = "emphasis"


@dataclass
class Delete(Parent):
    type: ClassVar[str] = "delete"


@dataclass
class Mark(Parent):
    """Intermediate ``==highlight==`` span, rewritten by the mark transform."""

    type: ClassVar[str] = "mark"


@dataclass
class Link(Parent):
    type: ClassVar[str] = "link"

    url: str = ""
    title: str | None = None
    class_names: list[str] = field(default_factory=list)


@dataclass
class Element(Parent):
    """Named element with ordered string attributes (JSX-like)."""

    name: str = "div"
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class FlowElement(Element):
    type: ClassVar[str] = "flowElement"


@dataclass
class TextElement(Element):
    type: ClassVar[str] = "textElement"


@dataclass
class Unknown(Parent):
    """Opaque passthrough for tokens without a dedicated variant."""

    type: ClassVar[str] = "unknown"

    token_type: str = ""
    tag: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    block: bool = False
    container: bool = False  # built from an _open/_close pair
    value: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Leaves
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class Text(Node):
    type: ClassVar[str] = "text"

    value: str = ""


@dataclass
class InlineCode(Node):
    type: ClassVar[str] = "inlineCode"

    value: str = ""


@dataclass
class Code(Node):
    type: ClassVar[str] = "code"

    value: str = ""
    lang: str | None = None


@dataclass
class Html(Node):
    type: ClassVar[str] = "html"

    value: str = ""
    block: bool = False


@dataclass
class Break(Node):
    type: ClassVar[str] = "break"


@dataclass
class ThematicBreak(Node):
    type: ClassVar[str] = "thematicBreak"


@dataclass
class Image(Node):
    type: ClassVar[str] = "image"

    url: str = ""
    alt: str = ""
    title: str | None = None
    width: int | None = None
    height: int | None = None


@dataclass
class WikiLink(Node):
    """Raw ``[[target|alias]]`` or ``![[target]]`` token."""

    type: ClassVar[str] = "wikiLink"

    value: str = ""
    alias: str = ""
    embed: bool = False
    raw: str = ""


BLOCK_TYPES: tuple[type[Node], ...] = (
    Paragraph,
    Heading,
    Blockquote,
    ListBlock,
    ListItem,
    Code,
    ThematicBreak,
    FlowElement,
)


def is_block(node: Node) -> bool:
    """Return True if the node is a block-level construct."""
    if isinstance(node, BLOCK_TYPES):
        return True
    if isinstance(node, (Html, Unknown)):
        return node.block
    return False


def to_string(node: Node) -> str:
    """Flatten a node to its plain text content.

    Image alt text and raw HTML are included, breaks contribute nothing.
    """
    if isinstance(node, (Text, InlineCode, Code, Html, WikiLink)):
        return node.value
    if isinstance(node, Image):
        return node.alt
    if isinstance(node, Unknown) and not node.children:
        return node.value
    if isinstance(node, Parent):
        return "".join(to_string(child) for child in node.children)
    return ""


# ─────────────────────────────────────────────────────────────────────────────
# Traversal
# ─────────────────────────────────────────────────────────────────────────────


class _Skip:
    def __repr__(self) -> str:
        return "SKIP"


SKIP = _Skip()

VisitResult = Node | _Skip | None
Visitor = Callable[[Node, int, Parent], VisitResult]


def visit(
    tree: Parent,
    node_types: type[Node] | tuple[type[Node], ...],
    visitor: Visitor,
) -> None:
    """Walk ``tree`` depth-first and call ``visitor`` on matching nodes.

    The visitor receives ``(node, index, parent)`` and may return:
        - None: continue into the node's children.
        - SKIP: do not descend into the node.
        - a Node: splice it into ``parent.children[index]`` in place of the
          visited node, then continue into the replacement's children.

    Exactly one node is swapped per replacement, so sibling indices stay
    valid while the parent is being iterated. The tree root itself is never
    passed to the visitor.
    """
    index = 0
    while index < len(tree.children):
        node = tree.children[index]
        descend = True

        if isinstance(node, node_types):
            result = visitor(node, index, tree)
            if result is SKIP:
                descend = False
            elif isinstance(result, Node):
                tree.children[index] = result
                node = result

        if descend and isinstance(node, Parent):
            visit(node, node_types, visitor)

        index += 1


def find_all(
    tree: Parent,
    node_types: type[Node] | tuple[type[Node], ...],
) -> list[Node]:
    """Return every node of the given types below ``tree``, in document order."""
    found: list[Node] = []

    def collect(node: Node, index: int, parent: Parent) -> None:
        found.append(node)

    visit(tree, node_types, collect)
    return found
