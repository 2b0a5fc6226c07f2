"""Tree rewrite pass applying links, embeds, callouts and highlights.

One traversal runs per node type, in this order:

1. paragraphs whose only content is an embed are replaced by the embed
2. remaining wiki links become links or inline embeds
3. blockquotes with a callout marker become callout elements
4. mark spans become ``mark`` elements

Rewritten nodes are never matched again, so running the pass twice on the
same tree changes nothing the second time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .ast import (
    SKIP,
    Blockquote,
    FlowElement,
    Mark,
    Node,
    Paragraph,
    Parent,
    Root,
    Text,
    TextElement,
    VisitResult,
    WikiLink,
    is_block,
    visit,
)
from .callout import build_callout
from .embed import EmbedRenderContext, render_embed
from .links import create_link, get_wiki_link_target
from .mark import mark_to_element
from .models import WikiOptions
from .resolver import ContentResolver

log = logging.getLogger(__name__)

EMBED_NOTE_CLASS = "embed-note"


def standalone_embed(paragraph: Paragraph) -> WikiLink | None:
    """Return the embed if it is the only non-blank content of the paragraph."""
    content = [
        child
        for child in paragraph.children
        if not (isinstance(child, Text) and not child.value.strip())
    ]
    if len(content) == 1 and isinstance(content[0], WikiLink) and content[0].embed:
        return content[0]
    return None


class WikiTransformer:
    """Apply the wiki rewrites to trees for one processing context.

    Args:
        options: Processing options.
        resolver: Resolution context (built from ``options`` if omitted).
        parse: Parser used to inline manifest note content. Without it, notes
            are only embedded through an ``embedRendering.note`` hook.
    """

    def __init__(
        self,
        options: WikiOptions | None = None,
        resolver: ContentResolver | None = None,
        parse: Callable[[str], Root] | None = None,
    ) -> None:
        self.options = options or WikiOptions()
        self.resolver = resolver or ContentResolver.from_options(self.options)
        self.parse = parse
        self._embedding: list[str] = []

    def __call__(self, tree: Root) -> Root:
        return self.transform(tree)

    def transform(self, tree: Root) -> Root:
        """Rewrite ``tree`` in place and return it."""
        handled: set[int] = set()

        def on_paragraph(node: Node, index: int, parent: Parent) -> VisitResult:
            embed = standalone_embed(node)
            if embed is None:
                return None
            handled.add(id(embed))

            fragment = self._embed(embed, standalone=True)
            if fragment is None:
                return None

            if not is_block(fragment):
                fragment = FlowElement(name="div", children=[fragment])
            parent.children[index] = fragment
            return SKIP

        def on_wikilink(node: Node, index: int, parent: Parent) -> VisitResult:
            if node.embed:
                if id(node) in handled:
                    return None
                return self._embed(node, standalone=False)
            return create_link(node, self.resolver, self.options.wiki_link_path_transform)

        def on_blockquote(node: Node, index: int, parent: Parent) -> VisitResult:
            return build_callout(node, self.options.callout)

        def on_mark(node: Node, index: int, parent: Parent) -> VisitResult:
            return mark_to_element(node)

        visit(tree, Paragraph, on_paragraph)
        visit(tree, WikiLink, on_wikilink)
        visit(tree, Blockquote, on_blockquote)
        visit(tree, Mark, on_mark)
        return tree

    def _embed(self, node: WikiLink, standalone: bool) -> Node | None:
        target = get_wiki_link_target(node)
        if target is None:
            return None
        return render_embed(
            target,
            self.resolver,
            self.options.embed_rendering,
            self.options.embedding_path_transform,
            note_renderer=lambda context: self._render_note(context, standalone),
        )

    def _render_note(self, context: EmbedRenderContext, standalone: bool) -> Node | None:
        """Inline a note whose manifest entry carries content.

        A standalone embed becomes a ``div.embed-note`` holding the note's
        blocks. An inline embed becomes a ``span.embed-note`` when the note is
        a single paragraph and is left as written otherwise.
        """
        if self.parse is None or context.resolved_path is None:
            return None

        entry = self.resolver.entry(context.resolved_path)
        if entry is None or not entry.content:
            return None

        if context.resolved_path in self._embedding:
            log.debug("Skipping recursive embed of %s", context.resolved_path)
            return None

        self._embedding.append(context.resolved_path)
        try:
            note = self.transform(self.parse(entry.content))
        finally:
            self._embedding.pop()

        # Wiki syntax the note left unreplaced is plain text from here on
        visit(note, WikiLink, lambda node, index, parent: Text(value=node.raw))

        if standalone:
            return FlowElement(
                name="div",
                attributes={"class": EMBED_NOTE_CLASS},
                children=note.children,
            )

        if len(note.children) == 1 and isinstance(note.children[0], Paragraph):
            return TextElement(
                name="span",
                attributes={"class": EMBED_NOTE_CLASS},
                children=note.children[0].children,
            )

        log.debug("Note %s has block content, inline embed left as written", context.resolved_path)
        return None
