"""Tests for the node model and tree traversal."""

from __future__ import annotations

from markdown_it import MarkdownIt

from wikimark.ast import (
    SKIP,
    Break,
    Emphasis,
    FlowElement,
    Html,
    Image,
    Link,
    Paragraph,
    Root,
    Strong,
    Text,
    TextElement,
    Unknown,
    WikiLink,
    find_all,
    is_block,
    to_string,
    visit,
)
from wikimark.html import TokenWriter, WikiHtmlRenderer, render_html


def _tree() -> Root:
    return Root(
        children=[
            Paragraph(children=[Text(value="a "), Strong(children=[Text(value="b")])]),
            Paragraph(children=[Emphasis(children=[Text(value="c")])]),
        ]
    )


class TestVisit:
    def test_document_order(self):
        seen = []
        visit(_tree(), Text, lambda node, index, parent: seen.append(node.value))

        assert seen == ["a ", "b", "c"]

    def test_skip_does_not_descend(self):
        seen = []

        def visitor(node, index, parent):
            seen.append(node.type)
            return SKIP if isinstance(node, Strong) else None

        visit(_tree(), (Strong, Text), visitor)

        assert seen == ["text", "strong", "text"]

    def test_replacement_is_spliced_and_visited(self):
        tree = _tree()
        seen = []

        def visitor(node, index, parent):
            if isinstance(node, Strong):
                return TextElement(name="mark", children=node.children)
            seen.append(node.value)
            return None

        visit(tree, (Strong, Text), visitor)

        assert isinstance(tree.children[0].children[1], TextElement)
        assert seen == ["a ", "b", "c"]

    def test_find_all(self):
        assert [p.children[0] for p in find_all(_tree(), Paragraph)][0] == Text(value="a ")


class TestHelpers:
    def test_to_string(self):
        node = Paragraph(children=[Text(value="a"), Break(), Image(alt="img"), Html(value="<b>")])

        assert to_string(node) == "aimg<b>"

    def test_is_block(self):
        assert is_block(Paragraph())
        assert is_block(FlowElement())
        assert not is_block(TextElement())
        assert is_block(Html(block=True))
        assert not is_block(Unknown(block=False))


class TestRenderHtml:
    """Rendering trees through markdown-it's renderer."""

    def test_attribute_values_escaped(self):
        link = Link(url="/a", title='say "hi" & <bye>', children=[Text(value="x")])

        assert render_html(Paragraph(children=[link])) == (
            '<p><a href="/a" title="say &quot;hi&quot; &amp; &lt;bye&gt;">x</a></p>\n'
        )

    def test_not_found_class(self):
        link = Link(url="/a", class_names=["not-found"], children=[Text(value="x")])

        assert render_html(Paragraph(children=[link])) == '<p><a href="/a" class="not-found">x</a></p>\n'

    def test_elements(self):
        video = FlowElement(name="video", attributes={"src": "/a.mp4", "controls": "true"})
        mark = Paragraph(children=[TextElement(name="mark", children=[Text(value="x")])])

        assert render_html(video) == '<video src="/a.mp4" controls="true"></video>\n'
        assert render_html(mark) == "<p><mark>x</mark></p>\n"

    def test_image_dimensions(self):
        image = Image(url="/i.png", alt="A", width=4, height=3)

        assert render_html(Paragraph(children=[image])) == (
            '<p><img src="/i.png" alt="A" width="4" height="3" /></p>\n'
        )

    def test_raw_wikilink(self):
        embed = WikiLink(value="x.pdf", embed=True, raw="![[x.pdf]]")

        assert render_html(Paragraph(children=[embed])) == "<p>![[x.pdf]]</p>\n"

    def test_block_children_of_element(self):
        note = FlowElement(
            name="div",
            attributes={"class": "embed-note"},
            children=[Paragraph(children=[Text(value="b")])],
        )

        assert render_html(Root(children=[note])) == '<div class="embed-note">\n<p>b</p>\n</div>\n'

    def test_inline_runs_are_grouped(self):
        tokens = TokenWriter().write(FlowElement(children=[Text(value="a"), Strong(children=[Text(value="b")])]))

        assert [token.type for token in tokens] == ["flow_element_open", "inline", "flow_element_close"]
        assert [token.type for token in tokens[1].children] == ["text", "strong_open", "text", "strong_close"]

    def test_custom_renderer(self):
        class ComponentRenderer(WikiHtmlRenderer):
            def flow_element_open(self, tokens, idx, options, env):
                return f"[{tokens[idx].meta['name']}]"

            def flow_element_close(self, tokens, idx, options, env):
                return f"[/{tokens[idx].tag}]"

        md = MarkdownIt("commonmark", renderer_cls=ComponentRenderer)

        assert render_html(Root(children=[FlowElement(name="Callout")]), md) == "[Callout][/Callout]"
