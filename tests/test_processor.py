"""End-to-end tests: parse, transform and render.

Coverage:
- src/wikimark/transform.py - pass order, standalone embeds, idempotence
- src/wikimark/processor.py - processor facade and one-shot helpers
- src/wikimark/html.py - HTML output
"""

from __future__ import annotations

import copy
from pathlib import Path

import pytest

from wikimark import WikiOptions, WikiProcessor, build_index, process_markdown, render_markdown
from wikimark.ast import (
    FlowElement,
    Image,
    Link,
    Mark,
    Paragraph,
    Strong,
    Text,
    TextElement,
    WikiLink,
    find_all,
    to_string,
)
from wikimark.embed import EmbedRenderContext
from wikimark.transform import standalone_embed


def _note_hook(context: EmbedRenderContext) -> FlowElement:
    return FlowElement(name="EmbedNote", attributes={"page": context.target.page})


# =============================================================================
# Links
# =============================================================================


class TestLinks:
    def test_internal_link_html(self):
        html = render_markdown("[[Internal link]]")

        assert '<a href="/internal-link" title="Internal link">Internal link</a>' in html

    def test_multiple_links(self):
        tree = process_markdown("[[Internal link]] and [[Other page|text]]")

        assert [link.url for link in find_all(tree, Link)] == ["/internal-link", "/other-page"]

    def test_link_inside_emphasis(self):
        tree = process_markdown("*see [[Page]]*")

        assert find_all(tree, Link)[0].url == "/page"

    def test_code_span_left_verbatim(self):
        tree = process_markdown("`[[Internal Link]]`")

        assert find_all(tree, Link) == []
        assert "<code>[[Internal Link]]</code>" in render_markdown("`[[Internal Link]]`")

    def test_vault_links(self, vault: Path):
        assert find_all(process_markdown("[[ProjectA]]", {"contentRoot": str(vault)}), Link)[0].url == (
            "/notes/ProjectA"
        )

    def test_vault_url_prefix(self, vault: Path):
        options = WikiOptions(content_root=vault, content_root_url_prefix="/docs")

        assert find_all(process_markdown("[[ProjectA]]", options), Link)[0].url == "/docs/notes/ProjectA"

    def test_wiki_link_path_transform(self, vault: Path):
        options = WikiOptions(
            content_root=vault,
            wiki_link_path_transform=lambda context: (
                context.resolved_url.replace("/notes/", "/docs/") if context.resolved_url else None
            ),
        )

        assert find_all(process_markdown("[[ProjectA]]", options), Link)[0].url == "/docs/ProjectA"

    def test_base_url(self):
        html = render_markdown("[[Internal link]]", {"baseUrl": "/foo"})

        assert '<a href="/foo/internal-link" title="Internal link">Internal link</a>' in html

    def test_same_document_heading(self):
        assert '<a href="#heading" title="Heading">Heading</a>' in render_markdown("[[#Heading]]")

    def test_permalink(self):
        html = render_markdown(
            "Go to [[myfile]]",
            {"markdownFiles": [{"file": "myfile.md", "permalink": "custom-link"}]},
        )

        assert '<a href="/custom-link" title="myfile">myfile</a>' in html

    def test_not_found_class(self):
        html = render_markdown("[[Internal link]]", {"markdownFiles": []})

        assert '<a href="/internal-link" title="Internal link" class="not-found">Internal link</a>' in html

    def test_unicode_and_symbols(self):
        html = render_markdown("[[Productivité]] [[A & B]]")

        assert 'href="/productivite"' in html
        assert '<a href="/a-and-b" title="A &amp; B">A &amp; B</a>' in html


# =============================================================================
# Embeds
# =============================================================================


class TestEmbeds:
    def test_standalone_image(self, vault_processor: WikiProcessor):
        tree = vault_processor.run("![[image.png]]")
        images = find_all(tree, Image)

        assert images == [Image(url="/image.png", alt="", width=4, height=3)]
        assert isinstance(tree.children[0], FlowElement)
        assert tree.children[0].name == "div"

    def test_image_html(self, vault_processor: WikiProcessor):
        html = vault_processor.render("![[image.png|Custom alt text]]")

        assert '<div><img src="/image.png" alt="Custom alt text" width="4" height="3" /></div>' in html

    def test_inline_image_keeps_paragraph(self, vault_processor: WikiProcessor):
        tree = vault_processor.run("Look ![[image.png|Inline alt]] here")

        assert isinstance(tree.children[0], Paragraph)
        assert find_all(tree, Image)[0].alt == "Inline alt"

    def test_video(self, vault_processor: WikiProcessor):
        tree = vault_processor.run("![[clip.mp4]]")
        video = tree.children[0]

        assert isinstance(video, FlowElement)
        assert video.name == "video"
        assert video.attributes == {"src": "/clip.mp4", "controls": "true"}

    def test_embedding_path_transform(self, vault: Path):
        options = WikiOptions(
            content_root=vault,
            embedding_path_transform=lambda context: (
                context.resolved_url.replace("/assets/images/", "/static/img/")
                if context.kind == "image" and context.resolved_url
                else None
            ),
        )

        assert find_all(process_markdown("![[photo.png]]", options), Image)[0].url == "/static/img/photo.png"

    def test_note_hook(self, vault: Path):
        tree = process_markdown("![[ProjectA]]", {"contentRoot": vault, "embedRendering": {"note": _note_hook}})
        embeds = [node for node in find_all(tree, FlowElement) if node.name == "EmbedNote"]

        assert len(embeds) == 1
        assert embeds[0].attributes == {"page": "ProjectA"}

    def test_inline_note_hook(self, vault: Path):
        tree = process_markdown(
            "hello ![[ProjectA]] world",
            {"contentRoot": vault, "embedRendering": {"note": _note_hook}},
        )

        assert len([node for node in find_all(tree, FlowElement) if node.name == "EmbedNote"]) == 1
        assert isinstance(tree.children[0], Paragraph)

    def test_standalone_text_fragment_is_wrapped(self, vault: Path):
        tree = process_markdown(
            "![[ProjectA]]",
            {"contentRoot": vault, "embedRendering": {"note": lambda context: Text(value="Note embed")}},
        )
        divs = [node for node in find_all(tree, FlowElement) if node.name == "div"]

        assert len(divs) == 1
        assert Text(value="Note embed") in divs[0].children
        assert not any(isinstance(child, Paragraph) for child in tree.children)

    def test_standalone_not_found_is_wrapped(self, vault: Path):
        tree = process_markdown(
            "![[Missing]]",
            {"contentRoot": vault, "embedRendering": {"notFound": lambda context: Text(value="Missing embed")}},
        )
        divs = [node for node in find_all(tree, FlowElement) if node.name == "div"]

        assert len(divs) == 1
        assert Text(value="Missing embed") in divs[0].children
        assert not any(isinstance(child, Paragraph) for child in tree.children)

    def test_inline_note_is_not_wrapped(self, vault: Path):
        tree = process_markdown(
            "hello ![[ProjectA]] world",
            {"contentRoot": vault, "embedRendering": {"note": lambda context: Text(value="Inline note")}},
        )

        assert [node for node in find_all(tree, FlowElement) if node.name == "div"] == []
        assert isinstance(tree.children[0], Paragraph)

    def test_note_hook_called_once(self, vault: Path):
        calls: list[str] = []

        def note(context: EmbedRenderContext) -> None:
            calls.append(context.target.page)
            return None

        tree = process_markdown("![[ProjectA]]", {"contentRoot": vault, "embedRendering": {"note": note}})

        assert calls == ["ProjectA"]
        assert find_all(tree, WikiLink)[0].raw == "![[ProjectA]]"

    def test_unsupported_embed_left_raw(self, vault_processor: WikiProcessor):
        html = vault_processor.render("![[paper.pdf]]")

        assert "<p>![[paper.pdf]]</p>" in html

    def test_embed_inside_code_block_ignored(self):
        html = render_markdown("```\n![[My Note]]\n```", {"markdownFiles": []})

        assert "<pre><code>![[My Note]]\n</code></pre>" in html

    def test_manifest_note_content_inlined(self):
        html = render_markdown(
            "![[My Note]]",
            {"markdownFiles": [{"file": "My Note.md", "content": "This is a note with **bold** text."}]},
        )

        assert '<div class="embed-note">\n<p>This is a note with <strong>bold</strong> text.</p>\n</div>\n' in html

    def test_manifest_note_not_found(self):
        html = render_markdown("![[Another Note]]", {"markdownFiles": []})

        assert '<div><span class="embed-not-found">Embed not found: Another Note</span></div>' in html

    def test_recursive_embed_stops(self):
        options = {"markdownFiles": [{"file": "Loop.md", "content": "![[Loop]]"}]}
        processor = WikiProcessor(options)
        tree = processor.run("![[Loop]]")

        assert find_all(tree, WikiLink) == []
        assert len([node for node in find_all(tree, FlowElement) if node.name == "div"]) == 1
        assert render_markdown("![[Loop]]", options) == '<div class="embed-note">\n<p>![[Loop]]</p>\n</div>\n'

    def test_mutual_embeds_stop(self):
        options = {
            "markdownFiles": [
                {"file": "A.md", "content": "A says ![[B]]"},
                {"file": "B.md", "content": "![[A]]"},
            ]
        }
        processor = WikiProcessor(options)
        tree = processor.run("![[A]]")
        snapshot = copy.deepcopy(tree)

        processor.transform(tree)

        assert tree == snapshot
        assert find_all(tree, WikiLink) == []
        assert "A says" in to_string(tree)

    def test_inline_manifest_note_stays_inline(self):
        tree = process_markdown(
            "hello ![[Note]] world",
            {"markdownFiles": [{"file": "Note.md", "content": "Body with **bold**"}]},
        )
        paragraph = tree.children[0]
        spans = [node for node in paragraph.children if isinstance(node, TextElement)]

        assert isinstance(paragraph, Paragraph)
        assert not any(isinstance(child, FlowElement) for child in paragraph.children)
        assert spans[0].name == "span"
        assert spans[0].attributes == {"class": "embed-note"}
        assert to_string(spans[0]) == "Body with bold"

    def test_inline_manifest_note_html(self):
        html = render_markdown("hello ![[Note]] world", {"markdownFiles": [{"file": "Note.md", "content": "Body"}]})

        assert html == '<p>hello <span class="embed-note">Body</span> world</p>\n'

    def test_inline_block_note_left_as_written(self):
        html = render_markdown(
            "hello ![[Note]] world",
            {"markdownFiles": [{"file": "Note.md", "content": "# Title\n\nBody"}]},
        )

        assert html == "<p>hello ![[Note]] world</p>\n"

    def test_standalone_embed_detection(self):
        embed = WikiLink(value="x.png", embed=True)

        assert standalone_embed(Paragraph(children=[Text(value="  "), embed])) is embed
        assert standalone_embed(Paragraph(children=[Text(value="a"), embed])) is None
        assert standalone_embed(Paragraph(children=[WikiLink(value="x")])) is None


# =============================================================================
# Highlights and pass behavior
# =============================================================================


class TestMarks:
    def test_highlight(self):
        tree = process_markdown("==highlight text==")
        marks = find_all(tree, TextElement)

        assert len(marks) == 1
        assert marks[0].name == "mark"
        assert to_string(marks[0]) == "highlight text"
        assert find_all(tree, Mark) == []

    def test_nested_formatting(self):
        tree = process_markdown("==**highlight** text==")
        mark = find_all(tree, TextElement)[0]

        assert to_string(mark) == "highlight text"
        assert any(isinstance(child, Strong) for child in mark.children)

    def test_html(self):
        assert "<p>a <mark>b</mark> c</p>" in render_markdown("a ==b== c")

    def test_not_in_code(self):
        assert find_all(process_markdown("`==x==`"), TextElement) == []


class TestProcessor:
    def test_transform_is_idempotent(self, vault: Path):
        processor = WikiProcessor({"contentRoot": vault})
        text = (
            "# Title\n\n[[ProjectA]] and ==mark==\n\n![[image.png]]\n\n"
            "> [!NOTE] Callout\n> with [[Missing]]\n"
        )
        tree = processor.run(text)
        snapshot = copy.deepcopy(tree)

        processor.transform(tree)

        assert tree == snapshot

    def test_callout_body_links_resolved(self):
        tree = process_markdown("> [!NOTE] Title\n> See [[Page]]")

        assert find_all(tree, Link)[0].url == "/page"

    def test_directive_text_preserved(self, vault: Path):
        text = ":::tip\nhello\n:::"

        assert text in render_markdown(text, {"contentRoot": vault})

    def test_injected_index(self):
        processor = WikiProcessor({"markdownFiles": []}, index=build_index(["docs/Guide.md"]))
        link = find_all(processor.run("[[Guide]]"), Link)[0]

        assert link.class_names == []

    def test_custom_alias_divider(self):
        link = find_all(process_markdown("[[Page:Shown]]", {"aliasDivider": ":"}), Link)[0]

        assert to_string(link) == "Shown"

    def test_plain_markdown_matches_markdown_it(self):
        from markdown_it import MarkdownIt

        text = "# Title\n\nSome *text* with `code`.\n\n- one\n- two\n\n---\n"

        assert render_markdown(text) == MarkdownIt("commonmark").render(text)

    def test_table_passthrough(self):
        html = render_markdown("| a |\n| - |\n| b |\n")

        assert "<table>" in html
        assert "<td>b</td>" in html

    @pytest.mark.parametrize("options", [None, {}, WikiOptions()])
    def test_option_forms(self, options):
        assert find_all(process_markdown("[[Page]]", options), Link)[0].url == "/page"
