"""Parse, transform and render documents with wiki syntax."""

from __future__ import annotations

from typing import Any

from .ast import Root
from .html import WikiHtmlRenderer, render_html
from .models import WikiOptions
from .parser import TreeBuilder, create_parser
from .resolver import ContentIndex, ContentResolver
from .transform import WikiTransformer


class WikiProcessor:
    """Processing context holding the parser, the resolver and the options.

    The content index is built once, when the processor is created, unless
    one is passed in through ``index``.

    Example:
        processor = WikiProcessor({"contentRoot": "vault"})
        html = processor.render("See [[ProjectA]]")
    """

    def __init__(
        self,
        options: WikiOptions | dict[str, Any] | None = None,
        index: ContentIndex | None = None,
        renderer_cls: type[WikiHtmlRenderer] = WikiHtmlRenderer,
    ) -> None:
        if options is None:
            options = WikiOptions()
        elif isinstance(options, dict):
            options = WikiOptions.model_validate(options)

        self.options = options
        self.md = create_parser(options.alias_divider, renderer_cls=renderer_cls)
        self.builder = TreeBuilder.default()
        self.resolver = ContentResolver.from_options(options, index=index)
        self.transformer = WikiTransformer(options, self.resolver, parse=self.parse)

    def parse(self, text: str) -> Root:
        """Parse markdown into an untransformed tree."""
        return self.builder.build(self.md.parse(text))

    def transform(self, tree: Root) -> Root:
        """Apply the wiki rewrites to ``tree`` in place."""
        return self.transformer.transform(tree)

    def run(self, text: str) -> Root:
        """Parse and transform markdown."""
        return self.transform(self.parse(text))

    def render(self, text: str) -> str:
        """Parse, transform and render markdown to HTML."""
        return render_html(self.run(text), self.md)


def process_markdown(text: str, options: WikiOptions | dict[str, Any] | None = None) -> Root:
    """Parse and transform ``text`` with a one-off processor."""
    return WikiProcessor(options).run(text)


def render_markdown(text: str, options: WikiOptions | dict[str, Any] | None = None) -> str:
    """Render ``text`` to HTML with a one-off processor."""
    return WikiProcessor(options).render(text)
