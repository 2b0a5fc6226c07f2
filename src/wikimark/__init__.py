"""wikimark - Obsidian-style wiki syntax for markdown-it-py.

Adds ``[[links]]``, ``![[embeds]]``, ``==highlights==`` and ``> [!NOTE]``
callouts on top of a CommonMark parser, resolving link targets against a
directory of notes or an explicit manifest.
"""

from ._logging import configure_logging
from .config import ConfigurationError, load_options
from .models import CalloutOptions, EmbedRenderingOptions, MarkdownFile, WikiOptions
from .parser import ParseError
from .processor import WikiProcessor, process_markdown, render_markdown
from .resolver import ContentIndex, ContentResolver, build_index, build_index_from_root

__version__ = "0.1.0"

__all__ = [
    "CalloutOptions",
    "ConfigurationError",
    "ContentIndex",
    "ContentResolver",
    "EmbedRenderingOptions",
    "MarkdownFile",
    "ParseError",
    "WikiOptions",
    "WikiProcessor",
    "build_index",
    "build_index_from_root",
    "configure_logging",
    "load_options",
    "process_markdown",
    "render_markdown",
]
