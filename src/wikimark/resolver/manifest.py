"""Build a ``markdownFiles`` manifest from a directory of notes."""

from __future__ import annotations

import logging
from pathlib import Path

import frontmatter

from ..models import MarkdownFile

log = logging.getLogger(__name__)

NOTE_SUFFIXES = (".md", ".mdx")


def load_markdown_files(root: Path) -> list[MarkdownFile]:
    """Read every note below ``root`` into manifest entries.

    The ``permalink`` front matter key becomes the entry permalink and the
    body (front matter removed) becomes its content. Files that fail to
    parse are skipped.

    Args:
        root: Directory to scan.

    Returns:
        Manifest entries with paths relative to ``root``, sorted by path.
    """
    if not root.is_dir():
        return []

    entries: list[MarkdownFile] = []
    for note in sorted(root.rglob("*")):
        if note.suffix.lower() not in NOTE_SUFFIXES or not note.is_file():
            continue

        try:
            post = frontmatter.load(note)
        except Exception as e:
            log.debug("Skipping %s during manifest build: %s", note, e)
            continue

        permalink = post.metadata.get("permalink")
        entries.append(
            MarkdownFile(
                file=note.relative_to(root).as_posix(),
                permalink=str(permalink) if permalink else None,
                content=post.content,
            )
        )

    return entries
