"""Wiki-link target parsing.

Splits the text between the double brackets into page, anchor and anchor
kind. Alias separation and embed detection happen in the tokenizer, so the
value handed to ``parse_target`` is only the target half of ``[[target|alias]]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AnchorKind = Literal["none", "heading", "block"]

HEADING_DELIMITER = "#"
BLOCK_DELIMITER = "^"


@dataclass(frozen=True)
class ParsedTarget:
    """Components of a wiki-link target.

    ``value`` is the trimmed raw target. Either ``page`` or ``anchor`` is
    non-empty; a page-less target links inside the current document.
    """

    value: str
    page: str
    anchor: str = ""
    anchor_kind: AnchorKind = "none"
    alias: str | None = None

    @property
    def has_anchor(self) -> bool:
        """True if the target names a heading or block (an empty "Page#" does not)."""
        return bool(self.anchor)


def parse_target(value: str, alias: str | None = None) -> ParsedTarget | None:
    """Parse a raw wiki-link target.

    The first ``#`` or ``^`` (whichever comes first) starts the anchor.

    Args:
        value: Target text, without brackets and alias.
        alias: Display alias, if the link had one.

    Returns:
        ParsedTarget, or None when the target is empty or consists of a bare
        anchor delimiter. "Page#" keeps the heading kind with an empty anchor.
    """
    value = value.strip()
    if not value:
        return None

    alias = alias.strip() if alias else None

    heading_index = value.find(HEADING_DELIMITER)
    block_index = value.find(BLOCK_DELIMITER)

    if heading_index == -1 and block_index == -1:
        return ParsedTarget(value=value, page=value, alias=alias or None)

    use_heading = heading_index != -1 and (block_index == -1 or heading_index < block_index)
    index = heading_index if use_heading else block_index
    anchor_kind: AnchorKind = "heading" if use_heading else "block"

    page = value[:index].strip()
    anchor = value[index + 1 :].strip()

    if not page and not anchor:
        return None

    return ParsedTarget(
        value=value,
        page=page,
        anchor=anchor,
        anchor_kind=anchor_kind,
        alias=alias or None,
    )
