"""``==highlight==`` inline rule for markdown-it-py.

Works like markdown-it's own ``~~strikethrough~~`` rule: ``tokenize`` pushes
every ``==`` pair as a text token and records it as a delimiter, the
``balance_pairs`` rule matches openers with closers, and ``post_process``
turns matched pairs into ``mark_open`` / ``mark_close`` tokens.

    md = MarkdownIt().use(mark_plugin)
    md.render("a ==b== c")  # '<p>a <mark>b</mark> c</p>\\n'
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.rules_inline.state_inline import Delimiter

MARKER = "="
MARKUP = MARKER * 2


def tokenize(state: StateInline, silent: bool) -> bool:
    """Push each ``==`` pair as a text token and register it as a delimiter."""
    start = state.pos
    if silent or state.src[start] != MARKER:
        return False

    scanned = state.scanDelims(start, True)
    length = scanned.length
    if length < 2:
        return False

    if length % 2:
        token = state.push("text", "", 0)
        token.content = MARKER
        length -= 1

    for _ in range(0, length, 2):
        token = state.push("text", "", 0)
        token.content = MARKUP
        state.delimiters.append(
            Delimiter(
                marker=ord(MARKER),
                length=0,  # no "rule of 3" for pairs
                token=len(state.tokens) - 1,
                end=-1,
                open=scanned.can_open,
                close=scanned.can_close,
            )
        )

    state.pos += scanned.length
    return True


def _replace_delimiters(state: StateInline, delimiters: list[Delimiter]) -> None:
    lone_markers = []

    for delimiter in delimiters:
        if delimiter.marker != ord(MARKER) or delimiter.end == -1:
            continue

        closer = delimiters[delimiter.end]

        token = state.tokens[delimiter.token]
        token.type = "mark_open"
        token.tag = "mark"
        token.nesting = 1
        token.markup = MARKUP
        token.content = ""

        token = state.tokens[closer.token]
        token.type = "mark_close"
        token.tag = "mark"
        token.nesting = -1
        token.markup = MARKUP
        token.content = ""

        previous = state.tokens[closer.token - 1]
        if previous.type == "text" and previous.content == MARKER:
            lone_markers.append(closer.token - 1)

    # An odd run "=====" is split "=" + "==" + "==": move the single marker
    # behind the closing tags it precedes
    while lone_markers:
        i = lone_markers.pop()
        j = i + 1
        while j < len(state.tokens) and state.tokens[j].type == "mark_close":
            j += 1
        j -= 1

        if i != j:
            state.tokens[i], state.tokens[j] = state.tokens[j], state.tokens[i]


def post_process(state: StateInline) -> None:
    """Replace matched ``==`` delimiters with mark tokens."""
    _replace_delimiters(state, state.delimiters)

    for meta in state.tokens_meta:
        if meta and "delimiters" in meta:
            _replace_delimiters(state, meta["delimiters"])


def mark_plugin(md: MarkdownIt) -> None:
    """Register the ``==highlight==`` rule with a MarkdownIt instance."""
    md.inline.ruler.before("emphasis", "mark", tokenize)
    md.inline.ruler2.before("emphasis", "mark", post_process)
