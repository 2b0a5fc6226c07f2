"""markdown-it-py inline rule for ``[[wiki links]]`` and ``![[embeds]]``.

The scanner is a finite-state machine: each input character is classified
into a ``CharClass`` and the next state is looked up in ``TRANSITIONS``.
Any (state, class) pair missing from the table rejects the match, in which
case markdown-it falls back to its own rules and the text stays literal.

Grammar:
    ["!"] "[[" target [divider alias] "]]"

``target`` and ``alias`` need at least one non-blank character, and neither
may contain a line ending. The rule runs at the inline level, so code spans
and code blocks never reach it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline

TOKEN_TYPE = "wikilink"
DEFAULT_ALIAS_DIVIDER = "|"


class State(Enum):
    START = auto()
    EMBED_MARKER = auto()  # after "!"
    OPENING = auto()  # after the first "["
    TARGET_BLANK = auto()  # inside the target, nothing but blanks so far
    TARGET = auto()
    ALIAS_BLANK = auto()
    ALIAS = auto()
    CLOSING = auto()  # after the first "]"
    DONE = auto()
    FAIL = auto()


class CharClass(Enum):
    BANG = auto()
    OPEN = auto()
    CLOSE = auto()
    DIVIDER = auto()
    LINE_ENDING = auto()
    SPACE = auto()
    EOF = auto()
    OTHER = auto()


TRANSITIONS: dict[tuple[State, CharClass], State] = {
    (State.START, CharClass.BANG): State.EMBED_MARKER,
    (State.START, CharClass.OPEN): State.OPENING,
    (State.EMBED_MARKER, CharClass.OPEN): State.OPENING,
    (State.OPENING, CharClass.OPEN): State.TARGET_BLANK,
    # target
    (State.TARGET_BLANK, CharClass.SPACE): State.TARGET_BLANK,
    (State.TARGET_BLANK, CharClass.OTHER): State.TARGET,
    (State.TARGET_BLANK, CharClass.BANG): State.TARGET,
    (State.TARGET_BLANK, CharClass.OPEN): State.TARGET,
    (State.TARGET, CharClass.SPACE): State.TARGET,
    (State.TARGET, CharClass.OTHER): State.TARGET,
    (State.TARGET, CharClass.BANG): State.TARGET,
    (State.TARGET, CharClass.OPEN): State.TARGET,
    (State.TARGET, CharClass.DIVIDER): State.ALIAS_BLANK,
    (State.TARGET, CharClass.CLOSE): State.CLOSING,
    # alias (a second divider is plain alias text)
    (State.ALIAS_BLANK, CharClass.SPACE): State.ALIAS_BLANK,
    (State.ALIAS_BLANK, CharClass.OTHER): State.ALIAS,
    (State.ALIAS_BLANK, CharClass.BANG): State.ALIAS,
    (State.ALIAS_BLANK, CharClass.OPEN): State.ALIAS,
    (State.ALIAS_BLANK, CharClass.DIVIDER): State.ALIAS,
    (State.ALIAS, CharClass.SPACE): State.ALIAS,
    (State.ALIAS, CharClass.OTHER): State.ALIAS,
    (State.ALIAS, CharClass.BANG): State.ALIAS,
    (State.ALIAS, CharClass.OPEN): State.ALIAS,
    (State.ALIAS, CharClass.DIVIDER): State.ALIAS,
    (State.ALIAS, CharClass.CLOSE): State.CLOSING,
    (State.CLOSING, CharClass.CLOSE): State.DONE,
}

# Offsets recorded when an edge is taken: name -> offset from the current char
EDGE_MARKS: dict[tuple[State, State], tuple[tuple[str, int], ...]] = {
    (State.OPENING, State.TARGET_BLANK): (("target_start", 1),),
    (State.TARGET, State.ALIAS_BLANK): (("target_end", 0), ("alias_start", 1)),
    (State.TARGET, State.CLOSING): (("target_end", 0),),
    (State.ALIAS, State.CLOSING): (("alias_end", 0),),
}


@dataclass(frozen=True)
class WikiLinkMatch:
    """A successful scan: ``src[start:end]`` is the full wiki-link source."""

    start: int
    end: int
    target: str
    alias: str
    embed: bool


def classify(ch: str | None, divider: str = DEFAULT_ALIAS_DIVIDER) -> CharClass:
    """Map a character (None at end of input) to its input class."""
    if ch is None:
        return CharClass.EOF
    if ch == divider:
        return CharClass.DIVIDER
    if ch == "!":
        return CharClass.BANG
    if ch == "[":
        return CharClass.OPEN
    if ch == "]":
        return CharClass.CLOSE
    if ch in "\n\r":
        return CharClass.LINE_ENDING
    if ch in " \t":
        return CharClass.SPACE
    return CharClass.OTHER


def step(state: State, char_class: CharClass) -> State:
    """Return the state reached from ``state`` on ``char_class``."""
    return TRANSITIONS.get((state, char_class), State.FAIL)


def scan_wikilink(
    src: str,
    pos: int = 0,
    end: int | None = None,
    divider: str = DEFAULT_ALIAS_DIVIDER,
) -> WikiLinkMatch | None:
    """Run the automaton over ``src`` starting at ``pos``.

    Args:
        src: Source text.
        pos: Offset of the candidate "!" or "[".
        end: Exclusive end of the scannable region (defaults to len(src)).
        divider: Single character separating target from alias.

    Returns:
        WikiLinkMatch if a complete wiki link starts at ``pos``, else None.
    """
    if end is None:
        end = len(src)

    state = State.START
    marks: dict[str, int] = {}
    index = pos

    while state is not State.DONE:
        ch = src[index] if index < end else None
        next_state = step(state, classify(ch, divider))
        if next_state is State.FAIL:
            return None

        for name, offset in EDGE_MARKS.get((state, next_state), ()):
            marks[name] = index + offset

        state = next_state
        index += 1

    target = src[marks["target_start"] : marks["target_end"]]
    alias = ""
    if "alias_start" in marks:
        alias = src[marks["alias_start"] : marks["alias_end"]]

    return WikiLinkMatch(
        start=pos,
        end=index,
        target=target,
        alias=alias,
        embed=src[pos] == "!",
    )


def _validate_divider(divider: str) -> None:
    if len(divider) != 1 or divider in "[]!\n\r \t":
        raise ValueError(f"Invalid wiki-link alias divider: {divider!r}")


def wikilink_plugin(md: MarkdownIt, alias_divider: str = DEFAULT_ALIAS_DIVIDER) -> None:
    """Register the wiki-link inline rule with a MarkdownIt instance.

    The rule runs before markdown-it's ``link`` rule so ``[[`` is claimed
    before it can be read as a link label.

    Args:
        md: MarkdownIt instance to extend.
        alias_divider: Character separating target from alias.

    Raises:
        ValueError: If the divider is not a single usable character.
    """
    _validate_divider(alias_divider)

    def _wikilink_rule(state: StateInline, silent: bool) -> bool:
        if state.src[state.pos] not in "![":
            return False

        match = scan_wikilink(state.src, state.pos, state.posMax, alias_divider)
        if match is None:
            return False

        if not silent:
            token = state.push(TOKEN_TYPE, "", 0)
            token.content = state.src[match.start : match.end]
            token.markup = "![[" if match.embed else "[["
            token.meta = {
                "target": match.target,
                "alias": match.alias,
                "embed": match.embed,
            }

        state.pos = match.end
        return True

    md.inline.ruler.before("link", TOKEN_TYPE, _wikilink_rule)
