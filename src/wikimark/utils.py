"""String helpers shared by the resolver and the link builder."""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePath, PurePosixPath

# Symbols spelled out instead of dropped ("A & B" -> "a-and-b")
SLUG_CHAR_MAP = {
    "&": "and",
    "$": "dollar",
    "%": "percent",
    "<": "less",
    ">": "greater",
    "|": "or",
    "¢": "cent",
    "£": "pound",
    "¤": "currency",
    "¥": "yen",
    "€": "euro",
    "©": "(c)",
    "®": "(r)",
    "™": "tm",
    "ß": "ss",
    "æ": "ae",
    "Æ": "AE",
    "ø": "o",
    "Ø": "O",
    "œ": "oe",
    "Œ": "OE",
    "đ": "d",
    "Đ": "D",
    "ł": "l",
    "Ł": "L",
}

SLUG_REMOVE = re.compile(r"""[^\w\s$*_+~.()'"!\-:@]+""")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_SLASHES = re.compile(r"/+")


def slugify(text: str, remove: re.Pattern[str] | None = None) -> str:
    """Convert text to a lower-case URL slug.

    Accents are folded to their base letter, a handful of symbols are spelled
    out, and characters outside the allowed set are dropped. Passing
    ``remove`` replaces the default set of dropped characters.

    Examples:
        >>> slugify("Internal link")
        'internal-link'
        >>> slugify("Productivité")
        'productivite'
        >>> slugify("A & B")
        'a-and-b'
    """
    pattern = remove or SLUG_REMOVE
    decomposed = unicodedata.normalize("NFKD", text)

    pieces = []
    for ch in decomposed:
        if unicodedata.combining(ch):
            continue
        replacement = SLUG_CHAR_MAP.get(ch, ch)
        if replacement == "-":
            # The separator itself collapses with surrounding whitespace
            replacement = " "
        pieces.append(pattern.sub("", replacement))

    slug = "".join(pieces).strip()
    slug = _WHITESPACE.sub("-", slug)
    return slug.lower()


def normalize_path(value: str) -> str:
    """Use forward slashes, collapse repeated slashes and trim whitespace."""
    return _REPEATED_SLASHES.sub("/", value.replace("\\", "/")).strip()


def normalize_root(value: str | PurePath) -> str:
    """Normalize a directory path: forward slashes, no "." segments, no trailing slash.

    Examples:
        >>> normalize_root("./vault/")
        'vault'
    """
    return PurePosixPath(normalize_path(str(value))).as_posix()


def normalize_name(value: str) -> str:
    """Case- and composition-insensitive key for basename lookups."""
    return unicodedata.normalize("NFC", value.strip()).lower()


def split_path(value: str) -> tuple[str, str]:
    """Split a path into ``(directory, filename)`` on the last slash."""
    normalized = normalize_path(value)
    directory, slash, filename = normalized.rpartition("/")
    if not slash:
        return "", normalized
    return directory, filename


def split_extension(filename: str) -> tuple[str, str]:
    """Split a filename into ``(basename, extension)`` on the last dot."""
    basename, dot, ext = filename.rpartition(".")
    if not dot:
        return filename, ""
    return basename, ext
