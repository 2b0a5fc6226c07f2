"""Pydantic models for wikimark options.

Field names are snake_case; camelCase aliases are accepted as well, so a
YAML config or a dict such as ``{"contentRoot": "vault"}`` validates as-is.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_CALLOUT_TYPE_MAP: dict[str, str] = {
    "note": "info",
    "abstract": "info",
    "summary": "info",
    "tldr": "info",
    "info": "info",
    "todo": "info",
    "quote": "info",
    "tip": "idea",
    "hint": "idea",
    "example": "idea",
    "question": "idea",
    "warn": "warn",
    "warning": "warn",
    "caution": "warn",
    "attention": "warn",
    "danger": "error",
    "error": "error",
    "fail": "error",
    "failure": "error",
    "bug": "error",
    "success": "success",
    "done": "success",
    "check": "success",
}

# Hooks are plain callables receiving a context dataclass
Hook = Callable[..., Any]


class _Options(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class MarkdownFile(_Options):
    """One manifest entry standing in for a file on disk."""

    file: str  # Path relative to the vault, e.g. "notes/My Note.md"
    permalink: str | None = None  # Published URL path, used instead of the slug
    content: str | None = None  # Body inlined by note embeds


class CalloutOptions(_Options):
    """Options for ``> [!TYPE] title`` blockquotes."""

    component_name: str = "Callout"
    type_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CALLOUT_TYPE_MAP))
    type_prop_name: str = "type"
    default_type: str = "info"

    @field_validator("type_map", mode="before")
    @classmethod
    def _normalize_type_map(cls, value: Any) -> Any:
        """Drop non-string entries, lower-case keys and strip values.

        A user map replaces the default map entirely.
        """
        if value is None:
            return dict(DEFAULT_CALLOUT_TYPE_MAP)
        if not isinstance(value, dict):
            return value
        return {
            key.lower(): mapped.strip()
            for key, mapped in value.items()
            if isinstance(key, str) and isinstance(mapped, str)
        }


class EmbedRenderingOptions(_Options):
    """Per-kind embed renderers. Each receives an ``EmbedRenderContext``."""

    note: Hook | None = None
    image: Hook | None = None
    video: Hook | None = None
    not_found: Hook | None = None


class WikiOptions(_Options):
    """Options for one processing context."""

    content_root: Path | None = None  # Directory scanned to resolve targets
    content_root_url_prefix: str = ""  # Prepended to resolved content URLs
    base_url: str = ""  # Prepended to slug URLs when nothing resolves
    markdown_files: list[MarkdownFile] | None = None  # Explicit manifest
    alias_divider: str = "|"
    callout: CalloutOptions = Field(default_factory=CalloutOptions)
    embed_rendering: EmbedRenderingOptions = Field(default_factory=EmbedRenderingOptions)
    embedding_path_transform: Hook | None = None  # (EmbedPathTransformContext) -> str | None
    wiki_link_path_transform: Hook | None = None  # (WikiLinkPathTransformContext) -> str | None

    @field_validator("alias_divider")
    @classmethod
    def _check_alias_divider(cls, value: str) -> str:
        if len(value) != 1 or value in "[]!\n\r \t":
            raise ValueError(f"Invalid wiki-link alias divider: {value!r}")
        return value
