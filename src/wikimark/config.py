"""Configuration loading for wikimark.

Options come from a YAML file with camelCase keys, for example:

    contentRoot: ./vault
    contentRootUrlPrefix: /docs
    callout:
      componentName: Admonition
      typeMap:
        note: info

Discovery order:
1. The ``config_path`` argument
2. WIKIMARK_CONFIG environment variable
3. ./wikimark.yaml in the current directory

WIKIMARK_CONTENT_ROOT overrides ``contentRoot`` from the file. Hooks are
Python callables and can only be passed as keyword overrides.

A top-level ``logLevel`` key sets the level of the ``wikimark`` logger,
which ``load_options`` configures (see ``configure_logging``).
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from ._logging import configure_logging
from .models import WikiOptions

log = logging.getLogger(__name__)

CONFIG_FILENAME = "wikimark.yaml"


class ConfigurationError(Exception):
    """Raised when a configuration file is missing or invalid."""

    pass


def find_config_file(config_path: Path | str | None = None) -> Path | None:
    """Locate the configuration file.

    Raises:
        ConfigurationError: If an explicitly requested file does not exist.
    """
    explicit = config_path or os.environ.get("WIKIMARK_CONFIG")
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
        return path

    default = Path.cwd() / CONFIG_FILENAME
    if default.is_file():
        return default
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from ``path``.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")
    return data


def load_options(config_path: Path | str | None = None, **overrides: Any) -> WikiOptions:
    """Build WikiOptions from the config file, the environment and overrides.

    Args:
        config_path: Explicit config file.
        **overrides: Option values (snake_case or camelCase) applied last.

    Returns:
        Validated WikiOptions.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    data: dict[str, Any] = {}

    path = find_config_file(config_path)
    if path is not None:
        log.debug("Loading options from %s", path)
        data.update(read_config_file(path))

    log_level = data.pop("log_level", None)
    log_level = data.pop("logLevel", log_level)
    configure_logging(str(log_level) if log_level else None)

    content_root = os.environ.get("WIKIMARK_CONTENT_ROOT")
    if content_root:
        data.pop("content_root", None)
        data["contentRoot"] = content_root

    for key, value in overrides.items():
        # Drop the other spelling so the override wins
        data.pop(to_camel(key), None)
        data.pop(to_snake(key), None)
        data[key] = value

    try:
        return WikiOptions.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ConfigurationError("Invalid options:\n" + "\n".join(errors)) from e
