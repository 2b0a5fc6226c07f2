"""Logging setup for wikimark.

Modules log through the standard library:

    import logging
    log = logging.getLogger(__name__)

Nothing is configured on import. ``load_options()`` configures the
``wikimark`` logger when a host tool loads its settings, taking the level
from, in order:
    - the WIKIMARK_LOG_LEVEL environment variable
    - ``logLevel`` in the config file
    - INFO

At DEBUG every resolution miss, ambiguous match, probe failure and skipped
recursive embed is reported.
"""

import logging
import os
import sys

DEFAULT_LEVEL = "INFO"


def configure_logging(level: str | None = None) -> None:
    """Attach a stderr handler to the ``wikimark`` logger.

    Args:
        level: Level name used when WIKIMARK_LOG_LEVEL is not set.

    Subsequent calls are no-ops.
    """
    logger = logging.getLogger("wikimark")
    if logger.handlers:
        return

    level_name = (os.environ.get("WIKIMARK_LOG_LEVEL") or level or DEFAULT_LEVEL).upper()
    resolved = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)

    # Keep records out of the host's root handlers
    logger.propagate = False
