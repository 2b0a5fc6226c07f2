"""Shared test fixtures for the wikimark test suite.

Design:
- vault: a small content root on disk (notes, images, a video)
- clean_env: removes WIKIMARK_* variables so tests never see the host config
- package_logger: the "wikimark" logger, restored after each test
"""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from PIL import Image

from wikimark import WikiOptions, WikiProcessor

# ─────────────────────────────────────────────────────────────────────────────
# Environment
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate every test from WIKIMARK_* settings of the host."""
    for name in ("WIKIMARK_CONFIG", "WIKIMARK_CONTENT_ROOT", "WIKIMARK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def package_logger() -> Generator[logging.Logger, None, None]:
    """Undo handlers and levels that load_options() installs on the package logger."""
    logger = logging.getLogger("wikimark")
    saved = (logger.handlers[:], logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    handlers, level, propagate = saved
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ─────────────────────────────────────────────────────────────────────────────
# Vault
# ─────────────────────────────────────────────────────────────────────────────


def _write_image(path: Path, size: tuple[int, int]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 30, 30)).save(path, format="PNG")


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Content root with a few notes and media files.

    Creates:
    - notes/ProjectA.md
    - image.png (4x3)
    - clip.mp4
    - assets/images/photo.png (8x6)
    """
    root = tmp_path / "vault"
    (root / "notes").mkdir(parents=True)

    (root / "notes" / "ProjectA.md").write_text(
        "---\ntitle: Project A\n---\n\n# Project A\n\nDetails about **Project A**.\n",
        encoding="utf-8",
    )
    _write_image(root / "image.png", (4, 3))
    _write_image(root / "assets" / "images" / "photo.png", (8, 6))
    (root / "clip.mp4").write_bytes(b"\x00\x00\x00\x18ftypmp42")

    return root


@pytest.fixture
def vault_processor(vault: Path) -> WikiProcessor:
    """Processor resolving against the vault fixture."""
    return WikiProcessor(WikiOptions(content_root=vault))
