"""
Pytest configuration and fixtures for image storage tests.
Provides Powertools environment defaults, a temporary storage root and
real image payloads generated with Pillow.
"""

import os
from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-storage-test")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageStorageTest")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_LOG_LEVEL", "DEBUG")

from core.models.settings import StorageSettings  # noqa: E402
from core.utils.constants import ENV_IMAGE_UPLOAD_ROOT  # noqa: E402


def _encode_image(
    *,
    size: tuple[int, int],
    image_format: str,
    mode: str = "RGB",
    color: int | tuple[int, ...] = (200, 40, 40),
) -> bytes:
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def upload_root(tmp_path) -> Path:
    """Storage root that does not exist yet (Store must create it)."""
    return tmp_path / "uploads"


@pytest.fixture
def storage_settings(upload_root) -> StorageSettings:
    return StorageSettings(upload_root=upload_root)


@pytest.fixture
def storage_env(monkeypatch, upload_root) -> Path:
    """Point ``StorageSettings.from_env`` at the temporary root."""
    monkeypatch.setenv(ENV_IMAGE_UPLOAD_ROOT, str(upload_root))
    return upload_root


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory producing encoded image bytes.

    Usage:
        data = make_image(size=(64, 32), image_format="JPEG")
    """
    return _encode_image


@pytest.fixture
def sample_png_bytes() -> bytes:
    """800x600 RGB PNG."""
    return _encode_image(size=(800, 600), image_format="PNG")


@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    """640x960 RGB JPEG (portrait)."""
    return _encode_image(size=(640, 960), image_format="JPEG", color=(20, 120, 220))


@pytest.fixture
def stored_files() -> Callable[[Path], list[str]]:
    """Sorted file names under a root (empty when it does not exist)."""

    def _list(root: Path) -> list[str]:
        if not root.exists():
            return []

        return sorted(path.name for path in root.iterdir())

    return _list
