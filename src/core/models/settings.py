"""Storage configuration model."""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_PIXELS,
    DEFAULT_MAX_WIDTH,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_QUALITY,
    DEFAULT_THUMBNAIL_SIZE,
    ENV_IMAGE_MAX_FILE_SIZE,
    ENV_IMAGE_MAX_HEIGHT,
    ENV_IMAGE_MAX_PIXELS,
    ENV_IMAGE_MAX_WIDTH,
    ENV_IMAGE_OUTPUT_FORMAT,
    ENV_IMAGE_QUALITY,
    ENV_IMAGE_THUMBNAIL_SIZE,
    ENV_IMAGE_UPLOAD_ROOT,
    OUTPUT_FORMATS,
)

_OPTIONAL_ENV_FIELDS: dict[str, str] = {
    "max_file_size": ENV_IMAGE_MAX_FILE_SIZE,
    "max_width": ENV_IMAGE_MAX_WIDTH,
    "max_height": ENV_IMAGE_MAX_HEIGHT,
    "thumbnail_size": ENV_IMAGE_THUMBNAIL_SIZE,
    "quality": ENV_IMAGE_QUALITY,
    "output_format": ENV_IMAGE_OUTPUT_FORMAT,
    "max_pixels": ENV_IMAGE_MAX_PIXELS,
}


class StorageSettings(BaseModel):
    """Immutable configuration shared by the storage services.

    Services receive an instance at construction and never read the
    environment themselves; ``from_env`` is the single loading point.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    upload_root: Path = Field(..., description="Directory holding stored images")
    max_file_size: int = Field(
        DEFAULT_MAX_FILE_SIZE, gt=0, description="Maximum upload size in bytes"
    )
    max_width: int = Field(DEFAULT_MAX_WIDTH, gt=0, description="Original max width")
    max_height: int = Field(
        DEFAULT_MAX_HEIGHT, gt=0, description="Original max height"
    )
    thumbnail_size: int = Field(
        DEFAULT_THUMBNAIL_SIZE, gt=0, description="Thumbnail side length"
    )
    quality: float = Field(
        DEFAULT_QUALITY, ge=0.0, le=1.0, description="Output quality factor"
    )
    output_format: str = Field(
        DEFAULT_OUTPUT_FORMAT, description="Extension of every stored artifact"
    )
    max_pixels: int = Field(
        DEFAULT_MAX_PIXELS, gt=0, description="Largest decodable image in pixels"
    )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, value: str) -> str:
        fmt = value.lower().lstrip(".")

        if fmt not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format '{value}'. "
                f"Allowed formats: {', '.join(sorted(OUTPUT_FORMATS))}"
            )

        return fmt

    @property
    def output_mime_type(self) -> str:
        return OUTPUT_FORMATS[self.output_format][1]

    @classmethod
    def from_env(cls) -> "StorageSettings":
        """Build settings from environment variables.

        Raises:
            RuntimeError: If the upload root is not configured
            pydantic.ValidationError: If a configured value is invalid
        """
        upload_root = os.getenv(ENV_IMAGE_UPLOAD_ROOT)
        if not upload_root:
            raise RuntimeError(f"{ENV_IMAGE_UPLOAD_ROOT} environment variable is not set")

        values: dict[str, Any] = {"upload_root": upload_root}
        for field_name, env_name in _OPTIONAL_ENV_FIELDS.items():
            raw = os.getenv(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw

        return cls(**values)
