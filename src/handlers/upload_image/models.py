"""Pydantic models for image upload request/response."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = Logger(utc=True)


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    content_type: str | None = Field(
        None, max_length=255, description="Declared MIME type (e.g. image/png)"
    )
    file_size: int | None = Field(
        None, ge=0, description="Declared file size in bytes"
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly

        Size and content checks belong to the upload service.
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        return value


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    image_id: str = Field(..., description="Unique image ID")
    message: str = Field(..., description="Success message")
