"""Shared image models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictStr


class ImageFormat(str, Enum):
    """Image formats recognised by signature sniffing."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    BMP = "bmp"
    WEBP = "webp"


class SignatureStatus(str, Enum):
    VALID = "valid"
    TOO_SMALL = "too_small"
    UNRECOGNIZED = "unrecognized"


class SignatureResult(BaseModel):
    """Outcome of classifying a payload by its header bytes."""

    model_config = ConfigDict(frozen=True)

    status: SignatureStatus
    image_format: ImageFormat | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is SignatureStatus.VALID


class UploadCandidate(BaseModel):
    """Untrusted upload payload, alive only for one store operation."""

    model_config = ConfigDict(frozen=True)

    data: StrictBytes = Field(..., repr=False, description="Raw uploaded bytes")
    content_type: StrictStr | None = Field(
        None, description="Client-declared MIME type (untrusted)"
    )
    declared_size: int | None = Field(
        None, ge=0, description="Client-declared size in bytes (untrusted)"
    )


class StoredImage(BaseModel):
    """The pair of files persisted for one storage identifier."""

    model_config = ConfigDict(frozen=True)

    image_id: StrictStr = Field(..., description="Opaque storage identifier")
    original_path: Path = Field(..., description="Resized original artifact")
    thumbnail_path: Path = Field(..., description="Square thumbnail artifact")

    @property
    def paths(self) -> tuple[Path, Path]:
        return self.original_path, self.thumbnail_path
