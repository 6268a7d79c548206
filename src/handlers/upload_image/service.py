"""Business logic for image upload operations.

This module validates untrusted uploads, generates the derived artifacts
(resized original and square thumbnail) and guarantees that a failed store
leaves no artifact behind.
"""

import base64
import binascii
from pathlib import Path

from aws_lambda_powertools import Logger

from core.infrastructure.filesystem.local_image_storage import LocalImageStorage
from core.infrastructure.pillow.pillow_transformer import PillowImageTransformer
from core.models.errors import ErrorKind, ImageServiceError
from core.models.image import ImageFormat, UploadCandidate
from core.models.settings import StorageSettings
from core.repositories.image_transformer import ImageTransformer
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ALLOWED_CONTENT_TYPES,
    ERROR_CODE_EMPTY_FILE,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_IMAGE_PROCESSING_FAILED,
    ERROR_CODE_INVALID_IMAGE_SIGNATURE,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    format_file_size,
)
from core.utils.identifiers import generate_image_id
from core.utils.signature import detect_image_format

logger = Logger(utc=True)

ALLOWED_IMAGE_FORMATS: frozenset[ImageFormat] = frozenset(
    fmt for fmt in ImageFormat if f"image/{fmt.value}" in ALLOWED_CONTENT_TYPES
)


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Validation of the untrusted upload (size, declared type, signature)
    - Identifier generation and storage root preparation
    - Generation of the resized original and the thumbnail
    - Cleanup of partially created artifacts on failure
    """

    def __init__(
        self,
        settings: StorageSettings | None = None,
        *,
        storage: ImageStorageRepository | None = None,
        transformer: ImageTransformer | None = None,
    ) -> None:
        """Initialize the upload service with required infrastructure dependencies."""
        self.settings = settings or StorageSettings.from_env()
        self.storage = storage or LocalImageStorage(
            root=self.settings.upload_root,
            extension=self.settings.output_format,
        )
        self.transformer = transformer or PillowImageTransformer(
            max_pixels=self.settings.max_pixels
        )

    @staticmethod
    def decode_file(encoded: str) -> bytes:
        """Decode base64-encoded image data.

        Args:
            encoded: Base64-encoded image content

        Returns:
            Decoded image bytes

        Raises:
            ImageServiceError: VALIDATION_FAILED if decoding fails
        """
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.exception("Failed to decode base64 image data")
            raise ImageServiceError(
                kind=ErrorKind.VALIDATION_FAILED,
                message="Invalid image data",
                details={"encoding": "base64"},
            ) from exc

    def validate_candidate(self, candidate: UploadCandidate) -> ImageFormat:
        """Check an upload before any filesystem state is touched.

        Returns:
            The image format sniffed from the payload bytes

        Raises:
            ImageServiceError: VALIDATION_FAILED
        """
        size = len(candidate.data)
        logger.debug(
            "Validating upload",
            extra={
                "size": size,
                "declared_size": candidate.declared_size,
                "content_type": candidate.content_type,
            },
        )

        if size == 0:
            raise ImageServiceError(
                kind=ErrorKind.VALIDATION_FAILED,
                message="File cannot be empty",
                error_code=ERROR_CODE_EMPTY_FILE,
            )

        max_size = self.settings.max_file_size
        if max(size, candidate.declared_size or 0) > max_size:
            logger.warning(
                "File size exceeds limit",
                extra={"size": size, "declared_size": candidate.declared_size},
            )
            raise ImageServiceError(
                kind=ErrorKind.VALIDATION_FAILED,
                message=f"File size exceeds maximum allowed size of {format_file_size(max_size)}",
                error_code=ERROR_CODE_FILE_SIZE_EXCEEDED,
                details={"max_file_size": max_size},
            )

        content_type = self._normalize_content_type(candidate.content_type)
        if content_type not in ALLOWED_CONTENT_TYPES:
            logger.warning(
                "Unsupported content type",
                extra={"content_type": candidate.content_type},
            )
            raise ImageServiceError(
                kind=ErrorKind.VALIDATION_FAILED,
                message=f"Unsupported file format: {candidate.content_type}",
                error_code=ERROR_CODE_UNSUPPORTED_MIME_TYPE,
                details={"content_type": candidate.content_type},
            )

        # Declared type is only an allow-list gate; the bytes decide what the file is
        image_format = detect_image_format(candidate.data)
        if image_format not in ALLOWED_IMAGE_FORMATS:
            raise ImageServiceError(
                kind=ErrorKind.VALIDATION_FAILED,
                message="Unsupported image type",
                error_code=ERROR_CODE_INVALID_IMAGE_SIGNATURE,
                details={"image_format": image_format.value},
            )

        logger.debug("File signature validation passed", extra={"format": image_format.value})
        return image_format

    def store_image(self, candidate: UploadCandidate) -> str:
        """Validate an upload and persist its derived artifacts.

        The store flow is:
        1. Validate the candidate (no filesystem access on failure)
        2. Generate a fresh identifier
        3. Ensure the storage root exists
        4. Resolve the original and thumbnail paths
        5. Decode, resize and write the original
        6. Read the original back and write the center-cropped thumbnail
        7. On any failure, remove whatever was written

        Args:
            candidate: Untrusted upload payload

        Returns:
            The new storage identifier

        Raises:
            ImageServiceError: VALIDATION_FAILED, PROCESSING_FAILED or IO_FAILED
        """
        image_format = self.validate_candidate(candidate)

        image_id = generate_image_id()
        logger.debug(
            "Starting image store",
            extra={"image_id": image_id, "source_format": image_format.value},
        )

        original_path: Path | None = None
        thumbnail_path: Path | None = None
        stored = False

        try:
            self.storage.ensure_root()

            stored_image = self.storage.resolve_image(image_id)
            original_path, thumbnail_path = stored_image.paths

            self._create_original(candidate.data, original_path)
            self._create_thumbnail(original_path, thumbnail_path)

            stored = True

        except ImageServiceError as exc:
            logger.exception(
                "Failed to store image",
                extra={"image_id": image_id, "error_code": exc.error_code},
            )
            if exc.kind in (ErrorKind.PROCESSING_FAILED, ErrorKind.IO_FAILED):
                raise

            raise ImageServiceError(
                kind=ErrorKind.IO_FAILED,
                message="Unable to store image",
                details={"image_id": image_id},
            ) from exc

        except OSError as exc:
            logger.exception("Filesystem error while storing image", extra={"image_id": image_id})
            raise ImageServiceError(
                kind=ErrorKind.IO_FAILED,
                message="Unable to store image",
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error while storing image", extra={"image_id": image_id})
            raise ImageServiceError(
                kind=ErrorKind.PROCESSING_FAILED,
                message="Unable to process image",
                error_code=ERROR_CODE_IMAGE_PROCESSING_FAILED,
                details={"image_id": image_id},
            ) from exc

        finally:
            if not stored:
                removed = self.storage.remove_images(original_path, thumbnail_path)
                if removed:
                    logger.info(
                        "Cleaned up partial artifacts",
                        extra={"image_id": image_id, "removed": [p.name for p in removed]},
                    )

        logger.info("Image stored successfully", extra={"image_id": image_id})
        return image_id

    def _create_original(self, data: bytes, output_path: Path) -> None:
        image = self.transformer.decode(data)
        logger.debug("Processing original image", extra={"size": image.size})

        encoded = self.transformer.resize_and_encode(
            image,
            width=self.settings.max_width,
            height=self.settings.max_height,
            quality=self.settings.quality,
            output_format=self.settings.output_format,
        )
        self.storage.write_image(path=output_path, data=encoded)

    def _create_thumbnail(self, source_path: Path, output_path: Path) -> None:
        image = self.transformer.decode(self.storage.read_image(path=source_path))

        encoded = self.transformer.resize_and_encode(
            image,
            width=self.settings.thumbnail_size,
            height=self.settings.thumbnail_size,
            quality=self.settings.quality,
            output_format=self.settings.output_format,
            crop=True,
        )
        self.storage.write_image(path=output_path, data=encoded)

    @staticmethod
    def _normalize_content_type(content_type: str | None) -> str | None:
        if content_type is None:
            return None

        return content_type.split(";", 1)[0].strip().lower() or None
