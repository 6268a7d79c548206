"""Image format detection from magic bytes.

The declared content type of an upload is never consulted here: the header
bytes alone decide whether a payload is an image of a supported kind.
"""

from aws_lambda_powertools import Logger

from core.models.errors import ErrorKind, ImageServiceError
from core.models.image import ImageFormat, SignatureResult, SignatureStatus
from core.utils.constants import (
    ERROR_CODE_FILE_TOO_SMALL,
    ERROR_CODE_INVALID_IMAGE_SIGNATURE,
    MIN_SIGNATURE_BYTES,
    SIGNATURE_HEADER_SIZE,
)

logger = Logger(utc=True)

# Checked in order; first match wins.
MAGIC_BYTES: tuple[tuple[bytes, ImageFormat], ...] = (
    (b"\xff\xd8\xff", ImageFormat.JPEG),
    (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
    (b"GIF", ImageFormat.GIF),
    (b"BM", ImageFormat.BMP),
)

RIFF_SIGNATURE = b"RIFF"
WEBP_SIGNATURE = b"WEBP"
WEBP_SIGNATURE_OFFSET = 8


def classify_signature(data: bytes) -> SignatureResult:
    """Classify a payload by the first ``SIGNATURE_HEADER_SIZE`` bytes."""
    header = data[:SIGNATURE_HEADER_SIZE]

    if len(header) < MIN_SIGNATURE_BYTES:
        return SignatureResult(status=SignatureStatus.TOO_SMALL)

    for signature, image_format in MAGIC_BYTES:
        if header.startswith(signature):
            return SignatureResult(status=SignatureStatus.VALID, image_format=image_format)

    # WEBP is RIFF container + "WEBP" fourcc; a bare RIFF (WAV, AVI) is not an image
    if header.startswith(RIFF_SIGNATURE) and header.startswith(
        WEBP_SIGNATURE, WEBP_SIGNATURE_OFFSET
    ):
        return SignatureResult(status=SignatureStatus.VALID, image_format=ImageFormat.WEBP)

    return SignatureResult(status=SignatureStatus.UNRECOGNIZED)


def detect_image_format(data: bytes) -> ImageFormat:
    """Return the sniffed image format or raise a validation error.

    Raises:
        ImageServiceError: VALIDATION_FAILED with FILE_TOO_SMALL or
            INVALID_IMAGE_SIGNATURE
    """
    result = classify_signature(data)

    if result.status is SignatureStatus.TOO_SMALL:
        logger.warning("File too small for signature check", extra={"size": len(data)})
        raise ImageServiceError(
            kind=ErrorKind.VALIDATION_FAILED,
            message="File is too small to be an image",
            error_code=ERROR_CODE_FILE_TOO_SMALL,
            details={"size": len(data)},
        )

    if result.image_format is None:
        logger.warning("Unrecognized image signature")
        raise ImageServiceError(
            kind=ErrorKind.VALIDATION_FAILED,
            message="File content is not a supported image",
            error_code=ERROR_CODE_INVALID_IMAGE_SIGNATURE,
        )

    return result.image_format
