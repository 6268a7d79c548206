"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_EMPTY_FILE = "EMPTY_FILE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_TOO_SMALL = "FILE_TOO_SMALL"
ERROR_CODE_INVALID_IMAGE_SIGNATURE = "INVALID_IMAGE_SIGNATURE"

# Processing Errors
ERROR_CODE_CORRUPTED_IMAGE = "CORRUPTED_IMAGE"
ERROR_CODE_IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
ERROR_CODE_IMAGE_PROCESSING_FAILED = "IMAGE_PROCESSING_FAILED"

# Filesystem Errors
ERROR_CODE_DIRECTORY_CREATE_FAILED = "DIRECTORY_CREATE_FAILED"
ERROR_CODE_IMAGE_WRITE_FAILED = "IMAGE_WRITE_FAILED"
ERROR_CODE_IMAGE_READ_FAILED = "IMAGE_READ_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes

ALLOWED_CONTENT_TYPES: Final[frozenset[str]] = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/bmp",
        "image/gif",
    }
)

# Longest signature check reads "WEBP" at offset 8
SIGNATURE_HEADER_SIZE = 12
MIN_SIGNATURE_BYTES = 3


# ============================================================================
# Derived Artifact Defaults
# ============================================================================

DEFAULT_MAX_WIDTH = 500
DEFAULT_MAX_HEIGHT = 500
DEFAULT_THUMBNAIL_SIZE = 150
DEFAULT_QUALITY = 0.85
DEFAULT_OUTPUT_FORMAT = "png"
DEFAULT_MAX_PIXELS = 50_000_000  # 50 megapixels

THUMBNAIL_SUFFIX = "-thumbnail"

# Output extension -> (Pillow format name, MIME type)
OUTPUT_FORMATS: Final[dict[str, tuple[str, str]]] = {
    "png": ("PNG", "image/png"),
    "jpg": ("JPEG", "image/jpeg"),
    "jpeg": ("JPEG", "image/jpeg"),
    "webp": ("WEBP", "image/webp"),
    "gif": ("GIF", "image/gif"),
    "bmp": ("BMP", "image/bmp"),
}

# Characters that make an identifier unusable as a flat file name
FORBIDDEN_ID_SEQUENCES: Final[tuple[str, ...]] = ("..", "/", "\\", "\x00")


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length,Content-Disposition"
DEFAULT_CONTENT_TYPE = "application/json"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_IMAGE_UPLOAD_ROOT = "IMAGE_UPLOAD_ROOT"
ENV_IMAGE_MAX_FILE_SIZE = "IMAGE_MAX_FILE_SIZE"
ENV_IMAGE_MAX_WIDTH = "IMAGE_MAX_WIDTH"
ENV_IMAGE_MAX_HEIGHT = "IMAGE_MAX_HEIGHT"
ENV_IMAGE_THUMBNAIL_SIZE = "IMAGE_THUMBNAIL_SIZE"
ENV_IMAGE_QUALITY = "IMAGE_QUALITY"
ENV_IMAGE_OUTPUT_FORMAT = "IMAGE_OUTPUT_FORMAT"
ENV_IMAGE_MAX_PIXELS = "IMAGE_MAX_PIXELS"


# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
