"""Error taxonomy for the image service.

Every failure raised by the storage core is an ``ImageServiceError`` tagged
with one ``ErrorKind``. The kind is the closed contract callers branch on;
``error_code`` refines it for API responses and logs.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by storage operations."""

    # Untrusted input failed size, content-type or signature checks.
    VALIDATION_FAILED = "VALIDATION_FAILED"
    # The transform adapter could not decode or produce an artifact.
    PROCESSING_FAILED = "PROCESSING_FAILED"
    # Directory creation, file write, read or delete failed at the OS level.
    IO_FAILED = "IO_FAILED"
    # An identifier or derived path escaped the storage root.
    PATH_TRAVERSAL_REJECTED = "PATH_TRAVERSAL_REJECTED"


class ImageServiceError(Exception):
    """
    Single exception type for all image service errors.

    Callers must explicitly provide a kind and a message.
    ``error_code`` defaults to the kind's value.
    Optional contextual information can be supplied via `details`.
    """

    kind: ErrorKind
    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        kind: ErrorKind,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.error_code = error_code or kind.value
        self.details = details or {}

        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value}, "
            f"error_code={self.error_code!r}, message={self.message!r})"
        )
