"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from core.models.image import StoredImage


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving derived image files.

    Implementations could be local disk, a network mount, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def ensure_root(self) -> Path:
        """Create the storage root if absent and return it.

        Raises:
            ImageServiceError: IO_FAILED if the directory cannot be created
        """

    @abstractmethod
    def resolve_image(self, image_id: str) -> StoredImage:
        """Resolve the original and thumbnail paths for an identifier.

        Raises:
            ImageServiceError: PATH_TRAVERSAL_REJECTED if either path escapes the root
        """

    @abstractmethod
    def resolve_path(self, image_id: str, *, thumbnail: bool = False) -> Path:
        """Resolve a single sandboxed path for an identifier.

        Raises:
            ImageServiceError: PATH_TRAVERSAL_REJECTED if the path escapes the root
        """

    @abstractmethod
    def write_image(self, *, path: Path, data: bytes) -> None:
        """Write encoded image bytes.

        Raises:
            ImageServiceError: IO_FAILED if the write fails
        """

    @abstractmethod
    def read_image(self, *, path: Path) -> bytes:
        """Read back a stored image.

        Raises:
            ImageServiceError: IO_FAILED if the read fails
        """

    @abstractmethod
    def open_image(self, *, path: Path) -> BinaryIO | None:
        """Open a stored image for reading.

        Returns:
            Readable binary handle, or None if missing or unreadable
        """

    @abstractmethod
    def remove_images(self, *paths: Path | None) -> list[Path]:
        """Best-effort removal of stored files.

        Missing files are skipped and deletion errors are logged, never raised.

        Returns:
            Paths that were actually removed
        """
