"""Local-filesystem implementation of ImageStorageRepository."""

from pathlib import Path
from typing import BinaryIO, NoReturn

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.filesystem_adapter import (
    FilesystemAdapter,
    FilesystemAdapterProtocol,
)
from core.models.errors import ErrorKind, ImageServiceError
from core.models.image import StoredImage
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_DIRECTORY_CREATE_FAILED,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_WRITE_FAILED,
    THUMBNAIL_SUFFIX,
)
from core.utils.paths import (
    build_image_path,
    is_safe_image_id,
    is_within_root,
    normalize_path,
)

logger = Logger(utc=True)


class LocalImageStorage(ImageStorageRepository):
    """Image storage backed by a flat directory on the local filesystem."""

    def __init__(
        self,
        *,
        root: Path,
        extension: str,
        adapter: FilesystemAdapterProtocol | None = None,
    ) -> None:
        """Create storage rooted at ``root`` writing ``{id}.{extension}`` files."""
        self._root = Path(root)
        self._extension = extension
        self._fs = adapter or FilesystemAdapter()

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> Path:
        """Create the storage root (recursively, idempotently)."""
        try:
            self._fs.make_directories(path=self._root)
        except OSError as exc:
            logger.error("Failed to create storage root", extra={"root": str(self._root)})
            raise ImageServiceError(
                kind=ErrorKind.IO_FAILED,
                message="Unable to prepare image storage",
                error_code=ERROR_CODE_DIRECTORY_CREATE_FAILED,
                details={"root": str(self._root)},
            ) from exc

        return self._root

    def resolve_image(self, image_id: str) -> StoredImage:
        return StoredImage(
            image_id=image_id,
            original_path=self.resolve_path(image_id),
            thumbnail_path=self.resolve_path(image_id, thumbnail=True),
        )

    def resolve_path(self, image_id: str, *, thumbnail: bool = False) -> Path:
        """Build the path for an identifier and prove it stays inside the root.

        No filesystem access happens for a rejected identifier.
        """
        if not is_safe_image_id(image_id):
            self._reject(image_id, reason="unsafe_identifier")

        suffix = THUMBNAIL_SUFFIX if thumbnail else ""
        candidate = build_image_path(
            self._root, image_id, suffix=suffix, extension=self._extension
        )

        if not is_within_root(self._root, candidate):
            self._reject(image_id, reason="outside_root")

        return normalize_path(candidate)

    def write_image(self, *, path: Path, data: bytes) -> None:
        logger.debug("Writing image", extra={"path": str(path), "size": len(data)})

        try:
            self._fs.write_bytes(path=path, data=data)
        except OSError as exc:
            logger.error("Image write failed", extra={"path": str(path)})
            raise ImageServiceError(
                kind=ErrorKind.IO_FAILED,
                message="Unable to write image at this time",
                error_code=ERROR_CODE_IMAGE_WRITE_FAILED,
                details={"path": path.name},
            ) from exc

    def read_image(self, *, path: Path) -> bytes:
        try:
            return self._fs.read_bytes(path=path)
        except OSError as exc:
            logger.error("Image read failed", extra={"path": str(path)})
            raise ImageServiceError(
                kind=ErrorKind.IO_FAILED,
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"path": path.name},
            ) from exc

    def open_image(self, *, path: Path) -> BinaryIO | None:
        """Open a stored image, or return None when it is missing or unreadable."""
        try:
            if not self._fs.is_readable_file(path=path):
                logger.debug("Image not found or not readable", extra={"path": str(path)})
                return None

            return self._fs.open_for_read(path=path)

        except (OSError, ValueError):
            # A concurrent delete can remove the file between the check and the open
            logger.debug("Image vanished or could not be opened", extra={"path": str(path)})
            return None

    def remove_images(self, *paths: Path | None) -> list[Path]:
        removed: list[Path] = []

        for path in paths:
            if path is None:
                continue

            try:
                if not self._fs.exists(path=path):
                    continue

                self._fs.delete(path=path)
                removed.append(path)
                logger.debug("Removed image file", extra={"path": str(path)})

            except FileNotFoundError:
                continue

            except OSError:
                logger.warning(
                    "Failed to remove image file",
                    extra={"path": str(path)},
                    exc_info=True,
                )

        return removed

    @staticmethod
    def _reject(image_id: str | None, *, reason: str) -> NoReturn:
        logger.warning(
            "Path traversal attempt rejected",
            extra={
                "security_event": "path_traversal",
                "image_id": repr(image_id),
                "reason": reason,
            },
        )
        raise ImageServiceError(
            kind=ErrorKind.PATH_TRAVERSAL_REJECTED,
            message="Invalid image identifier",
            details={"reason": reason},
        )
