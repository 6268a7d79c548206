"""
Business logic for image retrieval.

Every failure (bad identifier, traversal attempt, missing or unreadable file)
collapses into the same "absent" result so callers cannot tell them apart.
"""

from typing import BinaryIO

from aws_lambda_powertools import Logger

from core.infrastructure.filesystem.local_image_storage import LocalImageStorage
from core.models.errors import ImageServiceError
from core.models.settings import StorageSettings
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.paths import is_safe_image_id

logger = Logger(utc=True)


class GetService:
    """Application service responsible for reading stored images."""

    def __init__(
        self,
        settings: StorageSettings | None = None,
        *,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.settings = settings or StorageSettings.from_env()
        self.storage = storage or LocalImageStorage(
            root=self.settings.upload_root,
            extension=self.settings.output_format,
        )

    def get_image(self, image_id: str | None, *, thumbnail: bool = False) -> BinaryIO | None:
        """
        Open the stored original or thumbnail for an identifier.

        Args:
            image_id: Untrusted image identifier
            thumbnail: Return the thumbnail instead of the resized original

        Returns:
            An open binary handle (caller closes it), or None if the image
            cannot be served for any reason
        """
        if not is_safe_image_id(image_id):
            logger.warning("Invalid image ID format", extra={"image_id": repr(image_id)})
            return None

        try:
            path = self.storage.resolve_path(image_id, thumbnail=thumbnail)
        except ImageServiceError:
            return None

        handle = self.storage.open_image(path=path)
        if handle is None:
            logger.debug(
                "Image not found",
                extra={"image_id": image_id, "thumbnail": thumbnail},
            )
            return None

        logger.info(
            "Image opened successfully",
            extra={"image_id": image_id, "thumbnail": thumbnail},
        )
        return handle

    def read_image(self, image_id: str | None, *, thumbnail: bool = False) -> bytes | None:
        """Read a stored image fully into memory, or return None if absent."""
        handle = self.get_image(image_id, thumbnail=thumbnail)
        if handle is None:
            return None

        try:
            with handle:
                return handle.read()
        except OSError:
            logger.warning(
                "Image became unreadable during read",
                extra={"image_id": image_id},
                exc_info=True,
            )
            return None
