"""Business logic for bulk image deletion.

Deletion is best-effort: each URL is handled independently, failures are
logged and never reported to the caller, and deleting already-absent images
is not an error.
"""

from collections.abc import Iterable

from aws_lambda_powertools import Logger

from core.infrastructure.filesystem.local_image_storage import LocalImageStorage
from core.models.errors import ImageServiceError
from core.models.settings import StorageSettings
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.paths import extract_image_id, is_safe_image_id

logger = Logger(utc=True)


class DeleteService:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Extraction of identifiers from image URLs
    - Rejection of blank or traversal-bearing identifiers
    - Removal of the original and thumbnail files
    """

    def __init__(
        self,
        settings: StorageSettings | None = None,
        *,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        """Initialize the delete service with required infrastructure dependencies."""
        self.settings = settings or StorageSettings.from_env()
        self.storage = storage or LocalImageStorage(
            root=self.settings.upload_root,
            extension=self.settings.output_format,
        )

    def delete_images(self, image_urls: Iterable[str] | None) -> None:
        """Delete the stored files referenced by each URL.

        Args:
            image_urls: URLs (or bare identifiers) of images to delete
        """
        if image_urls is None:
            return

        for image_url in image_urls:
            try:
                self.delete_image_url(image_url)
            except Exception:
                logger.exception("Failed to delete image from URL", extra={"image_url": image_url})

    def delete_image_url(self, image_url: str) -> bool:
        """Delete the files referenced by one URL.

        Returns:
            True if the identifier was accepted (even if nothing existed),
            False if it was rejected
        """
        image_id = extract_image_id(image_url)

        if image_id is None or not image_id.strip():
            logger.warning("Invalid image ID extracted from URL", extra={"image_url": image_url})
            return False

        if not is_safe_image_id(image_id):
            logger.warning("Invalid image ID format", extra={"image_id": repr(image_id)})
            return False

        try:
            stored_image = self.storage.resolve_image(image_id)
        except ImageServiceError:
            return False

        removed = self.storage.remove_images(*stored_image.paths)

        logger.info(
            "Deleted images for image ID",
            extra={"image_id": image_id, "removed": [path.name for path in removed]},
        )
        return True
