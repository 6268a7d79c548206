"""Abstract contract for decoding and re-encoding images."""

from abc import ABC, abstractmethod

from PIL import Image


class ImageTransformer(ABC):
    """Contract for turning raw image bytes into derived artifacts.

    Implementations could be Pillow, libvips, an external service, etc.
    Services depend on this interface and never inspect pixel data themselves.
    """

    @abstractmethod
    def decode(self, data: bytes) -> Image.Image:
        """Fully decode raw bytes into a pixel buffer.

        Args:
            data: Encoded image bytes

        Returns:
            Decoded image

        Raises:
            ImageServiceError: PROCESSING_FAILED if the bytes are not a real image
        """

    @abstractmethod
    def resize_and_encode(
        self,
        image: Image.Image,
        *,
        width: int,
        height: int,
        quality: float,
        output_format: str,
        crop: bool = False,
    ) -> bytes:
        """Resize a decoded image and encode it.

        Args:
            image: Decoded image
            width: Maximum output width in pixels
            height: Maximum output height in pixels
            quality: Output quality factor in [0, 1]
            output_format: Output extension (e.g. 'png', 'jpg')
            crop: Center-crop to the target aspect ratio instead of fitting

        Returns:
            Encoded image bytes

        Raises:
            ImageServiceError: PROCESSING_FAILED if encoding fails
        """
