"""Pillow-backed implementation of ImageTransformer."""

from io import BytesIO
from typing import Any

from aws_lambda_powertools import Logger
from PIL import Image, ImageFile, ImageOps

from core.models.errors import ErrorKind, ImageServiceError
from core.repositories.image_transformer import ImageTransformer
from core.utils.constants import (
    DEFAULT_MAX_PIXELS,
    ERROR_CODE_CORRUPTED_IMAGE,
    ERROR_CODE_IMAGE_PROCESSING_FAILED,
    ERROR_CODE_IMAGE_TOO_LARGE,
    OUTPUT_FORMATS,
)

# Reject truncated uploads instead of padding them with grey pixels
ImageFile.LOAD_TRUNCATED_IMAGES = False

logger = Logger(utc=True)

_WORKING_MODES = frozenset({"L", "LA", "RGB", "RGBA"})
_NO_ALPHA_FORMATS = frozenset({"JPEG", "BMP"})
_LOSSY_FORMATS = frozenset({"JPEG", "WEBP"})
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


class PillowImageTransformer(ImageTransformer):
    """Decode, resize, crop and re-encode images with Pillow."""

    def __init__(self, *, max_pixels: int = DEFAULT_MAX_PIXELS) -> None:
        self._max_pixels = max_pixels

    def decode(self, data: bytes) -> Image.Image:
        """Fully decode ``data``; header-only parsing is not enough to trust it."""
        try:
            image = Image.open(BytesIO(data))
            width, height = image.size

            if width * height > self._max_pixels:
                logger.warning(
                    "Image exceeds pixel limit",
                    extra={"width": width, "height": height, "max_pixels": self._max_pixels},
                )
                raise ImageServiceError(
                    kind=ErrorKind.PROCESSING_FAILED,
                    message="Image dimensions are too large",
                    error_code=ERROR_CODE_IMAGE_TOO_LARGE,
                    details={"width": width, "height": height},
                )

            image.load()
            logger.debug(
                "Decoded image",
                extra={"format": image.format, "mode": image.mode, "size": image.size},
            )
            return ImageOps.exif_transpose(image)

        except _DECODE_ERRORS as exc:
            logger.error("Image decoding failed", extra={"error": str(exc)})
            raise ImageServiceError(
                kind=ErrorKind.PROCESSING_FAILED,
                message="File is not a valid or complete image",
                error_code=ERROR_CODE_CORRUPTED_IMAGE,
            ) from exc

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
        pil_format = OUTPUT_FORMATS[output_format.lower()][0]

        try:
            target = self._to_working_mode(image)

            if crop:
                target = self._center_crop(target, width, height)

            target.thumbnail((width, height), Image.Resampling.LANCZOS)

            if pil_format in _NO_ALPHA_FORMATS and target.mode not in ("L", "RGB"):
                target = target.convert("RGB")

            buffer = BytesIO()
            target.save(buffer, format=pil_format, **self._save_options(pil_format, quality))

        except (OSError, ValueError, KeyError) as exc:
            logger.error(
                "Image encoding failed",
                extra={"output_format": output_format, "error": str(exc)},
            )
            raise ImageServiceError(
                kind=ErrorKind.PROCESSING_FAILED,
                message="Unable to process image",
                error_code=ERROR_CODE_IMAGE_PROCESSING_FAILED,
            ) from exc

        logger.debug(
            "Encoded image",
            extra={"output_format": pil_format, "size": target.size, "crop": crop},
        )
        return buffer.getvalue()

    @staticmethod
    def _to_working_mode(image: Image.Image) -> Image.Image:
        """Return a copy in a mode that resamples smoothly (not palette or bilevel)."""
        if image.mode in _WORKING_MODES:
            return image.copy()

        has_alpha = "A" in image.getbands() or "transparency" in image.info
        return image.convert("RGBA" if has_alpha else "RGB")

    @staticmethod
    def _center_crop(image: Image.Image, width: int, height: int) -> Image.Image:
        """Crop the centered region matching the ``width:height`` aspect ratio."""
        src_width, src_height = image.size
        target_ratio = width / height

        if src_width / src_height > target_ratio:
            new_width = max(1, round(src_height * target_ratio))
            left = (src_width - new_width) // 2
            box = (left, 0, left + new_width, src_height)
        else:
            new_height = max(1, round(src_width / target_ratio))
            top = (src_height - new_height) // 2
            box = (0, top, src_width, top + new_height)

        return image.crop(box)

    @staticmethod
    def _save_options(pil_format: str, quality: float) -> dict[str, Any]:
        if pil_format in _LOSSY_FORMATS:
            # Pillow lossy quality scale is 1-95
            return {"quality": max(1, min(95, round(quality * 100)))}

        if pil_format == "PNG":
            return {"optimize": True}

        return {}
