"""
End-to-end flows through the three services against a real temporary root.
"""

import uuid
from unittest.mock import patch

import pytest

from core.models.errors import ErrorKind, ImageServiceError
from core.models.image import SignatureStatus, UploadCandidate
from core.models.settings import StorageSettings
from core.utils.signature import classify_signature
from handlers.delete_image.service import DeleteService
from handlers.get_image.service import GetService
from handlers.upload_image.service import UploadService


@pytest.fixture
def services(storage_settings):
    return (
        UploadService(storage_settings),
        GetService(storage_settings),
        DeleteService(storage_settings),
    )


def test_store_get_delete_round_trip(services, sample_jpeg_bytes, upload_root) -> None:
    uploader, getter, deleter = services
    candidate = UploadCandidate(
        data=sample_jpeg_bytes,
        content_type="image/jpeg",
        declared_size=len(sample_jpeg_bytes),
    )

    image_id = uploader.store_image(candidate)

    assert len(image_id) == 36
    assert uuid.UUID(image_id)
    assert (upload_root / f"{image_id}.png").is_file()
    assert (upload_root / f"{image_id}-thumbnail.png").is_file()

    original = getter.read_image(image_id)
    thumbnail = getter.read_image(image_id, thumbnail=True)
    assert original is not None and thumbnail is not None
    assert original != thumbnail

    deleter.delete_images([f"https://cdn.example.com/images/view/{image_id}?thumbnail=true"])

    assert getter.get_image(image_id) is None
    assert getter.get_image(image_id, thumbnail=True) is None

    # Second delete of the same list is harmless
    deleter.delete_images([f"https://cdn.example.com/images/view/{image_id}"])


def test_thumbnail_failure_leaves_no_files(services, sample_png_bytes, upload_root) -> None:
    uploader, getter, _ = services
    real_resize = uploader.transformer.resize_and_encode

    def fail_on_crop(image, **kwargs):
        if kwargs.get("crop"):
            raise ImageServiceError(
                kind=ErrorKind.PROCESSING_FAILED, message="Unable to process image"
            )
        return real_resize(image, **kwargs)

    with patch.object(uploader.transformer, "resize_and_encode", side_effect=fail_on_crop):
        with pytest.raises(ImageServiceError) as exc_info:
            uploader.store_image(UploadCandidate(data=sample_png_bytes, content_type="image/png"))

    assert exc_info.value.kind is ErrorKind.PROCESSING_FAILED
    assert list(upload_root.iterdir()) == []


def test_text_declared_as_png_is_rejected(services, upload_root) -> None:
    uploader, _, _ = services
    candidate = UploadCandidate(
        data=b"Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
        content_type="image/png",
    )

    with pytest.raises(ImageServiceError) as exc_info:
        uploader.store_image(candidate)

    assert exc_info.value.kind is ErrorKind.VALIDATION_FAILED
    assert not upload_root.exists()


def test_traversal_get_returns_nothing(services, tmp_path) -> None:
    _, getter, _ = services
    secret = tmp_path / "secret.png"
    secret.write_bytes(b"\x89PNG\r\n\x1a\nsecret")

    assert getter.get_image("../../etc/passwd") is None
    assert getter.get_image("../secret") is None


def test_riff_without_webp_marker_is_unrecognized() -> None:
    result = classify_signature(b"RIFF\x10\x00\x00\x00WAVEfmt ")

    assert result.status is SignatureStatus.UNRECOGNIZED


def test_services_share_configured_format(tmp_path, sample_png_bytes) -> None:
    settings = StorageSettings(upload_root=tmp_path / "webp-root", output_format="webp")
    image_id = UploadService(settings).store_image(
        UploadCandidate(data=sample_png_bytes, content_type="image/png")
    )

    content = GetService(settings).read_image(image_id)

    assert content is not None
    assert classify_signature(content).image_format.value == "webp"

    DeleteService(settings).delete_images([image_id])
    assert list((tmp_path / "webp-root").iterdir()) == []
