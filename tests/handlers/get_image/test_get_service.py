import os
from unittest.mock import patch

import pytest

from core.models.image import UploadCandidate
from handlers.get_image.service import GetService
from handlers.upload_image.service import UploadService


@pytest.fixture
def service(storage_settings) -> GetService:
    return GetService(storage_settings)


@pytest.fixture
def stored_image_id(storage_settings, sample_png_bytes) -> str:
    candidate = UploadCandidate(data=sample_png_bytes, content_type="image/png")
    return UploadService(storage_settings).store_image(candidate)


class TestGetImage:
    def test_returns_original(self, service, stored_image_id, upload_root) -> None:
        handle = service.get_image(stored_image_id)

        assert handle is not None
        with handle:
            assert handle.read() == (upload_root / f"{stored_image_id}.png").read_bytes()

    def test_returns_thumbnail(self, service, stored_image_id, upload_root) -> None:
        handle = service.get_image(stored_image_id, thumbnail=True)

        assert handle is not None
        with handle:
            content = handle.read()

        assert content == (upload_root / f"{stored_image_id}-thumbnail.png").read_bytes()

    @pytest.mark.parametrize(
        "image_id",
        [None, "", "   ", "..", "../../etc/passwd", "..\\..\\windows", "a/b"],
    )
    def test_unsafe_identifiers_return_none(self, service, image_id) -> None:
        assert service.get_image(image_id) is None

    def test_traversal_never_reaches_filesystem(self, service) -> None:
        with patch.object(service.storage, "open_image") as mock_open:
            assert service.get_image("../../etc/passwd") is None

        mock_open.assert_not_called()

    def test_missing_image_returns_none(self, service) -> None:
        assert service.get_image("3f2b8c1e-0000-4000-8000-000000000000") is None

    def test_directory_returns_none(self, service, upload_root) -> None:
        (upload_root / "abc.png").mkdir(parents=True)

        assert service.get_image("abc") is None

    @pytest.mark.skipif(
        os.name != "posix" or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_unreadable_file_returns_none(self, service, stored_image_id, upload_root) -> None:
        path = upload_root / f"{stored_image_id}.png"
        path.chmod(0o000)

        try:
            assert service.get_image(stored_image_id) is None
        finally:
            path.chmod(0o644)

    def test_get_does_not_mutate_storage(self, service, stored_image_id, upload_root) -> None:
        before = sorted(p.name for p in upload_root.iterdir())

        for _ in range(3):
            handle = service.get_image(stored_image_id)
            assert handle is not None
            handle.close()

        assert sorted(p.name for p in upload_root.iterdir()) == before


class TestReadImage:
    def test_reads_bytes(self, service, stored_image_id) -> None:
        content = service.read_image(stored_image_id, thumbnail=True)

        assert content is not None
        assert content.startswith(b"\x89PNG\r\n\x1a\n")

    def test_missing_is_none(self, service) -> None:
        assert service.read_image("missing") is None
