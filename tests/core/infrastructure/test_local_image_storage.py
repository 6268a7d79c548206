from unittest.mock import MagicMock

import pytest

from core.infrastructure.adapters.filesystem_adapter import FilesystemAdapter
from core.infrastructure.filesystem.local_image_storage import LocalImageStorage
from core.models.errors import ErrorKind, ImageServiceError
from core.utils.constants import (
    ERROR_CODE_DIRECTORY_CREATE_FAILED,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_WRITE_FAILED,
)


@pytest.fixture
def storage(upload_root) -> LocalImageStorage:
    return LocalImageStorage(root=upload_root, extension="png")


@pytest.fixture
def failing_adapter() -> MagicMock:
    adapter = MagicMock(spec=FilesystemAdapter)
    adapter.make_directories.side_effect = PermissionError("read-only")
    adapter.write_bytes.side_effect = OSError(28, "No space left on device")
    adapter.read_bytes.side_effect = OSError("I/O error")
    return adapter


class TestResolvePath:
    def test_original_and_thumbnail(self, storage, upload_root) -> None:
        stored = storage.resolve_image("abc")

        assert stored.image_id == "abc"
        assert stored.original_path == upload_root / "abc.png"
        assert stored.thumbnail_path == upload_root / "abc-thumbnail.png"

    def test_does_not_create_root(self, storage, upload_root) -> None:
        storage.resolve_path("abc")

        assert not upload_root.exists()

    @pytest.mark.parametrize(
        "image_id",
        ["", "  ", "..", "../../etc/passwd", "a/b", "a\\b", "x\x00y", None],
    )
    def test_rejects_traversal(self, storage, image_id) -> None:
        with pytest.raises(ImageServiceError) as exc_info:
            storage.resolve_path(image_id)

        assert exc_info.value.kind is ErrorKind.PATH_TRAVERSAL_REJECTED

    def test_rejected_identifier_touches_nothing(self, upload_root) -> None:
        adapter = MagicMock(spec=FilesystemAdapter)
        storage = LocalImageStorage(root=upload_root, extension="png", adapter=adapter)

        with pytest.raises(ImageServiceError):
            storage.resolve_image("../escape")

        assert adapter.mock_calls == []


class TestEnsureRoot:
    def test_creates_nested_root(self, tmp_path) -> None:
        root = tmp_path / "a" / "b" / "c"
        storage = LocalImageStorage(root=root, extension="png")

        assert storage.ensure_root() == root
        assert root.is_dir()

    def test_existing_root_is_fine(self, storage) -> None:
        storage.ensure_root()
        storage.ensure_root()

        assert storage.root.is_dir()

    def test_failure_is_io_failed(self, upload_root, failing_adapter) -> None:
        storage = LocalImageStorage(root=upload_root, extension="png", adapter=failing_adapter)

        with pytest.raises(ImageServiceError) as exc_info:
            storage.ensure_root()

        assert exc_info.value.kind is ErrorKind.IO_FAILED
        assert exc_info.value.error_code == ERROR_CODE_DIRECTORY_CREATE_FAILED


class TestReadWrite:
    def test_write_then_read(self, storage) -> None:
        storage.ensure_root()
        path = storage.resolve_path("abc")

        storage.write_image(path=path, data=b"data")

        assert storage.read_image(path=path) == b"data"

    def test_write_failure_is_io_failed(self, upload_root, failing_adapter) -> None:
        storage = LocalImageStorage(root=upload_root, extension="png", adapter=failing_adapter)

        with pytest.raises(ImageServiceError) as exc_info:
            storage.write_image(path=upload_root / "abc.png", data=b"x")

        assert exc_info.value.kind is ErrorKind.IO_FAILED
        assert exc_info.value.error_code == ERROR_CODE_IMAGE_WRITE_FAILED

    def test_read_failure_is_io_failed(self, upload_root, failing_adapter) -> None:
        storage = LocalImageStorage(root=upload_root, extension="png", adapter=failing_adapter)

        with pytest.raises(ImageServiceError) as exc_info:
            storage.read_image(path=upload_root / "abc.png")

        assert exc_info.value.error_code == ERROR_CODE_IMAGE_READ_FAILED


class TestOpenImage:
    def test_open_existing(self, storage) -> None:
        storage.ensure_root()
        path = storage.resolve_path("abc")
        path.write_bytes(b"content")

        handle = storage.open_image(path=path)

        assert handle is not None
        with handle:
            assert handle.read() == b"content"

    def test_missing_file_is_none(self, storage) -> None:
        assert storage.open_image(path=storage.resolve_path("missing")) is None

    def test_directory_is_none(self, storage, upload_root) -> None:
        (upload_root / "abc.png").mkdir(parents=True)

        assert storage.open_image(path=storage.resolve_path("abc")) is None

    def test_open_error_is_none(self, upload_root) -> None:
        adapter = MagicMock(spec=FilesystemAdapter)
        adapter.is_readable_file.return_value = True
        adapter.open_for_read.side_effect = FileNotFoundError("vanished")
        storage = LocalImageStorage(root=upload_root, extension="png", adapter=adapter)

        assert storage.open_image(path=upload_root / "abc.png") is None


class TestRemoveImages:
    def test_removes_existing_and_skips_missing(self, storage) -> None:
        storage.ensure_root()
        original, thumbnail = storage.resolve_image("abc").paths
        original.write_bytes(b"x")

        removed = storage.remove_images(original, thumbnail, None)

        assert removed == [original]
        assert not original.exists()

    def test_delete_errors_are_swallowed(self, upload_root) -> None:
        adapter = MagicMock(spec=FilesystemAdapter)
        adapter.exists.return_value = True
        adapter.delete.side_effect = [PermissionError("locked"), None]
        storage = LocalImageStorage(root=upload_root, extension="png", adapter=adapter)

        first, second = upload_root / "a.png", upload_root / "b.png"
        removed = storage.remove_images(first, second)

        assert removed == [second]
        assert adapter.delete.call_count == 2
