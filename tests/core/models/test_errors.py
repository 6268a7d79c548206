import pytest

from core.models.errors import ErrorKind, ImageServiceError
from core.utils.constants import ERROR_CODE_EMPTY_FILE


def test_error_code_defaults_to_kind() -> None:
    exc = ImageServiceError(kind=ErrorKind.IO_FAILED, message="Unable to store image")

    assert exc.kind is ErrorKind.IO_FAILED
    assert exc.error_code == "IO_FAILED"
    assert exc.details == {}
    assert str(exc) == "Unable to store image"


def test_explicit_error_code_and_details() -> None:
    exc = ImageServiceError(
        kind=ErrorKind.VALIDATION_FAILED,
        message="File cannot be empty",
        error_code=ERROR_CODE_EMPTY_FILE,
        details={"size": 0},
    )

    assert exc.error_code == ERROR_CODE_EMPTY_FILE
    assert exc.details == {"size": 0}


def test_repr_includes_kind_and_code() -> None:
    exc = ImageServiceError(kind=ErrorKind.PROCESSING_FAILED, message="bad")

    assert repr(exc) == (
        "ImageServiceError(kind=PROCESSING_FAILED, error_code='PROCESSING_FAILED', message='bad')"
    )


def test_arguments_are_keyword_only() -> None:
    with pytest.raises(TypeError):
        ImageServiceError(ErrorKind.IO_FAILED, "positional")  # type: ignore[misc]


def test_error_kinds_are_closed_set() -> None:
    assert {kind.value for kind in ErrorKind} == {
        "VALIDATION_FAILED",
        "PROCESSING_FAILED",
        "IO_FAILED",
        "PATH_TRAVERSAL_REJECTED",
    }
