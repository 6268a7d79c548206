"""Thin adapter for interacting with the local filesystem."""

import os
from pathlib import Path
from typing import BinaryIO, Protocol


class FilesystemAdapterProtocol(Protocol):
    """Minimal filesystem adapter protocol (repository-facing)."""

    def make_directories(self, *, path: Path) -> None: ...

    def write_bytes(self, *, path: Path, data: bytes) -> None: ...

    def read_bytes(self, *, path: Path) -> bytes: ...

    def open_for_read(self, *, path: Path) -> BinaryIO: ...

    def is_readable_file(self, *, path: Path) -> bool: ...

    def exists(self, *, path: Path) -> bool: ...

    def delete(self, *, path: Path) -> None: ...


class FilesystemAdapter:
    """Low-level filesystem operations (mechanical, no error handling).

    This adapter:
    - Wraps pathlib/os calls
    - Does NOT handle errors (lets OSError bubble up)
    - Domain implementations catch and translate errors
    """

    def make_directories(self, *, path: Path) -> None:
        """Create a directory tree; existing directories are accepted."""
        path.mkdir(parents=True, exist_ok=True)

    def write_bytes(self, *, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def read_bytes(self, *, path: Path) -> bytes:
        return path.read_bytes()

    def open_for_read(self, *, path: Path) -> BinaryIO:
        return path.open("rb")

    def is_readable_file(self, *, path: Path) -> bool:
        return path.is_file() and os.access(path, os.R_OK)

    def exists(self, *, path: Path) -> bool:
        return path.exists()

    def delete(self, *, path: Path) -> None:
        path.unlink()
