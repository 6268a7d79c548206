"""
Path sandbox helpers.

Identifiers are turned into flat file names directly under the storage root.
Every path built from an identifier must be proven to stay inside that root
before the filesystem is touched. All helpers here are lexical: none of them
access the filesystem.
"""

import os
from pathlib import Path

from core.utils.constants import FORBIDDEN_ID_SEQUENCES


def is_safe_image_id(image_id: str | None) -> bool:
    """Return True if the identifier is non-blank and cannot traverse directories."""
    if image_id is None or not image_id.strip():
        return False

    return not any(sequence in image_id for sequence in FORBIDDEN_ID_SEQUENCES)


def build_image_path(
    root: str | os.PathLike[str],
    image_id: str,
    *,
    extension: str,
    suffix: str = "",
) -> Path:
    """Build ``{root}/{image_id}{suffix}.{extension}``.

    Construction alone does not validate; callers must check the result
    with ``is_within_root``.
    """
    return Path(root) / f"{image_id}{suffix}.{extension.lstrip('.')}"


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Collapse ``.`` and ``..`` segments into a canonical absolute path."""
    return Path(os.path.normpath(os.path.abspath(path)))


def is_within_root(
    root: str | os.PathLike[str],
    candidate: str | os.PathLike[str],
) -> bool:
    """Return True iff the normalized candidate is a descendant of the normalized root."""
    normalized_root = normalize_path(root)
    normalized_candidate = normalize_path(candidate)

    return normalized_root in normalized_candidate.parents


def extract_image_id(url: str | None) -> str | None:
    """
    Extract the candidate identifier from a URL-like string.

    Examples:
        https://cdn.example.com/images/view/<id>?thumbnail=true -> <id>
        /images/<id>.png -> <id>

    The result is untrusted and must pass ``is_safe_image_id``.
    """
    if url is None or not url.strip():
        return None

    last_part = url.strip().rstrip("/").rsplit("/", 1)[-1]

    query_index = last_part.find("?")
    if query_index >= 0:
        last_part = last_part[:query_index]

    extension_index = last_part.rfind(".")
    if extension_index > 0:
        last_part = last_part[:extension_index]

    return last_part
