"""Utility functions for the media uploader."""

import base64
import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Length of the identifiers the service assigns
HASH_LENGTH = 12

_CHUNK_SIZE = 64 * 1024


def file_hash(path: Path) -> str:
    """Compute the short content hash the service uses for a file.

    The MD5 digest of the file is base64-encoded with the URL-safe alphabet
    (``+`` becomes ``-`` and ``/`` becomes ``_``) and cut to 12 characters.
    Identical content always gives the same identifier.

    Args:
        path: Path to a readable regular file

    Returns:
        12-character identifier

    Raises:
        OSError: If the file cannot be read
    """
    digest = hashlib.md5()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)

    short_hash = base64.urlsafe_b64encode(digest.digest()).decode("ascii")[:HASH_LENGTH]
    logger.debug(f"Hashed {path} -> {short_hash}")
    return short_hash


def list_directory(directory: Path) -> list[str]:
    """Return the immediate children of a directory, sorted by name.

    Args:
        directory: Directory to list

    Returns:
        Child paths as strings
    """
    return [str(child) for child in sorted(directory.iterdir())]
