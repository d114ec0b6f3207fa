"""Utilities for file operations."""

import hashlib
import os
from pathlib import Path
from typing import Iterator, Optional, Union

from loguru import logger

from hoard.exceptions import FileOperationError, HashError

CHUNK_SIZE = 1024 * 1024


def compute_checksum(path: Union[str, Path]) -> str:
    """
    Compute SHA-256 checksum of a file's content.

    The file is read in chunks so large files never have to fit in memory.

    Args:
        path: File to hash

    Returns:
        SHA-256 hex digest

    Raises:
        HashError: If the file cannot be opened or read
    """
    hasher = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                hasher.update(chunk)
    except OSError as e:
        logger.error(f"Failed to compute checksum: {path}: {e}")
        raise HashError(f"failed to read content: {e.strerror or e}", path) from e
    return hasher.hexdigest()


def ensure_directory(path: Path) -> None:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure

    Raises:
        FileOperationError: If directory creation fails
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory: {path}: {e}")
        raise FileOperationError("create directory", path, e) from e


def inode(path: Path) -> int:
    """Return the inode number of path, following symlinks."""
    try:
        return path.stat().st_ino
    except OSError as e:
        raise FileOperationError("read metadata", path, e) from e


def is_empty_dir(path: Path) -> bool:
    """True if path is a directory with no entries; False for anything unreadable."""
    try:
        with os.scandir(path) as it:
            return next(it, None) is None
    except OSError:
        return False


def walk_files(root: Path, exclude: Optional[Path] = None) -> Iterator[Path]:
    """
    Yield every regular file below root in sorted order, skipping the exclude subtree.

    Symlinks are not followed and are not yielded.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if current / d != exclude)
        for filename in sorted(filenames):
            path = current / filename
            if path.is_file() and not path.is_symlink():
                yield path
