"""Core value types for hoard.

A hoard is a content-addressed pool of files. Every file is identified by the
SHA-256 of its bytes (ContentHash), stored once under the objects directory
(StoredObject) and given a durable, human-chosen name (NamedObject).
"""

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Union

from hoard.exceptions import InvalidHashError
from hoard.file_utils import compute_checksum

HASH_PATTERN = re.compile(r"[a-f0-9]{64}")


@dataclass(frozen=True, order=True)
class ContentHash:
    """A validated SHA-256 digest rendered as 64 lowercase hex characters.

    Instances can only hold a valid digest; construction from anything else
    raises InvalidHashError. Use `hex` for the raw string and `storage_path()`
    for the location under the object store root.
    """

    hex: str

    def __post_init__(self):
        if not isinstance(self.hex, str) or not HASH_PATTERN.fullmatch(self.hex):
            raise InvalidHashError(self.hex)

    @classmethod
    def parse(cls, value: str) -> "ContentHash":
        """Validate an untrusted string as a hash."""
        return cls(value)

    @classmethod
    def compute(cls, path: Union[str, Path]) -> "ContentHash":
        """Hash the full content of the file at path.

        Raises:
            HashError: If the file cannot be opened or read
        """
        return cls(compute_checksum(path))

    @classmethod
    def from_path_or_content(cls, path: Union[str, Path]) -> "ContentHash":
        """Recover the hash from a store path, or compute it from the content.

        Files inside the object store live at `ab/cdef...`, so the last two
        path segments of such a file concatenate to its hash and the file does
        not need to be read.
        """
        parts = Path(path).parts
        if len(parts) >= 2:
            candidate = parts[-2] + parts[-1]
            if HASH_PATTERN.fullmatch(candidate):
                return cls(candidate)
        return cls.compute(path)

    def storage_path(self) -> PurePosixPath:
        """Relative location of this hash under an object store root."""
        return PurePosixPath(self.hex[:2], self.hex[2:])

    @property
    def short(self) -> str:
        return self.hex[:8]

    def __repr__(self) -> str:
        return f"ContentHash({self.short})"


@dataclass(frozen=True, order=True)
class StoredObject:
    """A file in the object store."""

    path: Path
    hash: ContentHash
    ino: int


@dataclass(frozen=True, order=True)
class NamedObject:
    """An entry of the name index: a unique name bound to stored content."""

    name: str
    path: Path
    hash: ContentHash
    ino: int
