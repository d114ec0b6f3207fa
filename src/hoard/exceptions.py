"""Exceptions raised by hoard.

Every error carries an ErrorKind so callers can match on it, and an optional
path that is rendered in front of the message.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union


class ErrorKind(str, Enum):
    """Kinds of failure a hoard operation can end with."""

    IO = "io"
    HASH = "hash"
    INVALID_FORMAT = "invalid_format"
    INVALID_MANIFEST = "invalid_manifest"
    BROKEN_REFERENCE = "broken_reference"
    AMBIGUOUS_MANIFEST = "ambiguous_manifest"
    PATH_OUTSIDE_REPOSITORY = "path_outside_repository"
    REPOSITORY_NOT_FOUND = "repository_not_found"
    INVALID_NAME = "invalid_name"
    NAME_CONFLICT = "name_conflict"
    OBJECT_NOT_FOUND = "object_not_found"
    PATH_NOT_FOUND = "path_not_found"


class HoardError(Exception):
    """Base exception for hoard operations."""

    kind: ErrorKind = ErrorKind.IO

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class FileOperationError(HoardError):
    """Raised when a filesystem operation fails."""

    kind = ErrorKind.IO

    def __init__(self, operation: str, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"failed to {operation}"
        if cause is not None:
            reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else cause
            message = f"{message}: {reason}"
        super().__init__(message, path)


class HashError(HoardError):
    """Raised when file content cannot be read to compute its hash."""

    kind = ErrorKind.HASH


class InvalidHashError(HoardError, ValueError):
    """Raised when a string is not a valid SHA-256 hex digest."""

    kind = ErrorKind.INVALID_FORMAT

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"not a valid SHA-256 hash: {value!r}")


class InvalidManifestError(HoardError):
    """Raised when a manifest file cannot be parsed or validated."""

    kind = ErrorKind.INVALID_MANIFEST


class BrokenReferenceError(HoardError):
    """Raised when a name reference points at a target that does not exist."""

    kind = ErrorKind.BROKEN_REFERENCE

    def __init__(self, name: str, path: Union[str, Path]):
        self.name = name
        super().__init__(f"reference '{name}' does not lead to an object", path)


class AmbiguousManifestError(HoardError):
    """Raised when two or more names claim the same target path."""

    kind = ErrorKind.AMBIGUOUS_MANIFEST

    def __init__(self, conflicts: Dict[str, Iterable[str]]):
        self.conflicts: Dict[str, List[str]] = {
            path: sorted(names) for path, names in sorted(conflicts.items())
        }
        lines = [
            f"  {path}: {', '.join(names)}" for path, names in self.conflicts.items()
        ]
        super().__init__("duplicate paths for entries:\n" + "\n".join(lines))


class PathOutsideRepositoryError(HoardError):
    """Raised when an operation is requested on a path outside the repository root."""

    kind = ErrorKind.PATH_OUTSIDE_REPOSITORY

    def __init__(self, path: Union[str, Path]):
        super().__init__("pathspec is not inside of hoard repository", path)


class RepositoryNotFoundError(HoardError):
    """Raised when no repository marker is found above a directory."""

    kind = ErrorKind.REPOSITORY_NOT_FOUND

    def __init__(self, start: Union[str, Path]):
        super().__init__("no hoard repository found (or any parent directory)", start)


class InvalidNameError(HoardError):
    """Raised when a string cannot be used as an object name."""

    kind = ErrorKind.INVALID_NAME

    def __init__(self, name: str, reason: str = "invalid object name"):
        self.name = name
        super().__init__(f"{reason}: {name!r}")


class NameConflictError(HoardError):
    """Raised when an object name is already taken."""

    kind = ErrorKind.NAME_CONFLICT

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"object name already exists: {name}")


class ObjectNotFoundError(HoardError):
    """Raised when no object matches a name, path or hash."""

    kind = ErrorKind.OBJECT_NOT_FOUND

    def __init__(self, query: str, message: Optional[str] = None):
        self.query = query
        super().__init__(message or f"no object matches '{query}'")


class PathNotFoundError(HoardError):
    """Raised when a path given on the command line does not exist."""

    kind = ErrorKind.PATH_NOT_FOUND

    def __init__(self, path: Union[str, Path]):
        self.pathspec = str(path)
        super().__init__(f"pathspec '{path}' did not match any files")
