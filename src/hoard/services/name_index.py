"""Name index: durable, human-chosen names for stored objects."""

import fnmatch
import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from loguru import logger

from hoard import file_utils
from hoard.exceptions import (
    BrokenReferenceError,
    FileOperationError,
    InvalidNameError,
    NameConflictError,
    ObjectNotFoundError,
)
from hoard.models import ContentHash, NamedObject


def validate_name(name: str) -> str:
    """Names are single, non-hidden path components."""
    if not name or name in (".", "..") or "/" in name or "\0" in name:
        raise InvalidNameError(name)
    if name.startswith("."):
        raise InvalidNameError(name, "object names may not start with '.'")
    return name


class NameIndex:
    """
    In-memory view of the `by-name` directory.

    Each entry of the directory is one reference named after the object. A
    reference is a symlink into the object store, or the stored file itself.
    The index keeps the collected objects as a list; `by_ino`, `by_name` and
    `by_hash` are derived lookups where later entries win.
    """

    def __init__(self, directory: Path, objects: Optional[List[NamedObject]] = None):
        self.directory = directory
        self.objects: List[NamedObject] = list(objects or [])

    @classmethod
    def load(cls, directory: Path) -> "NameIndex":
        """
        Build an index from the references in directory.

        Raises:
            BrokenReferenceError: If a reference does not lead to an existing file
            FileOperationError: If the directory cannot be read
        """
        index = cls(directory)
        if not directory.exists():
            logger.debug(f"Name index directory does not exist: {directory}")
            return index

        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            raise FileOperationError("read name index", directory, e) from e

        for entry in entries:
            reference = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                continue
            index.objects.append(cls._read_reference(entry.name, reference))

        logger.debug(f"Loaded {len(index.objects)} names from {directory}")
        return index

    @staticmethod
    def _read_reference(name: str, reference: Path) -> NamedObject:
        target = reference.resolve()
        if not target.is_file():
            logger.error(f"Broken reference: {reference}")
            raise BrokenReferenceError(name, reference)
        hash = ContentHash.from_path_or_content(target)
        return NamedObject(name=name, path=target, hash=hash, ino=file_utils.inode(target))

    def __iter__(self) -> Iterator[NamedObject]:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self.objects)

    def __contains__(self, name: str) -> bool:
        return name in self.by_name()

    def by_ino(self) -> Dict[int, NamedObject]:
        return {obj.ino: obj for obj in self.objects}

    def by_name(self) -> Dict[str, NamedObject]:
        return {obj.name: obj for obj in self.objects}

    def by_hash(self) -> Dict[ContentHash, NamedObject]:
        return {obj.hash: obj for obj in self.objects}

    def names(self) -> List[str]:
        return sorted(self.by_name())

    def match(self, pattern: str) -> List[NamedObject]:
        """Objects whose name matches a shell-style pattern, sorted by name."""
        return [obj for obj in sorted(self.objects) if fnmatch.fnmatchcase(obj.name, pattern)]

    def reference_path(self, name: str) -> Path:
        return self.directory / validate_name(name)

    def add(self, name: str, target: Path) -> NamedObject:
        """
        Create a reference `name` pointing at the stored file target.

        Raises:
            InvalidNameError: If the name is invalid
            NameConflictError: If the name is already taken
            FileOperationError: If the reference cannot be written
        """
        reference = self.reference_path(name)
        if name in self or reference.is_symlink() or reference.exists():
            raise NameConflictError(name)

        file_utils.ensure_directory(self.directory)
        try:
            reference.symlink_to(os.path.relpath(target, self.directory))
        except OSError as e:
            logger.error(f"Failed to create reference {reference}: {e}")
            raise FileOperationError("create reference", reference, e) from e

        obj = self._read_reference(name, reference)
        self.objects.append(obj)
        logger.info(f"Named object {obj.hash.short}: {name}")
        return obj

    def rename(self, old: str, new: str) -> NamedObject:
        """
        Rename a reference.

        Raises:
            ObjectNotFoundError: If old does not exist
            InvalidNameError: If new is invalid
            NameConflictError: If new is already taken
            FileOperationError: If the reference cannot be renamed
        """
        obj = self.get(old)
        destination = self.reference_path(new)
        if new in self or destination.is_symlink() or destination.exists():
            raise NameConflictError(new)

        source = self.reference_path(old)
        try:
            source.rename(destination)
        except OSError as e:
            logger.error(f"Failed to rename reference {source}: {e}")
            raise FileOperationError("rename reference", source, e) from e

        renamed = NamedObject(name=new, path=obj.path, hash=obj.hash, ino=obj.ino)
        self.objects = [renamed if o.name == old else o for o in self.objects]
        logger.info(f"Renamed object {old} -> {new}")
        return renamed

    def remove(self, name: str) -> NamedObject:
        """
        Remove a reference. The stored content is left in place.

        Raises:
            ObjectNotFoundError: If the name does not exist
            FileOperationError: If the reference cannot be removed
        """
        obj = self.get(name)
        reference = self.reference_path(name)
        try:
            reference.unlink()
        except OSError as e:
            logger.error(f"Failed to remove reference {reference}: {e}")
            raise FileOperationError("remove reference", reference, e) from e

        self.objects = [o for o in self.objects if o.name != name]
        logger.info(f"Removed object name: {name}")
        return obj

    def get(self, name: str) -> NamedObject:
        obj = self.by_name().get(name)
        if obj is None:
            raise ObjectNotFoundError(name, f"no such object '{name}'")
        return obj
