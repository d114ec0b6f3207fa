"""Types and utilities for syncing a working tree."""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import List, Optional

from hoard.models import NamedObject


class ChangeType(IntEnum):
    """Kinds of change; the value fixes the order of changes at one path."""

    IGNORE = 0
    CREATE = 1
    DELETE = 2
    MODIFY = 3


@dataclass(frozen=True, order=True)
class Change:
    """An executable change to the working tree.

    Produced by resolving the State a manifest asks for against the State found
    on disk. `path` is relative to the repository root.

    - CREATE: link `new` at path
    - DELETE: remove the link to `old` at path
    - MODIFY: relink path from `old` to `new`
    - IGNORE: leave untracked content at path alone
    """

    path: Path
    type: ChangeType
    old: Optional[NamedObject] = None
    new: Optional[NamedObject] = None

    @classmethod
    def ignore(cls, path: Path) -> "Change":
        return cls(path, ChangeType.IGNORE)

    @classmethod
    def create(cls, path: Path, obj: NamedObject) -> "Change":
        return cls(path, ChangeType.CREATE, new=obj)

    @classmethod
    def delete(cls, path: Path, obj: NamedObject) -> "Change":
        return cls(path, ChangeType.DELETE, old=obj)

    @classmethod
    def modify(cls, path: Path, old: NamedObject, new: NamedObject) -> "Change":
        return cls(path, ChangeType.MODIFY, old=old, new=new)

    def describe(self) -> str:
        if self.type == ChangeType.CREATE:
            return f"create: {self.path} ({self.new.name})"
        if self.type == ChangeType.DELETE:
            return f"delete: {self.path} ({self.old.name})"
        if self.type == ChangeType.MODIFY:
            return f"modify: {self.path} ({self.old.name} -> {self.new.name})"
        return f"ignore: {self.path}"


@dataclass
class SyncReport:
    """Report of changes applied to a working tree.

    Attributes:
        created: Paths linked to an object
        deleted: Paths removed
        modified: Paths relinked to a different object
        ignored: Untracked paths left alone
        removed_dirs: Directories removed because they became empty
    """

    created: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
    modified: List[Path] = field(default_factory=list)
    ignored: List[Path] = field(default_factory=list)
    removed_dirs: List[Path] = field(default_factory=list)

    def record(self, change: Change) -> None:
        bucket = {
            ChangeType.CREATE: self.created,
            ChangeType.DELETE: self.deleted,
            ChangeType.MODIFY: self.modified,
            ChangeType.IGNORE: self.ignored,
        }[change.type]
        bucket.append(change.path)

    @property
    def total_changes(self) -> int:
        """Total number of paths that were changed."""
        return len(self.created) + len(self.deleted) + len(self.modified)
