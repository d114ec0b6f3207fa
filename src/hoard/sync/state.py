"""An in-memory representation of a hoard working tree.

A State maps each object name to the paths holding that object, plus the set
of `extra` paths that hold no known object. It can be built from a manifest
(what the user wants) or from the filesystem (what is there), so the two can be
compared.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, Dict, List, Optional, Set

from loguru import logger

from hoard import file_utils
from hoard.exceptions import AmbiguousManifestError
from hoard.schemas import Manifest
from hoard.services.name_index import NameIndex


@dataclass
class State:
    """Name -> ordered paths, plus untracked paths. All paths are relative to the root."""

    objects: Dict[str, List[Path]] = field(default_factory=dict)
    extra: List[Path] = field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path, names: Collection[str]) -> "State":
        """Build a State from the manifest file at path."""
        return cls.from_manifest(Manifest.read(path), names)

    @classmethod
    def from_manifest(cls, manifest: Manifest, names: Collection[str]) -> "State":
        """
        Build the desired State declared by a manifest.

        Entries naming objects that are not in `names` are dropped with a
        warning. After that no path may be claimed by more than one name.

        Raises:
            AmbiguousManifestError: If any path is listed under two or more names
        """
        state = cls()
        for name, paths in manifest.root.items():
            if name not in names:
                logger.warning(f"No such object '{name}'")
                continue
            state.objects[name] = [Path(p) for p in paths]

        claimants: Dict[str, Set[str]] = {}
        for name, paths in state.objects.items():
            for path in paths:
                claimants.setdefault(str(path), set()).add(name)
        conflicts = {path: names for path, names in claimants.items() if len(names) > 1}
        if conflicts:
            logger.error(f"Manifest lists {len(conflicts)} path(s) under several names")
            raise AmbiguousManifestError(conflicts)

        return state

    @classmethod
    def from_filesystem(
        cls, root: Path, index: NameIndex, exclude: Optional[Path] = None
    ) -> "State":
        """
        Build the actual State of the tree under root.

        Each regular file is looked up by inode in the name index. Files that
        match are recorded under the object's name, anything else is extra.
        The exclude subtree (the repository's marker directory) is skipped.

        ```
        .
        ├── path1
        │   ├── item-name-1
        │   └── item-name-2
        ├── path2
        │   └── item-name-1
        └── path3
            └── item-name-2
        ```
        """
        state = cls()
        by_ino = index.by_ino()
        for path in file_utils.walk_files(root, exclude=exclude):
            relative = path.relative_to(root)
            obj = by_ino.get(file_utils.inode(path))
            if obj is not None:
                state.objects.setdefault(obj.name, []).append(relative)
            else:
                state.extra.append(relative)

        logger.debug(
            f"Found {sum(len(p) for p in state.objects.values())} tracked "
            f"and {len(state.extra)} untracked files under {root}"
        )
        return state

    def names(self) -> Set[str]:
        return set(self.objects)

    def paths(self) -> List[Path]:
        """Every tracked path, sorted."""
        return sorted(p for paths in self.objects.values() for p in paths)

    def to_manifest(self) -> Manifest:
        return Manifest(
            {name: [p.as_posix() for p in paths] for name, paths in sorted(self.objects.items())}
        )
