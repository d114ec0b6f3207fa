"""Service for working with a hoard repository on disk."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from loguru import logger

from hoard import file_utils
from hoard.config import HoardConfig, RepositoryLayout, config as default_config
from hoard.exceptions import (
    FileOperationError,
    InvalidHashError,
    ObjectNotFoundError,
    PathNotFoundError,
    PathOutsideRepositoryError,
    RepositoryNotFoundError,
)
from hoard.models import ContentHash, NamedObject
from hoard.schemas import Manifest
from hoard.services.file_service import FileService
from hoard.services.name_index import NameIndex
from hoard.services.object_store import ObjectStore
from hoard.sync.state import State
from hoard.sync.utils import SyncReport


@dataclass
class IngestReport:
    """Result of adding paths to a repository.

    Attributes:
        stored: Hashes of content that was new to the store
        linked: Paths relinked onto content that was already stored
        named: Names created for content that had none
        paths: Every file that was ingested
    """

    stored: List[ContentHash] = field(default_factory=list)
    linked: List[Path] = field(default_factory=list)
    named: List[str] = field(default_factory=list)
    paths: List[Path] = field(default_factory=list)


class Repository:
    """
    A hoard repository rooted at `root`.

    The object store and name index are loaded on first use and kept for the
    lifetime of the instance; create one Repository per command.
    """

    def __init__(self, root: Path, app_config: Optional[HoardConfig] = None):
        app_config = app_config or default_config
        self.root = root.resolve()
        self.layout = RepositoryLayout(root=self.root, manifest_name=app_config.manifest_name)
        self.file_service = FileService()
        self._object_store: Optional[ObjectStore] = None
        self._name_index: Optional[NameIndex] = None

    @classmethod
    def init(cls, path: Path, app_config: Optional[HoardConfig] = None) -> "Repository":
        """
        Create the repository layout at path.

        Running it on an existing repository leaves its content alone.

        Raises:
            FileOperationError: If a directory cannot be created
        """
        repository = cls(path, app_config)
        for directory in (repository.layout.by_hash_dir, repository.layout.by_name_dir):
            file_utils.ensure_directory(directory)
        logger.info(f"Initialized hoard repository in {repository.root}")
        return repository

    @classmethod
    def find(cls, start: Path, app_config: Optional[HoardConfig] = None) -> "Repository":
        """
        Open the repository containing start, searching parent directories.

        Raises:
            RepositoryNotFoundError: If no parent holds a marker directory
        """
        start = start.resolve()
        marker = RepositoryLayout(root=start).marker_dir.name
        for candidate in (start, *start.parents):
            if (candidate / marker).is_dir():
                logger.debug(f"Found repository at {candidate}")
                return cls(candidate, app_config)
        raise RepositoryNotFoundError(start)

    @property
    def object_store(self) -> ObjectStore:
        if self._object_store is None:
            self._object_store = ObjectStore(self.layout.by_hash_dir, self.file_service)
        return self._object_store

    @property
    def name_index(self) -> NameIndex:
        if self._name_index is None:
            self._name_index = NameIndex.load(self.layout.by_name_dir)
        return self._name_index

    def read_manifest(self) -> Manifest:
        """The manifest recorded in the repository, empty if there is none yet."""
        if not self.layout.manifest_path.exists():
            return Manifest({})
        return Manifest.read(self.layout.manifest_path)

    def write_manifest(self, manifest: Manifest) -> None:
        manifest.write(self.layout.manifest_path)
        logger.debug(f"Wrote manifest with {len(manifest.root)} names")

    def current_state(self) -> State:
        """State of the working tree as it is on disk."""
        return State.from_filesystem(self.root, self.name_index, exclude=self.layout.marker_dir)

    def relative(self, path: Path) -> Path:
        """
        Resolve path and make it relative to the root.

        Raises:
            PathOutsideRepositoryError: If path is not below the root
        """
        resolved = path.resolve()
        if not resolved.is_relative_to(self.root):
            raise PathOutsideRepositoryError(resolved)
        return resolved.relative_to(self.root)

    def expand(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        """
        Expand files and directories into the sorted list of files they contain.

        Anything inside the marker directory is skipped.

        Raises:
            PathNotFoundError: If a path does not exist
            PathOutsideRepositoryError: If a path is not below the root
        """
        results: Dict[Path, None] = {}
        marker = self.layout.marker_dir
        for path in paths:
            path = Path(path)
            if not path.exists():
                raise PathNotFoundError(path)
            resolved = self.root / self.relative(path)
            if resolved == marker or marker in resolved.parents:
                logger.debug(f"Skipping repository metadata: {resolved}")
                continue
            if resolved.is_dir():
                for file in file_utils.walk_files(resolved, exclude=marker):
                    results[file] = None
            elif resolved.is_file():
                results[resolved] = None
        return sorted(results)

    def _unique_name(self, path: Path, hash: ContentHash) -> str:
        existing = self.name_index.by_name()
        candidates = [path.name, f"{path.stem}-{hash.short}{path.suffix}"]
        candidates += [f"{path.stem}-{hash.hex[:16]}{path.suffix}", f"{path.stem}-{hash.hex}{path.suffix}"]
        for candidate in candidates:
            if candidate not in existing and not candidate.startswith("."):
                return candidate
        # dotfiles and repeated collisions fall back to the full hash
        return hash.hex

    def ingest_paths(self, paths: Iterable[Union[str, Path]]) -> IngestReport:
        """
        Add files to the repository.

        Each file is put into the object store. A file whose content was already
        stored under another inode is relinked onto the stored copy, so every
        tracked path shares the canonical inode. Content without a name gets
        one, derived from the file name, and every ingested path is recorded in
        the manifest under its object's name.

        Raises:
            PathOutsideRepositoryError: If a path is not below the root
            FileOperationError: If a filesystem operation fails
            HashError: If a file cannot be read
        """
        report = IngestReport()
        files = self.expand(paths)
        store = self.object_store
        index = self.name_index
        manifest = self.read_manifest().root

        for path in files:
            before = len(store.ingested)
            hash = store.ingest(path)
            stored = store.get_by_hash(hash)
            if len(store.ingested) > before:
                report.stored.append(hash)

            if file_utils.inode(path) != stored.ino:
                self.file_service.link(stored.path, path)
                logger.info(f"link: {path}")
                report.linked.append(path)

            named = index.by_hash().get(hash)
            if named is None:
                named = index.add(self._unique_name(path, hash), stored.path)
                report.named.append(named.name)

            relative = path.relative_to(self.root).as_posix()
            for name, listed in manifest.items():
                if name != named.name and relative in listed:
                    listed.remove(relative)
            entry = manifest.setdefault(named.name, [])
            if relative not in entry:
                entry.append(relative)
            report.paths.append(path)

        self.write_manifest(Manifest(manifest))
        logger.info(
            f"Ingested {len(report.paths)} files: {len(report.stored)} new objects, "
            f"{len(report.linked)} relinked, {len(report.named)} named"
        )
        return report

    def apply(self) -> SyncReport:
        """
        Remove redundant links to stored content and prune empty directories.

        Working tree paths are grouped by inode. For each stored inode seen at
        more than one path, the paths listed in the manifest are kept (or the
        first path when none is listed) and the rest are deleted.

        Raises:
            FileOperationError: If a file or directory cannot be removed
        """
        report = SyncReport()
        manifest = self.read_manifest()
        expected = {self.root / p for paths in manifest.root.values() for p in paths}
        store = self.object_store

        groups: Dict[int, List[Path]] = {}
        for path in file_utils.walk_files(self.root, exclude=self.layout.marker_dir):
            ino = file_utils.inode(path)
            if store.get_by_ino(ino) is not None:
                groups.setdefault(ino, []).append(path)

        for ino, paths in sorted(groups.items()):
            if len(paths) < 2:
                continue
            keep = [p for p in paths if p in expected] or paths[:1]
            for path in paths:
                if path in keep:
                    continue
                self.file_service.delete_file(path)
                logger.info(f"delete: {path}")
                report.deleted.append(path.relative_to(self.root))

        for directory in self.file_service.remove_empty_directories(
            self.root, exclude=self.layout.marker_dir
        ):
            logger.info(f"delete: {directory}/")
            report.removed_dirs.append(directory.relative_to(self.root))

        return report

    def find_object(self, query: str) -> NamedObject:
        """
        Look up an object by working tree path, name, or hash.

        Raises:
            ObjectNotFoundError: If nothing matches
        """
        index = self.name_index
        path = Path(query)
        if path.is_file():
            obj = index.by_ino().get(file_utils.inode(path))
            if obj is not None:
                return obj

        obj = index.by_name().get(query)
        if obj is not None:
            return obj

        try:
            hash = ContentHash.parse(query)
        except InvalidHashError:
            matches = [o for o in index if len(query) >= 4 and o.hash.hex.startswith(query)]
            if len(matches) == 1:
                return matches[0]
        else:
            obj = index.by_hash().get(hash)
            if obj is not None:
                return obj

        raise ObjectNotFoundError(query)

    def rename(self, old: str, new: str) -> NamedObject:
        """Rename an object and carry its manifest entry over to the new name."""
        renamed = self.name_index.rename(old, new)
        manifest = self.read_manifest().root
        if old in manifest:
            manifest[new] = manifest.pop(old)
            self.write_manifest(Manifest(manifest))
        return renamed

    def remove(self, name: str) -> NamedObject:
        """
        Forget an object's name.

        The stored content and its working tree links stay in place; the paths
        become untracked as far as syncing is concerned.
        """
        removed = self.name_index.remove(name)
        manifest = self.read_manifest().root
        if manifest.pop(name, None) is not None:
            self.write_manifest(Manifest(manifest))
        return removed


def open_repository(path: Optional[Path] = None) -> Repository:
    """Open the repository containing path (default: the current directory)."""
    try:
        start = path or Path.cwd()
    except OSError as e:
        raise FileOperationError("read current directory", ".", e) from e
    return Repository.find(start)
