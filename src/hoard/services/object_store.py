"""Content-addressed object store."""

from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from hoard import file_utils
from hoard.models import ContentHash, StoredObject
from hoard.services.file_service import FileService


class ObjectStore:
    """
    A pool of files under `root`, each stored once at `root/ab/cdef...`.

    Objects are looked up both by inode and by hash. Both indices point into one
    list of StoredObjects and are rebuilt from disk on construction.
    """

    def __init__(self, root: Path, file_service: Optional[FileService] = None):
        self.root = root
        self.file_service = file_service or FileService()
        self._objects: List[StoredObject] = []
        self._by_ino: Dict[int, int] = {}
        self._by_hash: Dict[ContentHash, int] = {}
        # hashes linked into the store by this instance, in ingest order
        self.ingested: List[ContentHash] = []
        self._scan()

    def _scan(self) -> None:
        logger.debug(f"Scanning object store: {self.root}")
        if not self.root.exists():
            return
        for path in file_utils.walk_files(self.root):
            self._register(path, ContentHash.from_path_or_content(path))
        logger.debug(f"Found {len(self._objects)} stored objects")

    def _register(self, path: Path, hash: ContentHash) -> StoredObject:
        obj = StoredObject(path=path, hash=hash, ino=file_utils.inode(path))
        self._objects.append(obj)
        handle = len(self._objects) - 1
        self._by_ino[obj.ino] = handle
        self._by_hash[obj.hash] = handle
        return obj

    def _forget(self, obj: StoredObject) -> None:
        logger.warning(f"Stored object disappeared: {obj.path}")
        if self.get_by_ino(obj.ino) == obj:
            del self._by_ino[obj.ino]
        if self.get_by_hash(obj.hash) == obj:
            del self._by_hash[obj.hash]

    def _live(self, handle: Optional[int]) -> Optional[StoredObject]:
        if handle is None:
            return None
        obj = self._objects[handle]
        if not obj.path.exists():
            self._forget(obj)
            return None
        return obj

    def get_by_ino(self, ino: int) -> Optional[StoredObject]:
        handle = self._by_ino.get(ino)
        return self._objects[handle] if handle is not None else None

    def get_by_hash(self, hash: ContentHash) -> Optional[StoredObject]:
        handle = self._by_hash.get(hash)
        return self._objects[handle] if handle is not None else None

    def object_path(self, hash: ContentHash) -> Path:
        """Canonical location of hash inside the store."""
        return self.root / hash.storage_path()

    def __contains__(self, hash: ContentHash) -> bool:
        return self._live(self._by_hash.get(hash)) is not None

    def __len__(self) -> int:
        """Number of stored objects whose file still exists."""
        return sum(1 for handle in list(self._by_hash.values()) if self._live(handle) is not None)

    def ingest(self, source: Path) -> ContentHash:
        """
        Put the content of source into the store and return its hash.

        1. If source's inode is already stored, return that object's hash.
        2. If an object with the same content is stored, return its hash. The
           caller decides whether source should be relinked to it.
        3. Otherwise hardlink source into the store at its canonical path.

        Index entries whose file was removed behind the store's back are
        dropped rather than returned.

        Raises:
            FileOperationError: If source cannot be examined or linked
            HashError: If source cannot be read
        """
        ino = file_utils.inode(source)
        obj = self._live(self._by_ino.get(ino))
        if obj is not None:
            logger.debug(f"Already stored by inode: {source} ({obj.hash.short})")
            return obj.hash

        hash = ContentHash.compute(source)
        obj = self._live(self._by_hash.get(hash))
        if obj is not None:
            logger.debug(f"Already stored by content: {source} ({hash.short})")
            return hash

        destination = self.object_path(hash)
        self.file_service.link(source, destination)
        self._register(destination, hash)
        self.ingested.append(hash)
        logger.info(f"Stored object {hash.short}: {source}")
        return hash
