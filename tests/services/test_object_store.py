"""Tests for the content-addressed object store."""

from pathlib import Path

from hoard.models import ContentHash
from hoard.services.object_store import ObjectStore


def stored_files(store: ObjectStore):
    return sorted(p for p in store.root.rglob("*") if p.is_file())


def test_ingest_new_content(object_store: ObjectStore, repo_root: Path, write_file):
    source = write_file(repo_root / "file.txt", "0123456789")

    hash = object_store.ingest(source)

    assert hash == ContentHash.compute(source)
    stored = object_store.root / hash.hex[:2] / hash.hex[2:]
    assert stored_files(object_store) == [stored]
    assert stored.stat().st_ino == source.stat().st_ino
    assert hash in object_store
    assert len(object_store) == 1


def test_ingest_is_idempotent(object_store: ObjectStore, repo_root: Path, write_file):
    source = write_file(repo_root / "file.txt")

    first = object_store.ingest(source)
    second = object_store.ingest(source)

    assert first == second
    assert len(stored_files(object_store)) == 1
    assert len(object_store) == 1


def test_ingest_dedups_by_content(object_store: ObjectStore, repo_root: Path, write_file):
    a = write_file(repo_root / "a.txt", "same")
    b = write_file(repo_root / "dir" / "b.txt", "same")

    assert object_store.ingest(a) == object_store.ingest(b)
    assert len(stored_files(object_store)) == 1
    # the second source is not relinked by the store itself
    assert a.stat().st_ino != b.stat().st_ino


def test_store_rebuilds_indices_from_disk(layout, repo_root: Path, write_file):
    source = write_file(repo_root / "file.txt", "persisted")
    hash = ObjectStore(layout.by_hash_dir).ingest(source)

    reopened = ObjectStore(layout.by_hash_dir)

    stored = reopened.get_by_hash(hash)
    assert stored is not None
    assert stored.path == layout.by_hash_dir / hash.storage_path()
    assert reopened.get_by_ino(source.stat().st_ino) == stored
    assert reopened.ingest(source) == hash


def test_store_hashes_files_outside_layout(layout, write_file):
    stray = write_file(layout.by_hash_dir / "stray.txt", "stray")
    store = ObjectStore(layout.by_hash_dir)
    assert store.get_by_hash(ContentHash.compute(stray)).path == stray


def test_store_missing_root(tmp_path: Path):
    store = ObjectStore(tmp_path / "missing")
    assert len(store) == 0


def test_ingest_after_object_removed_externally(object_store: ObjectStore, repo_root: Path, write_file):
    first = write_file(repo_root / "first.txt", "content")
    hash = object_store.ingest(first)
    (object_store.root / hash.storage_path()).unlink()

    second = write_file(repo_root / "second.txt", "content")

    assert object_store.ingest(second) == hash
    stored = object_store.get_by_hash(hash)
    assert stored.path.exists()
    assert stored.ino == second.stat().st_ino


def test_removed_object_is_not_counted(object_store: ObjectStore, repo_root: Path, write_file):
    source = write_file(repo_root / "file.txt", "content")
    hash = object_store.ingest(source)
    assert object_store.ingested == [hash]

    (object_store.root / hash.storage_path()).unlink()

    assert hash not in object_store
    assert len(object_store) == 0

    assert object_store.ingest(source) == hash
    assert hash in object_store
    assert len(object_store) == 1
    assert object_store.ingested == [hash, hash]
