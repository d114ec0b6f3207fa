"""Tests for syncing a repository's working tree to a manifest."""

import json
import os
from pathlib import Path

import pytest

from hoard.exceptions import AmbiguousManifestError, InvalidManifestError
from hoard.models import ContentHash
from hoard.schemas import Manifest
from hoard.services.name_index import NameIndex
from hoard.services.sync_service import SyncService
from hoard.sync.utils import ChangeType


@pytest.fixture
def populated(repository, write_file):
    """A repository holding two objects, `alpha` and `beta`."""
    root = repository.root
    write_file(root / "inbox" / "alpha", "alpha content")
    write_file(root / "inbox" / "beta", "beta content")
    repository.ingest_paths([root / "inbox"])
    return repository


@pytest.fixture
def sync_service(populated) -> SyncService:
    return SyncService(populated)


def test_plan_empty_manifest(sync_service):
    assert sync_service.plan(Manifest({})) == []


def test_plan_creates_and_deletes(sync_service):
    changes = sync_service.plan(
        Manifest({"alpha": ["inbox/alpha", "sorted/alpha"], "beta": []})
    )

    assert [(c.path, c.type) for c in changes] == [
        (Path("inbox/beta"), ChangeType.DELETE),
        (Path("sorted/alpha"), ChangeType.CREATE),
    ]


def test_sync_moves_files(sync_service, populated):
    root = populated.root
    manifest = Manifest({"alpha": ["docs/a.txt"], "beta": ["docs/b.txt", "misc/b.txt"]})

    report = sync_service.sync(manifest)

    assert report.created == [Path("docs/a.txt"), Path("docs/b.txt"), Path("misc/b.txt")]
    assert report.deleted == [Path("inbox/alpha"), Path("inbox/beta")]
    assert report.removed_dirs == [Path("inbox")]
    assert not (root / "inbox").exists()
    assert (root / "docs" / "a.txt").read_text() == "alpha content"
    assert (root / "misc" / "b.txt").stat().st_ino == (root / "docs" / "b.txt").stat().st_ino


def test_sync_records_manifest(sync_service, populated):
    manifest = Manifest({"alpha": ["docs/a.txt"], "unknown": ["x"]})

    sync_service.sync(manifest)

    recorded = populated.read_manifest().root
    assert recorded["alpha"] == ["docs/a.txt"]
    assert recorded["beta"] == ["inbox/beta"]
    assert "unknown" not in recorded


def test_sync_is_idempotent(sync_service):
    manifest = Manifest({"alpha": ["docs/a.txt"], "beta": ["docs/b.txt"]})
    sync_service.sync(manifest)

    report = sync_service.sync(manifest)

    assert report.total_changes == 0


def test_sync_modify(sync_service, populated):
    root = populated.root

    report = sync_service.sync(Manifest({"alpha": ["inbox/beta"], "beta": []}))

    assert report.modified == [Path("inbox/beta")]
    assert report.deleted == [Path("inbox/alpha")]
    assert (root / "inbox" / "beta").read_text() == "alpha content"


def test_sync_leaves_untracked_files(sync_service, populated, write_file):
    root = populated.root
    untracked = write_file(root / "docs" / "a.txt", "mine")

    report = sync_service.sync(Manifest({"alpha": ["docs/a.txt"], "beta": ["inbox/beta"]}))

    assert report.ignored == [Path("docs/a.txt")]
    assert report.created == []
    assert untracked.read_text() == "mine"


def test_dry_run_changes_nothing(sync_service, populated):
    root = populated.root
    before = populated.read_manifest()

    report = sync_service.sync(Manifest({"alpha": ["docs/a.txt"], "beta": []}), dry_run=True)

    assert report.created == [Path("docs/a.txt")]
    assert report.deleted == [Path("inbox/alpha"), Path("inbox/beta")]
    assert (root / "inbox" / "alpha").exists()
    assert not (root / "docs").exists()
    assert populated.read_manifest() == before


def test_ambiguous_manifest_changes_nothing(sync_service, populated):
    with pytest.raises(AmbiguousManifestError):
        sync_service.sync(Manifest({"alpha": ["x"], "beta": ["x"]}))
    assert not (populated.root / "x").exists()


def test_status_after_external_change(sync_service, populated):
    root = populated.root
    assert sync_service.status().total_changes == 0

    (root / "copies").mkdir()
    os.link(root / "inbox" / "alpha", root / "copies" / "alpha")

    report = sync_service.status()
    assert report.deleted == [Path("copies/alpha")]
    assert (root / "copies" / "alpha").exists()


def test_marker_paths_are_never_synced(populated, tmp_path):
    recorded = populated.layout.manifest_path.read_text()
    manifest_file = tmp_path / "layout.json"
    manifest_file.write_text(
        json.dumps({"alpha": ["inbox/alpha", ".hoard/manifest.json"], "beta": ["inbox/beta"]})
    )

    with pytest.raises(InvalidManifestError):
        SyncService(populated).sync(Manifest.read(manifest_file))

    with pytest.raises(InvalidManifestError):
        Manifest({"alpha": ["inbox/alpha", "./.hoard/objects/by-name/beta"]})

    assert populated.layout.manifest_path.read_text() == recorded
    index = NameIndex.load(populated.layout.by_name_dir)
    assert index.get("beta").hash == ContentHash.compute(populated.root / "inbox" / "beta")


def test_status_with_backslash_in_file_name(repository, write_file):
    path = write_file(repository.root / "dir" / "a\\b.txt", "backslash")
    repository.ingest_paths([path])

    assert repository.read_manifest().root == {"a\\b.txt": ["dir/a\\b.txt"]}
    report = SyncService(repository).status()
    assert report.total_changes == 0
    assert not (repository.root / "dir" / "a").exists()
