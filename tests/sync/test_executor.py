"""Tests for executing changes against a working tree."""

import os
from pathlib import Path

import pytest

from hoard.exceptions import FileOperationError
from hoard.models import ContentHash, NamedObject
from hoard.sync.executor import ChangeExecutor
from hoard.sync.utils import Change


@pytest.fixture
def stored(tmp_path, write_file):
    def _stored(name: str, content: str) -> NamedObject:
        path = write_file(tmp_path / "store" / name, content)
        return NamedObject(
            name=name, path=path, hash=ContentHash.compute(path), ino=path.stat().st_ino
        )

    return _stored


@pytest.fixture
def tree(tmp_path) -> Path:
    root = tmp_path / "tree"
    root.mkdir()
    return root


def test_ignore_leaves_path_alone(tree, write_file):
    path = write_file(tree / "untracked", "mine")
    ChangeExecutor(tree).execute(Change.ignore(Path("untracked")))
    assert path.read_text() == "mine"


def test_create_links_object(tree, stored):
    obj = stored("item", "content")
    ChangeExecutor(tree).execute(Change.create(Path("a/b/item"), obj))

    target = tree / "a" / "b" / "item"
    assert target.stat().st_ino == obj.ino
    assert target.read_text() == "content"


def test_delete_removes_link(tree, stored):
    obj = stored("item", "content")
    os.link(obj.path, tree / "item")

    ChangeExecutor(tree).execute(Change.delete(Path("item"), obj))

    assert not (tree / "item").exists()
    assert obj.path.exists()


def test_delete_missing_path_fails(tree, stored):
    obj = stored("item", "content")
    with pytest.raises(FileOperationError) as exc:
        ChangeExecutor(tree).execute(Change.delete(Path("missing"), obj))
    assert exc.value.path == tree / "missing"


def test_modify_relinks_path(tree, stored):
    old = stored("old", "old content")
    new = stored("new", "new content")
    os.link(old.path, tree / "x")

    ChangeExecutor(tree).execute(Change.modify(Path("x"), old=old, new=new))

    assert (tree / "x").stat().st_ino == new.ino
    assert (tree / "x").read_text() == "new content"
    assert old.path.read_text() == "old content"
