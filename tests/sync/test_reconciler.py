"""Tests for resolving a desired State against the actual one."""

from pathlib import Path

import pytest

from hoard.models import ContentHash, NamedObject
from hoard.services.name_index import NameIndex
from hoard.sync.reconciler import _merge, resolve
from hoard.sync.state import State
from hoard.sync.utils import Change, ChangeType


def named(name: str, char: str, ino: int) -> NamedObject:
    hash = ContentHash(char * 64)
    return NamedObject(name=name, path=Path("/store") / hash.storage_path(), hash=hash, ino=ino)


@pytest.fixture
def objects():
    return {
        "item1": named("item1", "1", 1),
        "item2": named("item2", "2", 2),
        "item3": named("item3", "3", 3),
    }


@pytest.fixture
def index(objects) -> NameIndex:
    return NameIndex(Path("/by-name"), list(objects.values()))


def state(extra=None, **objects) -> State:
    return State(
        {name: [Path(p) for p in paths] for name, paths in objects.items()},
        [Path(p) for p in extra or []],
    )


def test_identical_states_produce_no_changes(index):
    current = state(item1=["a/item1", "b/item1"], item2=["a/item2"])
    assert resolve(current, current, index) == []


def test_create_and_delete(index, objects):
    desired = state(item1=["a/item1", "b/item1"], item2=["a/item2"])
    actual = state(item1=["a/item1"], item2=["a/item2", "c/item2"])

    changes = resolve(desired, actual, index)

    assert changes == [
        Change.create(Path("b/item1"), objects["item1"]),
        Change.delete(Path("c/item2"), objects["item2"]),
    ]


def test_same_path_different_object_is_one_modify(index, objects):
    desired = state(item1=["x"], item2=[])
    actual = state(item1=[], item2=["x"])

    changes = resolve(desired, actual, index)

    assert changes == [Change.modify(Path("x"), old=objects["item2"], new=objects["item1"])]
    assert changes[0].type == ChangeType.MODIFY


def test_untracked_path_is_ignored_over_create(index):
    desired = state(item1=["x", "y"])
    actual = state(extra=["x"], item1=[])

    changes = resolve(desired, actual, index)

    assert [(c.path, c.type) for c in changes] == [
        (Path("x"), ChangeType.IGNORE),
        (Path("y"), ChangeType.CREATE),
    ]


def test_only_names_in_both_states_take_part(index):
    # item2 only desired, item3 only on disk: neither is touched
    desired = state(item1=["a"], item2=["b"])
    actual = state(item1=["a"], item3=["c"])

    assert resolve(desired, actual, index) == []


def test_names_missing_from_index_are_skipped():
    desired = state(item1=["a"])
    actual = state(item1=[])

    assert resolve(desired, actual, NameIndex(Path("/by-name"))) == []


def test_changes_are_ordered_by_path(index, objects):
    desired = state(item1=["z", "m"], item2=["a"])
    actual = state(extra=["k"], item1=["b"], item2=[])

    changes = resolve(desired, actual, index)

    assert [c.path for c in changes] == [Path("a"), Path("b"), Path("k"), Path("m"), Path("z")]
    assert [c.type for c in changes] == [
        ChangeType.CREATE,
        ChangeType.DELETE,
        ChangeType.IGNORE,
        ChangeType.CREATE,
        ChangeType.CREATE,
    ]


def test_merge_rejects_two_creates_at_one_path(objects):
    path = Path("x")
    with pytest.raises(ValueError):
        _merge(path, [Change.create(path, objects["item1"]), Change.create(path, objects["item2"])])


def test_merge_rejects_two_deletes_at_one_path(objects):
    path = Path("x")
    with pytest.raises(ValueError):
        _merge(path, [Change.delete(path, objects["item1"]), Change.delete(path, objects["item2"])])


def test_merge_cancels_create_and_delete_of_same_object(objects):
    path = Path("x")
    changes = [Change.create(path, objects["item1"]), Change.delete(path, objects["item1"])]
    assert _merge(path, changes) is None
