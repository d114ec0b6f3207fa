"""Compute the changes that turn one State into another."""

from itertools import groupby
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger

from hoard.models import NamedObject
from hoard.services.name_index import NameIndex
from hoard.sync.state import State
from hoard.sync.utils import Change, ChangeType


def _changeset(
    state: State,
    objects: Dict[str, NamedObject],
    make: Callable[[Path, NamedObject], Change],
) -> List[Change]:
    changes = []
    for name, paths in state.objects.items():
        obj = objects.get(name)
        if obj is None:
            continue
        changes.extend(make(path, obj) for path in paths)
    return changes


def _merge(path: Path, changes: Iterable[Change]) -> Optional[Change]:
    """Collapse every change at one path into at most one change."""
    by_type: Dict[ChangeType, List[Change]] = {}
    for change in changes:
        by_type.setdefault(change.type, []).append(change)

    creates = by_type.get(ChangeType.CREATE, [])
    deletes = by_type.get(ChangeType.DELETE, [])
    if len(creates) > 1 or len(deletes) > 1:
        raise ValueError(f"more than one create or delete for {path}")

    if ChangeType.IGNORE in by_type:
        return Change.ignore(path)
    if creates and deletes:
        new, old = creates[0].new, deletes[0].old
        if new == old:
            return None
        return Change.modify(path, old=old, new=new)
    if creates:
        return creates[0]
    if deletes:
        return deletes[0]
    return None


def resolve(desired: State, actual: State, index: NameIndex) -> List[Change]:
    """
    Diff the desired State against the actual one.

    Only names present in both States take part. Every desired path becomes a
    create and every actual path a delete; untracked paths become ignores.
    Changes are then merged per path:

    - an ignore wins over anything else at the path
    - create(new) + delete(old) becomes modify(old, new)
    - create + delete of the same object cancel out

    Returns:
        Merged changes, ordered by path
    """
    names = desired.names() & actual.names()
    objects = {name: obj for name, obj in index.by_name().items() if name in names}

    changes = _changeset(desired, objects, Change.create)
    changes += _changeset(actual, objects, Change.delete)
    changes += [Change.ignore(path) for path in actual.extra]
    changes.sort()

    result = []
    for path, group in groupby(changes, key=lambda c: c.path):
        merged = _merge(path, group)
        if merged is not None:
            result.append(merged)

    logger.debug(f"Resolved {len(result)} changes from {len(changes)} candidates")
    return result
