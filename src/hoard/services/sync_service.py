"""Service for syncing a working tree to a manifest."""

from typing import List, Optional

from loguru import logger

from hoard.schemas import Manifest
from hoard.services.repository_service import Repository
from hoard.sync.executor import ChangeExecutor
from hoard.sync.reconciler import resolve
from hoard.sync.state import State
from hoard.sync.utils import Change, ChangeType, SyncReport


class SyncService:
    """Brings the working tree of a repository in line with a manifest."""

    def __init__(self, repository: Repository, executor: Optional[ChangeExecutor] = None):
        self.repository = repository
        self.executor = executor or ChangeExecutor(repository.root, repository.file_service)

    def plan(self, manifest: Manifest) -> List[Change]:
        """
        Compute the changes needed to reach the layout manifest declares.

        Raises:
            AmbiguousManifestError: If a path is listed under several names
            BrokenReferenceError: If the name index holds a dangling reference
        """
        index = self.repository.name_index
        desired = State.from_manifest(manifest, index.by_name())
        actual = self.repository.current_state()
        return resolve(desired, actual, index)

    def sync(self, manifest: Manifest, dry_run: bool = False) -> SyncReport:
        """
        Execute the plan for manifest, in order.

        There is no rollback: if a change fails, the changes before it stay
        applied and the error propagates. On success the manifest entries are
        recorded as the repository's manifest and empty directories are pruned.
        """
        changes = self.plan(manifest)
        logger.info(f"Found {sum(1 for c in changes if c.type != ChangeType.IGNORE)} changes to apply")

        report = SyncReport()
        for change in changes:
            if not dry_run:
                self.executor.execute(change)
            report.record(change)

        if dry_run:
            return report

        recorded = self.repository.read_manifest().root
        known = self.repository.name_index.by_name()
        recorded.update({name: paths for name, paths in manifest.root.items() if name in known})
        self.repository.write_manifest(Manifest(recorded))

        layout = self.repository.layout
        for directory in self.repository.file_service.remove_empty_directories(
            self.repository.root, exclude=layout.marker_dir
        ):
            logger.info(f"delete: {directory}/")
            report.removed_dirs.append(directory.relative_to(self.repository.root))

        logger.info(f"Synced {report.total_changes} paths")
        return report

    def status(self) -> SyncReport:
        """What a sync against the repository's own manifest would do."""
        return self.sync(self.repository.read_manifest(), dry_run=True)
