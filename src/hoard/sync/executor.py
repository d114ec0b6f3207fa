"""Apply changes to the working tree."""

from pathlib import Path
from typing import Optional

from loguru import logger

from hoard.services.file_service import FileService
from hoard.sync.utils import Change, ChangeType


class ChangeExecutor:
    """Executes Changes against the tree rooted at `root`."""

    def __init__(self, root: Path, file_service: Optional[FileService] = None):
        self.root = root
        self.file_service = file_service or FileService()

    def execute(self, change: Change) -> None:
        """
        Perform the filesystem side effect of one change.

        Raises:
            FileOperationError: If the filesystem operation fails
        """
        target = self.root / change.path

        if change.type == ChangeType.IGNORE:
            return
        if change.type == ChangeType.DELETE:
            self.file_service.delete_file(target)
        elif change.type == ChangeType.CREATE:
            self.file_service.link(change.new.path, target)
        elif change.type == ChangeType.MODIFY:
            self.file_service.link(change.new.path, target)

        logger.info(change.describe())
