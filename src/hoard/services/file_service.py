"""Service for the filesystem mutations hoard performs."""

import os
from pathlib import Path
from typing import List

from loguru import logger

from hoard import file_utils
from hoard.exceptions import FileOperationError


class FileService:
    """
    Service for handling hardlink and unlink operations.

    This is the only place that changes what a path links to. All failures are
    logged and raised as FileOperationError carrying the offending path.
    """

    @staticmethod
    def link(source: Path, destination: Path) -> bool:
        """
        Make destination a hardlink of source.

        - destination missing: create the link
        - destination already shares source's inode: nothing to do
        - destination holds other content: remove it, then link

        The stale file is removed before the new link is made, so the content
        behind source is never at risk. A crash between the two steps leaves
        destination missing; that window is not recovered from.

        Args:
            source: Existing file to link to
            destination: Path that should refer to source's content

        Returns:
            True if a new path was created, False if destination already
            existed (whether it was left alone or replaced)

        Raises:
            FileOperationError: If any filesystem step fails
        """
        file_utils.ensure_directory(destination.parent)

        if not destination.exists() and not destination.is_symlink():
            FileService._hard_link(source, destination)
            return True

        if file_utils.inode(source) != FileService._lstat_inode(destination):
            logger.debug(f"Replacing {destination} with link to {source}")
            FileService.delete_file(destination)
            FileService._hard_link(source, destination)

        return False

    @staticmethod
    def _lstat_inode(path: Path) -> int:
        try:
            return path.lstat().st_ino
        except OSError as e:
            raise FileOperationError("read metadata", path, e) from e

    @staticmethod
    def _hard_link(source: Path, destination: Path) -> None:
        try:
            os.link(source, destination)
        except OSError as e:
            logger.error(f"Failed to link {destination} -> {source}: {e}")
            raise FileOperationError("create link", destination, e) from e

    @staticmethod
    def delete_file(path: Path) -> None:
        """
        Delete a file.

        Raises:
            FileOperationError: If the file is missing or cannot be removed
        """
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete file {path}: {e}")
            raise FileOperationError("delete file", path, e) from e

    @staticmethod
    def remove_empty_directories(root: Path, exclude: Path) -> List[Path]:
        """
        Remove directories under root that are empty, deepest first.

        Directories emptied by removing their children are removed too. The
        root itself and the exclude subtree are never touched.

        Returns:
            Removed directories in removal order
        """
        removed = []
        for dirpath, dirnames, _ in os.walk(root, topdown=False):
            current = Path(dirpath)
            if current == root or current == exclude or exclude in current.parents:
                continue
            if file_utils.is_empty_dir(current):
                try:
                    current.rmdir()
                except OSError as e:
                    logger.error(f"Failed to remove directory {current}: {e}")
                    raise FileOperationError("remove directory", current, e) from e
                removed.append(current)
        return removed
