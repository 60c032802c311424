from __future__ import annotations

import logging
import os

from .dirsizemodel import DirectoryEntry
from .dirsizemodel import Entry
from .dirsizemodel import FileEntry
from .dirsizemodel import Inventory


class ScanError(OSError):
    """The scan could not produce a complete inventory."""


class DirectoryScanner:
    """Walk a directory tree and inventory its files and subdirectories."""

    logger = logging.getLogger(__name__)

    def scan(self, root: str) -> Inventory:
        """
        Scan the given root and return an inventory of everything below it.

        Directories are walked from an explicit stack, so sibling order is
        whatever the filesystem returns. Files whose metadata cannot be read
        and subdirectories that cannot be listed are logged and skipped.

        Args:
            root: The directory to scan.

        Raises:
            ScanError: When the root cannot be listed, or a file has no usable
                modification or creation timestamp.
        """
        root = os.path.abspath(root)
        entries: list[Entry] = []
        total_size = 0
        pending = [root]

        while pending:
            dirpath = pending.pop()

            try:
                children = self._list_directory(dirpath)

            except OSError as error:
                if dirpath == root:
                    raise ScanError(f"Cannot list '{root}': {error}") from error

                self.logger.error("Error listing directory '%s': %s", dirpath, error)
                continue

            if dirpath != root:
                entries.append(DirectoryEntry(dirpath))

            for child in children:
                if self._is_directory(child):
                    pending.append(child.path)
                    continue

                file_entry = self._build_file_entry(child)
                if file_entry is None:
                    continue

                entries.append(file_entry)
                total_size += file_entry.size

        self.logger.debug("Scanned %s entries in '%s'", len(entries), root)

        return Inventory(root=root, entries=tuple(entries), total_size=total_size)

    def _list_directory(self, dirpath: str) -> list[os.DirEntry[str]]:
        """
        Return the direct children of a directory.

        Raises:
            OSError
        """
        with os.scandir(dirpath) as iterator:
            return list(iterator)

    def _is_directory(self, child: os.DirEntry[str]) -> bool:
        """True if the child is a real directory. Symlinks are not followed."""
        try:
            return child.is_dir(follow_symlinks=False)

        except OSError as error:
            self.logger.error("Error reading metadata: '%s', %s", child.path, error)
            return False

    def _build_file_entry(self, child: os.DirEntry[str]) -> FileEntry | None:
        """Stat a child and model it, None when it is not a readable file."""
        try:
            if not child.is_file(follow_symlinks=False):
                self.logger.debug("Ignoring '%s', not a regular file", child.path)
                return None

            stat_result = child.stat(follow_symlinks=False)

        except OSError as error:
            # Removed or unreadable between listing and stat
            self.logger.error("Error reading metadata: '%s', %s", child.path, error)
            return None

        return FileEntry(
            path=child.path,
            size=stat_result.st_size,
            modified_at=self._get_modified_at(child.path, stat_result),
        )

    @staticmethod
    def _get_modified_at(path: str, stat_result: os.stat_result) -> int:
        """
        Return the modified timestamp, falling back to the creation timestamp.

        Raises:
            ScanError: When neither timestamp is available.
        """
        for attribute in ("st_mtime", "st_birthtime"):
            timestamp = getattr(stat_result, attribute, None)
            if timestamp is not None:
                return int(timestamp)

        raise ScanError(f"No modified or created timestamp for '{path}'")
