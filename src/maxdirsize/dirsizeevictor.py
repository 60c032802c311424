from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterable

from .dirsizemodel import EvictionResult
from .dirsizemodel import FileEntry
from .dirsizemodel import Inventory
from .dirsizemodel import Policy


class Evictor:
    """Delete the oldest files until a tree is back under its margin."""

    logger = logging.getLogger(__name__)

    def __init__(self, policy: Policy) -> None:
        """
        Initialize a new Evictor.

        Args:
            policy: The policy being enforced. When its count_failed_deletions
                is set, a file that cannot be deleted still has its size
                subtracted from the running total, so one undeletable file
                cannot hold the total above the target forever.
        """
        self._policy = policy

    def count_directory_files(self, inventory: Inventory) -> dict[str, int]:
        """
        Count the files in or under each directory strictly inside the root.

        Directories without any files are included with a count of 0 so they
        are candidates for pruning too.
        """
        dir_file_count: dict[str, int] = {}

        for entry in inventory.files:
            for directory in _ancestors(entry.path, inventory.root):
                dir_file_count[directory] = dir_file_count.get(directory, 0) + 1

        for directory_entry in inventory.directories:
            dir_file_count.setdefault(directory_entry.path, 0)

        return dir_file_count

    def evict(
        self,
        ordered_victims: Iterable[FileEntry],
        starting_total: int,
        target_bytes: int,
        dir_file_count: dict[str, int],
    ) -> EvictionResult:
        """
        Delete victims oldest first until the running total reaches the target.

        Args:
            ordered_victims: Candidate files, oldest first.
            starting_total: The total size of the tree before eviction.
            target_bytes: Stop once the running total is at or below this.
            dir_file_count: Per-directory file counts, updated in place.

        Returns:
            The running total after eviction and the paths deleted.
        """
        removed: list[str] = []
        queue = deque(ordered_victims)
        running_total = starting_total

        while queue and running_total > target_bytes:
            victim = queue.popleft()

            try:
                os.remove(victim.path)

            except OSError as error:
                self.logger.error("Error removing file: '%s', %s", victim.path, error)

                if self._policy.count_failed_deletions:
                    running_total -= victim.size

                continue

            self.logger.info("removed file: %s", victim.path)
            removed.append(victim.path)
            running_total -= victim.size

            self._release_directories(victim.path, dir_file_count)

        self.logger.debug("Eviction finished at %s bytes", running_total)

        return EvictionResult(total_after=running_total, removed=tuple(removed))

    @staticmethod
    def _release_directories(path: str, dir_file_count: dict[str, int]) -> None:
        """Decrement every tracked directory the removed file was under."""
        directory = os.path.dirname(path)

        while directory in dir_file_count:
            dir_file_count[directory] -= 1
            directory = os.path.dirname(directory)


def _ancestors(path: str, root: str) -> list[str]:
    """Return the directories between path and root, nearest first, root excluded."""
    ancestors: list[str] = []
    prefix = root.rstrip(os.sep) + os.sep
    directory = os.path.dirname(path)

    while directory != root and directory.startswith(prefix):
        ancestors.append(directory)
        directory = os.path.dirname(directory)

    return ancestors
