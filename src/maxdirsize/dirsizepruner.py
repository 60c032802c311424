from __future__ import annotations

import logging
import os


class DirectoryPruner:
    """Remove directories that no longer hold any tracked files."""

    logger = logging.getLogger(__name__)

    def prune(self, dir_file_count: dict[str, int]) -> list[str]:
        """
        Remove every directory whose tracked file count dropped to zero.

        Candidates are removed deepest first so a parent emptied along with
        its children goes in the same pass. Removal is not recursive; a
        directory holding anything the scan did not track stays and the
        failure is logged.

        Args:
            dir_file_count: Per-directory file counts after eviction.

        Returns:
            The directories that were removed.
        """
        candidates = [path for path, count in dir_file_count.items() if count <= 0]
        candidates.sort(key=lambda path: (-path.count(os.sep), path))

        removed: list[str] = []

        for directory in candidates:
            try:
                os.rmdir(directory)

            except OSError as error:
                self.logger.error(
                    "Error removing directory: '%s', %s", directory, error
                )
                continue

            self.logger.info("removed directory: %s", directory)
            removed.append(directory)

        return removed
