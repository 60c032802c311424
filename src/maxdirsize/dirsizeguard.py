from __future__ import annotations

import logging
import time

from .dirsizeconfig import DirSizeConfig
from .dirsizeevictor import Evictor
from .dirsizemodel import Policy
from .dirsizemodel import TickSummary
from .dirsizeplanner import EvictionPlanner
from .dirsizepruner import DirectoryPruner
from .dirsizescanner import DirectoryScanner
from .dirsizescanner import ScanError


class DirSizeGuard:
    """Keep a directory tree under a size limit by removing its oldest files."""

    logger = logging.getLogger(__name__)

    def __init__(self, config: DirSizeConfig) -> None:
        """
        Initialize a new DirSizeGuard.

        Args:
            config: The configuration to use for this guard.

        NOTE: Two guards should not share a directory. Each run trusts its own
            scan and does not expect files to vanish underneath it.
        """
        self._config = config
        self._policy = Policy.from_megabytes(
            config.max_size_mb,
            config.margin,
            count_failed_deletions=config.count_failed_deletions,
        )
        self._scanner = DirectoryScanner()
        self._planner = EvictionPlanner()
        self._evictor = Evictor(self._policy)
        self._pruner = DirectoryPruner()

    def run_once(self) -> TickSummary | None:
        """Run the guard once."""
        return self.tick()

    def run_loop(self) -> None:
        """Run the guard until ctrl-c is pressed. This is blocking."""
        next_tick = time.time()

        self.logger.info(
            "Running cleanup loop, every %s seconds",
            self._config.interval_seconds,
        )
        try:
            while True:
                if time.time() >= next_tick:
                    self.tick()
                    next_tick = time.time() + self._config.interval_seconds

                time.sleep(0.1)

        except KeyboardInterrupt:
            self.logger.info("Guard stopped")

        except Exception as error:
            self.logger.exception("Guard stopped due to an error: %s", error)
            raise error

    def tick(self) -> TickSummary | None:
        """
        Scan the directory and clean it up when it is over the limit.

        Returns:
            A summary of the run, or None when the directory could not be
            scanned.
        """
        tic = time.perf_counter()
        directory = self._config.directory

        try:
            inventory = self._scanner.scan(directory)

        except ScanError as error:
            self.logger.error("Error while reading '%s': %s", directory, error)
            return None

        plan = self._planner.plan(inventory, self._policy)
        file_count = len(inventory.files)

        if not plan.needed:
            return TickSummary(
                total_before=inventory.total_size,
                total_after=inventory.total_size,
                file_count=file_count,
            )

        dir_file_count = self._evictor.count_directory_files(inventory)
        result = self._evictor.evict(
            plan.ordered_victims,
            inventory.total_size,
            plan.target_bytes,
            dir_file_count,
        )
        removed_directories = self._pruner.prune(dir_file_count)

        summary = TickSummary(
            total_before=inventory.total_size,
            total_after=result.total_after,
            file_count=file_count,
            cleanup_needed=True,
            files_removed=result.removed,
            directories_removed=tuple(removed_directories),
        )

        toc = time.perf_counter()
        self.logger.info("Cleanup finished in %s seconds: %s", toc - tic, summary)

        return summary
