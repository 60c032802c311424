from __future__ import annotations

import logging
import math

from .dirsizemodel import EvictionPlan
from .dirsizemodel import Inventory
from .dirsizemodel import Policy
from .dirsizemodel import to_megabytes


class EvictionPlanner:
    """Decide whether a scanned tree needs cleanup and in which order."""

    logger = logging.getLogger(__name__)

    def plan(self, inventory: Inventory, policy: Policy) -> EvictionPlan:
        """
        Build the eviction plan for an inventory.

        Cleanup is needed once the total size reaches the ceiling. The victims
        are every file, oldest modification first. Ties keep the order the
        scan found them in, which is filesystem dependent.

        Args:
            inventory: The result of a scan.
            policy: The ceiling and margin to enforce.

        Returns:
            An EvictionPlan. Its target is the size the evictor stops at.
        """
        files = inventory.files
        total_mb = to_megabytes(inventory.total_size)
        limit_mb = to_megabytes(policy.max_size_bytes)

        if inventory.total_size < policy.max_size_bytes:
            self.logger.info(
                "total size %.2f MB in %s files, limit %.2f MB",
                total_mb,
                len(files),
                limit_mb,
            )
            return EvictionPlan(needed=False)

        self.logger.info(
            "total size %.2f MB in %s files is greater than limit %.2f MB, "
            "doing cleanup of older files",
            total_mb,
            len(files),
            limit_mb,
        )

        target_bytes = math.floor(policy.margin_fraction * policy.max_size_bytes)
        victims = sorted(files, key=lambda entry: entry.modified_at)

        self.logger.debug(
            "Cleaning up to %.2f MB from %s candidates",
            to_megabytes(target_bytes),
            len(victims),
        )

        return EvictionPlan(
            needed=True,
            ordered_victims=tuple(victims),
            target_bytes=target_bytes,
        )
