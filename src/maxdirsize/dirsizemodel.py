from __future__ import annotations

import dataclasses
from typing import Union

BYTES_PER_MB = 1024 * 1024


@dataclasses.dataclass(frozen=True)
class FileEntry:
    """A regular file found during a scan."""

    path: str
    size: int
    modified_at: int


@dataclasses.dataclass(frozen=True)
class DirectoryEntry:
    """A directory found strictly inside the scan root."""

    path: str


Entry = Union[FileEntry, DirectoryEntry]


@dataclasses.dataclass(frozen=True)
class Inventory:
    """Everything one scan found below the root, plus the summed file size."""

    root: str
    entries: tuple[Entry, ...] = ()
    total_size: int = 0

    @property
    def files(self) -> list[FileEntry]:
        """Return the file entries in enumeration order."""
        return [entry for entry in self.entries if isinstance(entry, FileEntry)]

    @property
    def directories(self) -> list[DirectoryEntry]:
        """Return the directory entries in enumeration order."""
        return [entry for entry in self.entries if isinstance(entry, DirectoryEntry)]


@dataclasses.dataclass(frozen=True)
class Policy:
    """Size ceiling and low-water mark for a directory tree."""

    max_size_bytes: int
    margin_fraction: float = 0.85
    count_failed_deletions: bool = True

    def __post_init__(self) -> None:
        if self.max_size_bytes <= 0:
            raise ValueError(f"max size must be positive: {self.max_size_bytes}")

        if not 0.0 <= self.margin_fraction <= 1.0:
            raise ValueError(f"margin must be within [0, 1]: {self.margin_fraction}")

    @classmethod
    def from_megabytes(
        cls,
        max_size_mb: int,
        margin_percent: int = 85,
        *,
        count_failed_deletions: bool = True,
    ) -> Policy:
        """
        Build a Policy from configuration units.

        Args:
            max_size_mb: The ceiling in megabytes (1024 * 1024 bytes).
            margin_percent: The low-water mark as a percentage, 0 to 100.

        Keyword Args:
            count_failed_deletions: Subtract the size of a file that could not
                be deleted from the running total. Defaults to True.

        Raises:
            ValueError: When the margin is outside [0, 100] or the size is
                not positive.
        """
        if not 0 <= margin_percent <= 100:
            raise ValueError(f"margin must be within [0, 100]: {margin_percent}")

        return cls(
            max_size_bytes=max_size_mb * BYTES_PER_MB,
            margin_fraction=margin_percent / 100,
            count_failed_deletions=count_failed_deletions,
        )


@dataclasses.dataclass(frozen=True)
class EvictionPlan:
    """Outcome of planning: whether to clean up, and the oldest-first queue."""

    needed: bool
    ordered_victims: tuple[FileEntry, ...] = ()
    target_bytes: int = 0


@dataclasses.dataclass(frozen=True)
class EvictionResult:
    """The running total after eviction and the files actually deleted."""

    total_after: int
    removed: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class TickSummary:
    """What a single tick saw and did."""

    total_before: int
    total_after: int
    file_count: int
    cleanup_needed: bool = False
    files_removed: tuple[str, ...] = ()
    directories_removed: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Return a one line report of the tick."""
        return (
            f"{to_megabytes(self.total_before):.2f} MB in {self.file_count} files"
            f" -> {to_megabytes(self.total_after):.2f} MB"
            f" ({len(self.files_removed)} files,"
            f" {len(self.directories_removed)} directories removed)"
        )


def to_megabytes(size_bytes: int) -> float:
    """Convert bytes to (binary) megabytes for reporting."""
    return size_bytes / BYTES_PER_MB
