from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from configparser import ConfigParser

SECTION = "maxdirsize"
REQUIRED_KEYS = ("directory", "interval_seconds", "max_size_mb")
OPTIONAL_KEYS = ("margin", "count_failed_deletions")

NEW_CONFIG = """\
[maxdirsize]
# Every key can be overridden by an environment variable of the same name in
# upper case, e.g. MAX_SIZE_MB=2048.

# The directory tree to keep under the size limit.
directory = {directory}

# Seconds to wait between cleanup runs.
interval_seconds = 60

# Size limit in megabytes (1 MB = 1024 * 1024 bytes).
max_size_mb = 1024

# Once over the limit, delete the oldest files until the tree is at or below
# this percentage of the limit. 0 to 100.
margin = 85

# Treat files that could not be deleted as removed when adding up sizes.
count_failed_deletions = true
"""


class DirSizeConfig:
    """Configuration for the DirSizeGuard."""

    logger = logging.getLogger(__name__)

    def __init__(
        self,
        filepath: str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """
        Load the configuration from an optional file and the environment.

        Environment variables take precedence over the file.

        Args:
            filepath: The path to an INI configuration file. Optional.

        Keyword Args:
            environ: The environment to read from. Defaults to os.environ.

        Raises:
            ValueError: When the file cannot be read or a value is missing or
                invalid.
        """
        self._config = ConfigParser(interpolation=None)
        self._config.add_section(SECTION)

        if filepath is not None:
            success = self._config.read(filepath)

            if not success:
                raise ValueError(f"Could not read config file at {filepath}")

            self.logger.debug("Loaded config from %s", filepath)

        self._load_environment(os.environ if environ is None else environ)
        self.validate()

    def _load_environment(self, environ: Mapping[str, str]) -> None:
        """Copy known keys from the environment, upper case names win."""
        for key in REQUIRED_KEYS + OPTIONAL_KEYS:
            value = environ.get(key.upper(), environ.get(key))
            if value is not None:
                self._config.set(SECTION, key, value)

    def validate(self) -> None:
        """
        Check every value once so errors surface before the first run.

        Raises:
            ValueError
        """
        for key in REQUIRED_KEYS:
            if not self._config.get(SECTION, key, fallback="").strip():
                raise ValueError(f"Missing required configuration value: {key}")

        if self.interval_seconds < 0:
            raise ValueError(
                f"interval_seconds must not be negative: {self.interval_seconds}"
            )

        if self.max_size_mb <= 0:
            raise ValueError(f"max_size_mb must be positive: {self.max_size_mb}")

        if not 0 <= self.margin <= 100:
            raise ValueError(f"margin must be within [0, 100]: {self.margin}")

        # configparser raises ValueError for anything that is not a boolean
        self._config.getboolean(SECTION, "count_failed_deletions", fallback=True)

    @property
    def directory(self) -> str:
        """Return the directory to keep under the limit."""
        return self._config.get(SECTION, "directory")

    @property
    def interval_seconds(self) -> int:
        """Return the seconds between runs."""
        return self._config.getint(SECTION, "interval_seconds")

    @property
    def max_size_mb(self) -> int:
        """Return the size limit in megabytes."""
        return self._config.getint(SECTION, "max_size_mb")

    @property
    def margin(self) -> int:
        """Return the low-water mark as a percentage of the limit."""
        return self._config.getint(SECTION, "margin", fallback=85)

    @property
    def count_failed_deletions(self) -> bool:
        """Return whether undeletable files still count as removed."""
        return self._config.getboolean(SECTION, "count_failed_deletions", fallback=True)


def write_new_config(filename: str) -> None:
    """Write a new config file if one does not exist."""
    if os.path.exists(filename):
        return

    config = NEW_CONFIG.format(directory=os.path.abspath("."))

    with open(filename, "w") as config_file:
        config_file.write(config)
