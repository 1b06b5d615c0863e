"""Source file selection by naming convention."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from lessc_batch.application.ports import PassLogger

logger = logging.getLogger(__name__)


def has_extension(name: str, extension: str) -> bool:
    """Return whether ``name`` ends with ``extension`` (exact, case-sensitive)."""
    return name.endswith(extension)


def is_visible(name: str) -> bool:
    """Return whether ``name`` does not start with a dot."""
    return not name.startswith(".")


def is_not_directory(directory: Path, name: str) -> bool:
    """Return whether the entry exists and is not a directory.

    Entries that vanish or cannot be stat'ed are treated as non-matching.
    """
    try:
        mode = (directory / name).stat().st_mode
    except OSError:
        return False
    return not stat.S_ISDIR(mode)


class SourceFileMatcher:
    """Decide which directory entries qualify as compiler sources."""

    def __init__(
        self,
        extension: str = ".less",
        *,
        log: PassLogger | None = None,
        log_decisions: bool = True,
    ) -> None:
        self.extension = extension
        self._log = log or logger
        self._log_decisions = log_decisions

    def accepts(self, directory: Path, name: str) -> bool:
        """Return whether ``directory / name`` is a qualifying source file.

        Parameters
        ----------
        directory : Path
            Parent directory of the entry.
        name : str
            Entry name as returned by the directory listing.

        Returns
        -------
        bool
            ``True`` if the name has the source extension, is not hidden,
            and the entry is not a directory.
        """
        match = (
            has_extension(name, self.extension)
            and is_visible(name)
            and is_not_directory(directory, name)
        )
        if self._log_decisions:
            if match:
                self._log.info("File '%s' matches; including.", name)
            else:
                self._log.info("File '%s' does not match; excluding.", name)
        return match

    def list_included(self, directory: Path) -> list[str]:
        """Return accepted entry names in directory listing order."""
        return [name for name in os.listdir(directory) if self.accepts(directory, name)]
