"""Directory checks that guard a compilation pass."""

from __future__ import annotations

import os
from pathlib import Path

from lessc_batch.errors import ConfigurationError


def check_source_dir(path: Path) -> Path:
    """Ensure ``path`` is an existing, readable directory.

    Returns
    -------
    Path
        Absolute source directory.

    Raises
    ------
    ConfigurationError
        If the directory is missing, not a directory, or not readable.
    """
    description = "Source directory containing Less files"
    absolute = path.absolute()
    if not absolute.exists():
        raise ConfigurationError(f"{description} ({absolute}) does not exist.")
    if not absolute.is_dir():
        raise ConfigurationError(f"{description} ({absolute}) is not a directory.")
    if not os.access(absolute, os.R_OK | os.X_OK):
        raise ConfigurationError(f"{description} ({absolute}) is not readable.")
    return absolute


def ensure_target_dir(path: Path) -> Path:
    """Create ``path`` if needed and return it as an absolute directory.

    Raises
    ------
    ConfigurationError
        If the directory cannot be created or is not writable.
    """
    absolute = path.absolute()
    try:
        absolute.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create target directory {absolute}: {exc}"
        ) from exc
    check_target_dir(absolute)
    return absolute


def check_target_dir(path: Path) -> None:
    """Raise ``ConfigurationError`` unless ``path`` is a writable directory."""
    if not path.is_dir():
        raise ConfigurationError(f"Target directory {path} is not a directory.")
    if not os.access(path, os.W_OK | os.X_OK):
        raise ConfigurationError(f"Target directory {path} is not writable.")
