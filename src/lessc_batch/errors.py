"""Exception hierarchy for batch compilation."""

from __future__ import annotations


class LesscBatchError(RuntimeError):
    """Base error raised by lessc-batch.

    Attributes
    ----------
    exit_code : int
        Process exit code the CLI uses when this error ends a command.
    """

    exit_code: int = 1


class ConfigurationError(LesscBatchError):
    """Infrastructure or configuration problem that aborts the whole pass.

    Raised for a missing or unreadable source directory, a target directory
    that cannot be created or written, and invalid compile options. Never
    downgraded by the lenient failure policy.
    """

    exit_code = 2
