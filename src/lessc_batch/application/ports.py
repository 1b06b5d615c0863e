"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from typing import Protocol

from lessc_batch.application.results import InvocationResult, InvocationSpec


class CompilerInvoker(Protocol):
    """Run one external compiler invocation."""

    def invoke(self, spec: InvocationSpec) -> InvocationResult:
        """Run the command and return its result; never raise for child failures."""


class PassLogger(Protocol):
    """Leveled logging capability injected into pass components.

    A standard library ``logging.Logger`` satisfies this protocol.
    """

    def debug(self, msg: str, *args: object) -> None:
        """Log a debug message."""

    def info(self, msg: str, *args: object) -> None:
        """Log an informational message."""

    def warning(self, msg: str, *args: object) -> None:
        """Log a warning."""

    def error(self, msg: str, *args: object) -> None:
        """Log an error."""
