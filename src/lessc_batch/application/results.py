"""Application-layer invocation and pass result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lessc_batch.types import FailureKind, FileStatus


@dataclass(frozen=True)
class InvocationSpec:
    """One external compiler call: command, arguments and time limit."""

    command: str
    arguments: tuple[str, ...]
    timeout: float | None = None

    def argv(self) -> list[str]:
        """Return the full argument vector passed to the child process."""
        return [self.command, *self.arguments]


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of a single external compiler call.

    Attributes
    ----------
    returncode : int | None
        Exit status, or ``None`` when the process never started.
    stdout : str
        Captured standard output (informational only).
    stderr : str
        Captured diagnostic output, kept verbatim.
    elapsed : float
        Wall-clock seconds between launch and completion.
    timed_out : bool
        Whether the process was killed for exceeding its time limit.
    launch_error : str | None
        Reason the process could not be started.
    """

    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    elapsed: float = 0.0
    timed_out: bool = False
    launch_error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the compiler ran to completion with exit status 0."""
        return (
            self.launch_error is None and not self.timed_out and self.returncode == 0
        )

    @property
    def failure_kind(self) -> FailureKind | None:
        """Classify a failed invocation, ``None`` for successful ones."""
        if self.launch_error is not None:
            return "launch"
        if self.timed_out:
            return "timeout"
        if self.returncode != 0:
            return "execution"
        return None

    def describe_failure(self) -> str:
        """Return a one-line human readable failure reason."""
        kind = self.failure_kind
        if kind == "launch":
            return f"launch failure: {self.launch_error}"
        if kind == "timeout":
            return f"timed out after {self.elapsed:.1f}s and was terminated"
        if kind == "execution":
            return f"exited with status {self.returncode}"
        return ""


@dataclass(frozen=True)
class FileOutcome:
    """Per-file result recorded by the orchestrator."""

    name: str
    status: FileStatus
    source_path: Path
    target_path: Path
    reason: str | None = None
    failure_kind: FailureKind | None = None
    diagnostics: str = ""


@dataclass(frozen=True)
class PassOutcome:
    """Structured outcome of one compilation pass."""

    files: tuple[FileOutcome, ...]
    passed: bool
    cancelled: bool = False

    @property
    def succeeded(self) -> tuple[FileOutcome, ...]:
        return tuple(item for item in self.files if item.status == "success")

    @property
    def skipped(self) -> tuple[FileOutcome, ...]:
        return tuple(item for item in self.files if item.status == "skipped")

    @property
    def failed(self) -> tuple[FileOutcome, ...]:
        return tuple(item for item in self.files if item.status == "failed")
