"""Source/target file entities and the overwrite policy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ArtifactDecision(Enum):
    """Whether a target artifact should be (re)written."""

    WRITE = "write"
    SKIP = "skip"


@dataclass(frozen=True)
class SourceFile:
    """Qualifying source file captured during enumeration."""

    name: str
    path: Path
    modified_at: float | None

    @classmethod
    def from_path(cls, path: Path) -> SourceFile:
        """Capture name, absolute path and modification time of ``path``."""
        absolute = path.absolute()
        try:
            modified_at: float | None = absolute.stat().st_mtime
        except OSError:
            modified_at = None
        return cls(name=absolute.name, path=absolute, modified_at=modified_at)


@dataclass(frozen=True)
class TargetArtifact:
    """Output file expected for a source file."""

    path: Path
    exists: bool
    modified_at: float | None = None


def target_name(source_name: str, source_extension: str, target_extension: str) -> str:
    """Swap the source extension of ``source_name`` for the target extension."""
    if source_name.endswith(source_extension):
        source_name = source_name[: -len(source_extension)]
    return f"{source_name}{target_extension}"


def derive_target(
    source: SourceFile,
    target_dir: Path,
    source_extension: str = ".less",
    target_extension: str = ".css",
) -> TargetArtifact:
    """Derive the target artifact for ``source`` rooted at ``target_dir``."""
    path = target_dir.absolute() / target_name(
        source.name, source_extension, target_extension
    )
    try:
        info = path.stat()
    except OSError:
        return TargetArtifact(path=path, exists=False)
    return TargetArtifact(path=path, exists=True, modified_at=info.st_mtime)


def decide_artifact(
    source: SourceFile,
    target: TargetArtifact,
    overwrite: bool,
) -> ArtifactDecision:
    """Apply the existence-only overwrite gate.

    No content or timestamp comparison is made: an existing target is
    presumed current unless ``overwrite`` is set.
    """
    del source
    if overwrite or not target.exists:
        return ArtifactDecision.WRITE
    return ArtifactDecision.SKIP
