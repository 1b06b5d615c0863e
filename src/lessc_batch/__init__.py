"""Top-level API for batch Less-to-CSS compilation."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from lessc_batch.application.ports import CompilerInvoker, PassLogger
from lessc_batch.application.results import PassOutcome

__version__ = "0.1.0"


def compile_less_directory(
    source_dir: Path,
    target_dir: Path,
    *,
    command: str = "lessc",
    arguments: Iterable[str] = (),
    timeout: float = 0.0,
    overwrite: bool = False,
    fail_on_error: bool = True,
    source_extension: str = ".less",
    target_extension: str = ".css",
    workers: int = 1,
    log_matches: bool = True,
    invoker: CompilerInvoker | None = None,
    log: PassLogger | None = None,
) -> PassOutcome:
    """Compile every qualifying ``.less`` file of a directory.

    Parameters
    ----------
    source_dir : Path
        Existing directory holding the Less sources.
    target_dir : Path
        Output directory, created when absent.
    command : str, default="lessc"
        Compiler executable name or path.
    arguments : Iterable[str], default=()
        Fixed flags placed before the source and target paths.
    timeout : float, default=0.0
        Per-file time limit in seconds; ``0`` or ``inf`` waits without bound.
    overwrite : bool, default=False
        Recompile files whose target already exists.
    fail_on_error : bool, default=True
        Strict policy: any failed file fails the pass.
    source_extension : str, default=".less"
        Suffix selecting the sources.
    target_extension : str, default=".css"
        Suffix given to the compiled artifacts.
    workers : int, default=1
        Number of compiler processes allowed to run at once.
    log_matches : bool, default=True
        Log the include/exclude decision for each directory entry.
    invoker : CompilerInvoker | None, optional
        Process runner; defaults to a subprocess-backed invoker.
    log : PassLogger | None, optional
        Logger receiving pass messages; defaults to the package logger.

    Returns
    -------
    PassOutcome
        Per-file outcomes and the overall verdict.

    Raises
    ------
    ConfigurationError
        If a directory is unusable or an option is invalid.
    """
    from .api import compile_less_directory as _impl

    return _impl(
        source_dir=source_dir,
        target_dir=target_dir,
        command=command,
        arguments=arguments,
        timeout=timeout,
        overwrite=overwrite,
        fail_on_error=fail_on_error,
        source_extension=source_extension,
        target_extension=target_extension,
        workers=workers,
        log_matches=log_matches,
        invoker=invoker,
        log=log,
    )


__all__ = ["compile_less_directory"]
