"""Public directory-based compile API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
from typing import Optional

from lessc_batch.application.ports import CompilerInvoker, PassLogger
from lessc_batch.application.results import PassOutcome
from lessc_batch.application.use_cases import build_compile_options
from lessc_batch.application.use_cases import compile_directory


def compile_less_directory(
    source_dir: Path,
    target_dir: Path,
    command: str = "lessc",
    arguments: Iterable[str] = (),
    timeout: float = 0.0,
    overwrite: bool = False,
    fail_on_error: bool = True,
    source_extension: str = ".less",
    target_extension: str = ".css",
    workers: int = 1,
    log_matches: bool = True,
    invoker: Optional[CompilerInvoker] = None,
    log: Optional[PassLogger] = None,
) -> PassOutcome:
    """Compile every qualifying Less file of ``source_dir`` into ``target_dir``."""
    options = build_compile_options(
        command=command,
        arguments=arguments,
        timeout=timeout,
        overwrite=overwrite,
        fail_on_error=fail_on_error,
        source_extension=source_extension,
        target_extension=target_extension,
        workers=workers,
        log_matches=log_matches,
    )
    return compile_directory(
        source_dir=source_dir,
        target_dir=target_dir,
        options=options,
        invoker=invoker,
        log=log,
    )
