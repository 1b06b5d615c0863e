"""Application-layer use-cases and option objects."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from pathlib import Path

from lessc_batch.application.options import CompileOptions
from lessc_batch.application.ports import CompilerInvoker, PassLogger
from lessc_batch.application.results import (
    FileOutcome,
    InvocationResult,
    InvocationSpec,
    PassOutcome,
)


def build_compile_options(
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
) -> CompileOptions:
    """Build typed compile options via lazy use-case import."""
    from lessc_batch.application.use_cases import build_compile_options as _impl

    return _impl(
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


def compile_directory(
    *,
    source_dir: Path,
    target_dir: Path,
    options: CompileOptions,
    invoker: CompilerInvoker | None = None,
    log: PassLogger | None = None,
    cancel_event: threading.Event | None = None,
) -> PassOutcome:
    """Compile every qualifying file of a directory via lazy use-case import."""
    from lessc_batch.application.use_cases import compile_directory as _impl

    return _impl(
        source_dir=source_dir,
        target_dir=target_dir,
        options=options,
        invoker=invoker,
        log=log,
        cancel_event=cancel_event,
    )


def compile_files(
    *,
    source_dir: Path,
    target_dir: Path,
    included_files: Iterable[str],
    options: CompileOptions,
    invoker: CompilerInvoker | None = None,
    log: PassLogger | None = None,
    cancel_event: threading.Event | None = None,
) -> PassOutcome:
    """Compile pre-selected files via lazy use-case import."""
    from lessc_batch.application.use_cases import compile_files as _impl

    return _impl(
        source_dir=source_dir,
        target_dir=target_dir,
        included_files=included_files,
        options=options,
        invoker=invoker,
        log=log,
        cancel_event=cancel_event,
    )


__all__ = [
    "CompileOptions",
    "CompilerInvoker",
    "FileOutcome",
    "InvocationResult",
    "InvocationSpec",
    "PassLogger",
    "PassOutcome",
    "build_compile_options",
    "compile_directory",
    "compile_files",
]
