"""Application use-cases orchestrating batch compilation passes."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path

from pydantic import ValidationError

from lessc_batch.adapters.artifacts import (
    ArtifactDecision,
    SourceFile,
    decide_artifact,
    derive_target,
)
from lessc_batch.adapters.matchers import SourceFileMatcher
from lessc_batch.application.options import CompileOptions
from lessc_batch.application.ports import CompilerInvoker, PassLogger
from lessc_batch.application.results import FileOutcome, InvocationSpec, PassOutcome
from lessc_batch.errors import ConfigurationError
from lessc_batch.infrastructure.filesystem import (
    check_source_dir,
    check_target_dir,
    ensure_target_dir,
)
from lessc_batch.infrastructure.process import SubprocessInvoker
from lessc_batch.schemas import CompileConfig

logger = logging.getLogger(__name__)


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
    """Build a validated option object from command/API params.

    Raises
    ------
    ConfigurationError
        If any parameter fails validation.
    """
    try:
        config = CompileConfig(
            command=command,
            arguments=tuple(arguments),
            timeout=timeout,
            overwrite=overwrite,
            fail_on_error=fail_on_error,
            source_extension=source_extension,
            target_extension=target_extension,
            workers=workers,
            log_matches=log_matches,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid compile options: {exc}") from exc
    return CompileOptions(
        command=config.command,
        arguments=config.arguments,
        timeout=config.timeout,
        overwrite=config.overwrite,
        fail_on_error=config.fail_on_error,
        source_extension=config.source_extension,
        target_extension=config.target_extension,
        workers=config.workers,
        log_matches=config.log_matches,
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
    """Use-case: select qualifying files in ``source_dir`` and compile them."""
    log = log or logger
    source_dir = check_source_dir(source_dir)
    matcher = SourceFileMatcher(
        options.source_extension,
        log=log,
        log_decisions=options.log_matches,
    )
    try:
        included = matcher.list_included(source_dir)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to list source directory {source_dir}: {exc}"
        ) from exc
    return compile_files(
        source_dir=source_dir,
        target_dir=target_dir,
        included_files=included,
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
    """Use-case: compile already-selected files and aggregate the outcome.

    Parameters
    ----------
    source_dir : Path
        Existing directory holding ``included_files``.
    target_dir : Path
        Output directory, created when absent.
    included_files : Iterable[str]
        Bare entry names of ``source_dir`` accepted by the matcher.
        Duplicates are compiled once.
    options : CompileOptions
        Command, timeout, overwrite flag and failure policy.
    invoker : CompilerInvoker | None, optional
        Process runner; defaults to ``SubprocessInvoker``.
    log : PassLogger | None, optional
        Logging capability; defaults to this module's logger.
    cancel_event : threading.Event | None, optional
        When set, no further invocations start.

    Returns
    -------
    PassOutcome
        Per-file outcomes in input order plus the overall verdict.

    Raises
    ------
    ConfigurationError
        If the source directory is unusable, a name is not a bare entry
        name, or the target directory cannot be created or becomes unusable
        during the pass.
    """
    log = log or logger
    names = list(dict.fromkeys(included_files))
    for name in names:
        _check_entry_name(name)
    source_dir = check_source_dir(source_dir)
    target_dir = ensure_target_dir(target_dir)
    pass_ = _CompilationPass(
        source_dir=source_dir,
        target_dir=target_dir,
        options=options,
        invoker=invoker or SubprocessInvoker(),
        log=log,
        cancel_event=cancel_event or threading.Event(),
    )
    log.info(
        "Compiling %d file(s) from %s into %s.", len(names), source_dir, target_dir
    )
    if options.workers > 1 and len(names) > 1:
        pass_.run_parallel(names, options.workers)
    else:
        pass_.run_sequential(names)
    return pass_.outcome(names)


def _check_entry_name(name: str) -> None:
    separators = [sep for sep in (os.sep, os.altsep, "/") if sep]
    if name in ("", ".", "..") or any(sep in name for sep in separators):
        raise ConfigurationError(
            f"'{name}' is not a file name inside the source directory."
        )


class _CompilationPass:
    """Mutable per-pass state; outcomes are recorded once per file."""

    def __init__(
        self,
        *,
        source_dir: Path,
        target_dir: Path,
        options: CompileOptions,
        invoker: CompilerInvoker,
        log: PassLogger,
        cancel_event: threading.Event,
    ) -> None:
        self.source_dir = source_dir
        self.target_dir = target_dir
        self.options = options
        self.invoker = invoker
        self.log = log
        self.cancel_event = cancel_event
        self._abort = threading.Event()
        self._lock = threading.Lock()
        self._outcomes: dict[str, FileOutcome] = {}

    def run_sequential(self, names: list[str]) -> None:
        for name in names:
            self.compile_one(name)

    def run_parallel(self, names: list[str], workers: int) -> None:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.compile_one, name) for name in names]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in done:
                exc = future.exception()
                if exc is not None:
                    self._abort.set()
                    for pending in futures:
                        pending.cancel()
                    raise exc

    def compile_one(self, name: str) -> None:
        if self._abort.is_set():
            return
        source = SourceFile.from_path(self.source_dir / name)
        target = derive_target(
            source,
            self.target_dir,
            self.options.source_extension,
            self.options.target_extension,
        )

        if self.cancel_event.is_set():
            self._record(
                FileOutcome(
                    name=name,
                    status="skipped",
                    source_path=source.path,
                    target_path=target.path,
                    reason="cancelled",
                )
            )
            return

        decision = decide_artifact(source, target, self.options.overwrite)
        if decision is ArtifactDecision.SKIP:
            self.log.info("Target file '%s' exists; skipping '%s'.", target.path.name, name)
            self._record(
                FileOutcome(
                    name=name,
                    status="skipped",
                    source_path=source.path,
                    target_path=target.path,
                    reason="target exists",
                )
            )
            return

        try:
            check_target_dir(self.target_dir)
        except ConfigurationError:
            self._abort.set()
            raise
        if self._abort.is_set():
            return

        spec = InvocationSpec(
            command=self.options.command,
            arguments=(*self.options.arguments, str(source.path), str(target.path)),
            timeout=self.options.timeout or None,
        )
        self.log.info("Compiling '%s' to '%s'.", name, target.path.name)
        result = self.invoker.invoke(spec)
        if result.stdout.strip():
            self.log.debug("Output of %s for '%s':\n%s", spec.command, name, result.stdout)

        if result.succeeded:
            self.log.debug("Compiled '%s' in %.2fs.", name, result.elapsed)
            self._record(
                FileOutcome(
                    name=name,
                    status="success",
                    source_path=source.path,
                    target_path=target.path,
                )
            )
            return

        reason = result.describe_failure()
        diagnostics = (
            result.launch_error if result.failure_kind == "launch" else result.stderr
        ) or ""
        report = self.log.error if self.options.fail_on_error else self.log.warning
        report("Failed to compile '%s': %s.\n%s", name, reason, diagnostics.rstrip())
        self._record(
            FileOutcome(
                name=name,
                status="failed",
                source_path=source.path,
                target_path=target.path,
                reason=reason,
                failure_kind=result.failure_kind,
                diagnostics=diagnostics,
            )
        )

    def _record(self, outcome: FileOutcome) -> None:
        with self._lock:
            if outcome.name in self._outcomes:
                raise RuntimeError(f"Outcome for '{outcome.name}' recorded twice.")
            self._outcomes[outcome.name] = outcome

    def outcome(self, names: list[str]) -> PassOutcome:
        files = tuple(self._outcomes[name] for name in names)
        failed = any(item.status == "failed" for item in files)
        cancelled = any(item.reason == "cancelled" for item in files)
        passed = not self.options.fail_on_error or not (failed or cancelled)
        if failed and not self.options.fail_on_error:
            self.log.warning(
                "Ignoring %d failed file(s), since 'fail-on-error' is off.",
                sum(1 for item in files if item.status == "failed"),
            )
        return PassOutcome(files=files, passed=passed, cancelled=cancelled)
