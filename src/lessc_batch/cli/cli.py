#!/usr/bin/env python3
"""
lessc_batch.cli.cli

Typer-based CLI for compiling a directory of Less files with an external
compiler.

Every option can also be supplied through a ``LESSC_BATCH_*`` environment
variable, which lets build scripts configure the pass without long command
lines.

Examples
--------
Compile ``src/main/resources/less`` into ``target/css`` with ``lessc``:

    lessc-batch compile

Recompile everything with a 30 second limit per file, tolerating failures:

    lessc-batch compile styles/ build/css --overwrite --timeout 30 --no-fail-on-error
"""

from __future__ import annotations

import shutil
import sys
import traceback
from pathlib import Path

import typer

from lessc_batch.application.results import PassOutcome
from lessc_batch.errors import LesscBatchError
from lessc_batch.logging_config import configure_logging

app = typer.Typer(
    name="lessc-batch",
    help="Compile a directory of Less stylesheets with an external compiler.",
    no_args_is_help=True,
)

DEFAULT_SOURCE_DIR = Path("src/main/resources/less")
DEFAULT_TARGET_DIR = Path("target/css")
DEFAULT_COMMAND = "lessc"
DOCTOR_TIMEOUT_SECONDS = 10.0

_STATUS_MARKS = {
    "success": ("✓", typer.colors.GREEN),
    "skipped": ("-", typer.colors.YELLOW),
    "failed": ("✗", typer.colors.RED),
}


def _print_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly error.

    Parameters
    ----------
    exc : Exception
        Exception raised by the pass.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.secho("\nTraceback:", dim=True, err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _print_outcome(outcome: PassOutcome) -> None:
    """Print one line per file, diagnostics of failures, and a summary."""
    for item in outcome.files:
        mark, color = _STATUS_MARKS[item.status]
        line = f"{mark} {item.name}"
        if item.reason:
            line += f" ({item.reason})"
        typer.secho(line, fg=color)
        if item.status == "failed" and item.diagnostics:
            typer.echo(item.diagnostics.rstrip(), err=True)

    summary = (
        f"{len(outcome.succeeded)} compiled, "
        f"{len(outcome.skipped)} skipped, "
        f"{len(outcome.failed)} failed"
    )
    if outcome.cancelled:
        summary += " (cancelled)"
    typer.echo(summary)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log compiler output and debug details."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    verbose : bool, default=False
        Whether to log at DEBUG level.
    """
    configure_logging(verbose=verbose)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("compile")
def compile_cmd(
    ctx: typer.Context,
    source_dir: Path = typer.Argument(
        DEFAULT_SOURCE_DIR,
        envvar="LESSC_BATCH_SOURCE_DIR",
        help="Directory containing the .less files.",
    ),
    target_dir: Path = typer.Argument(
        DEFAULT_TARGET_DIR,
        envvar="LESSC_BATCH_TARGET_DIR",
        help="Directory receiving the compiled .css files.",
    ),
    command: str = typer.Option(
        DEFAULT_COMMAND,
        "--command",
        envvar="LESSC_BATCH_COMMAND",
        help="Compiler executable name or path.",
    ),
    arguments: list[str] | None = typer.Option(
        None,
        "--arg",
        help="Fixed compiler flag placed before the file paths (repeatable).",
    ),
    timeout: float = typer.Option(
        0.0,
        "--timeout",
        min=0.0,
        envvar="LESSC_BATCH_TIMEOUT",
        help="Time limit per file in seconds (0 = unbounded).",
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        envvar="LESSC_BATCH_OVERWRITE",
        help="Recompile files whose target already exists.",
    ),
    fail_on_error: bool = typer.Option(
        True,
        "--fail-on-error/--no-fail-on-error",
        envvar="LESSC_BATCH_FAIL_ON_ERROR",
        help="Fail the pass when any file fails to compile.",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        min=1,
        envvar="LESSC_BATCH_WORKERS",
        help="Number of compiler processes to run at once.",
    ),
    source_ext: str = typer.Option(".less", "--source-ext", help="Source file extension."),
    target_ext: str = typer.Option(".css", "--target-ext", help="Target file extension."),
    quiet_matching: bool = typer.Option(
        False,
        "--quiet-matching",
        help="Do not log the include/exclude decision for each directory entry.",
    ),
) -> None:
    """Compile every qualifying file of SOURCE_DIR into TARGET_DIR.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    source_dir : Path
        Directory containing the Less sources.
    target_dir : Path
        Output directory, created when absent.
    command : str, default="lessc"
        Compiler executable.
    timeout : float, default=0.0
        Per-file time limit in seconds.
    overwrite : bool, default=False
        Whether existing targets are recompiled.
    fail_on_error : bool, default=True
        Whether a failed file fails the whole pass.

    Notes
    -----
    - Exit code 0 means the pass passed, 1 that it failed, 2 that the
      directories or options were unusable.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from lessc_batch.api import compile_less_directory

        outcome = compile_less_directory(
            source_dir=source_dir,
            target_dir=target_dir,
            command=command,
            arguments=arguments or (),
            timeout=timeout,
            overwrite=overwrite,
            fail_on_error=fail_on_error,
            source_extension=source_ext,
            target_extension=target_ext,
            workers=workers,
            log_matches=not quiet_matching,
        )
    except LesscBatchError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_error(exc, debug))

    _print_outcome(outcome)
    if not outcome.passed:
        raise typer.Exit(code=1)


@app.command("doctor")
def doctor_cmd(
    command: str = typer.Option(
        DEFAULT_COMMAND,
        "--command",
        envvar="LESSC_BATCH_COMMAND",
        help="Compiler executable name or path.",
    ),
) -> None:
    """Print toolchain versions and whether the compiler can be launched."""
    import importlib.metadata as metadata

    from lessc_batch.application.results import InvocationSpec
    from lessc_batch.infrastructure.process import SubprocessInvoker

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("lessc-batch", "typer", "pydantic"):
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    resolved = shutil.which(command)
    typer.echo(f"{command}: {resolved or '<not found on PATH>'}")

    result = SubprocessInvoker(grace_period=1.0).invoke(
        InvocationSpec(
            command=command,
            arguments=("--version",),
            timeout=DOCTOR_TIMEOUT_SECONDS,
        )
    )
    if result.succeeded:
        typer.echo(f"{command} --version: {result.stdout.strip() or '<no output>'}")
        return
    typer.secho(
        f"✗ {command} --version {result.describe_failure()}",
        fg=typer.colors.RED,
        err=True,
    )
    if result.stderr.strip():
        typer.echo(result.stderr.rstrip(), err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
