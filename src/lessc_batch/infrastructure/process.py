"""Subprocess-backed compiler invoker with bounded wall-clock time."""

from __future__ import annotations

import math
import os
import signal
import subprocess
import time

from lessc_batch.application.results import InvocationResult, InvocationSpec

_POSIX = os.name == "posix"

# poll() takes its timeout as a C int of milliseconds.
_MAX_WAIT_SECONDS = (2**31 - 1) / 1000

ESCAPED_OUTPUT_NOTE = (
    "output unavailable: pipes held by a descendant that escaped the kill\n"
)


class SubprocessInvoker:
    """Default ``CompilerInvoker`` implementation.

    Each call owns its child process exclusively and releases it on every
    exit path, so one instance can serve several worker threads.
    """

    def __init__(self, grace_period: float = 5.0) -> None:
        self.grace_period = grace_period

    def invoke(self, spec: InvocationSpec) -> InvocationResult:
        """Run ``spec`` and wait for completion or timeout.

        Parameters
        ----------
        spec : InvocationSpec
            Command, arguments and timeout. A timeout of ``None``, ``0`` or
            ``inf`` waits without bound.

        Returns
        -------
        InvocationResult
            Exit status with captured output. Launch errors and timeouts are
            reported in the result rather than raised.
        """
        timeout = _bounded_wait(spec.timeout)
        started = time.monotonic()
        try:
            process = subprocess.Popen(
                spec.argv(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                start_new_session=_POSIX,
            )
        except OSError as exc:
            return InvocationResult(
                returncode=None,
                elapsed=time.monotonic() - started,
                launch_error=f"{type(exc).__name__}: {exc}",
            )

        try:
            stdout, stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _terminate(process)
            try:
                stdout, stderr = process.communicate(timeout=self.grace_period)
            except subprocess.TimeoutExpired:
                # Pipes held open by an escaped descendant; stop reading.
                process.kill()
                process.wait()
                _close_pipes(process)
                stdout, stderr = "", ESCAPED_OUTPUT_NOTE
            return InvocationResult(
                returncode=process.returncode,
                stdout=stdout or "",
                stderr=stderr or "",
                elapsed=time.monotonic() - started,
                timed_out=True,
            )
        except BaseException:
            _terminate(process)
            process.wait()
            raise

        return InvocationResult(
            returncode=process.returncode,
            stdout=stdout,
            stderr=stderr,
            elapsed=time.monotonic() - started,
        )


def _terminate(process: subprocess.Popen[str]) -> None:
    """Forcibly kill the child and, on POSIX, its whole process group."""
    if _POSIX:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        return
    process.kill()


def _bounded_wait(timeout: float | None) -> float | None:
    """Map zero, infinite and unrepresentably long limits to ``None``."""
    if not timeout or math.isnan(timeout) or timeout >= _MAX_WAIT_SECONDS:
        return None
    return timeout


def _close_pipes(process: subprocess.Popen[str]) -> None:
    for pipe in (process.stdout, process.stderr):
        if pipe is not None:
            pipe.close()
