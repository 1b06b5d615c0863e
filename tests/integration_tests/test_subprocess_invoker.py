"""Integration tests for the subprocess invoker against real child processes."""

from __future__ import annotations

import os
import signal
import sys
import time
from pathlib import Path

import pytest

from lessc_batch.application.results import InvocationSpec
from lessc_batch.infrastructure.process import ESCAPED_OUTPUT_NOTE, SubprocessInvoker


def _python(code: str, timeout: float | None = None) -> InvocationSpec:
    return InvocationSpec(command=sys.executable, arguments=("-c", code), timeout=timeout)


def _grandchild_code(pid_file: Path, *, new_session: bool) -> str:
    """Child that starts a sleeping grandchild, records its pid and sleeps."""
    return (
        "import pathlib, subprocess, sys, time; "
        "grandchild = subprocess.Popen("
        "[sys.executable, '-c', 'import time; time.sleep(60)'], "
        f"start_new_session={new_session!r}); "
        f"pathlib.Path({str(pid_file)!r}).write_text(str(grandchild.pid)); "
        "time.sleep(60)"
    )


def _wait_until_gone(pid: int, deadline: float = 5.0) -> bool:
    """Return True once ``pid`` no longer runs; zombies awaiting reaping count as gone."""
    stop = time.monotonic() + deadline
    while time.monotonic() < stop:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return True
        stat = Path(f"/proc/{pid}/stat")
        try:
            if stat.read_text().rsplit(")", 1)[1].split()[0] == "Z":
                return True
        except (OSError, IndexError):
            pass
        time.sleep(0.05)
    return False


def test_successful_invocation_captures_output() -> None:
    """Capture stdout and a zero exit status."""
    result = SubprocessInvoker().invoke(_python("print('hello')"))
    assert result.succeeded
    assert result.stdout == "hello\n"
    assert result.failure_kind is None
    assert result.elapsed >= 0.0


def test_non_zero_exit_keeps_stderr_verbatim() -> None:
    """Report execution failures with the child's diagnostics."""
    result = SubprocessInvoker().invoke(
        _python("import sys; sys.stderr.write('line 1\\n  line 2\\n'); sys.exit(3)")
    )
    assert not result.succeeded
    assert result.returncode == 3
    assert result.failure_kind == "execution"
    assert result.stderr == "line 1\n  line 2\n"


def test_missing_executable_is_launch_failure(tmp_path: Path) -> None:
    """Report a missing executable distinctly from a non-zero exit."""
    spec = InvocationSpec(command=str(tmp_path / "no-such-lessc"), arguments=())
    result = SubprocessInvoker().invoke(spec)
    assert result.returncode is None
    assert result.failure_kind == "launch"
    assert "FileNotFoundError" in (result.launch_error or "")


@pytest.mark.skipif(os.name != "posix", reason="requires POSIX process groups")
def test_timeout_kills_child(tmp_path: Path) -> None:
    """Kill a child that outlives its time limit and leave no process behind."""
    pid_file = tmp_path / "child.pid"
    code = (
        "import os, pathlib, time; "
        f"pathlib.Path({str(pid_file)!r}).write_text(str(os.getpid())); "
        "time.sleep(60)"
    )
    started = time.monotonic()

    result = SubprocessInvoker(grace_period=5.0).invoke(_python(code, timeout=1.0))

    assert time.monotonic() - started < 10.0
    assert result.timed_out
    assert result.failure_kind == "timeout"
    assert not result.succeeded
    pid = int(pid_file.read_text())
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)


def test_zero_timeout_waits_unbounded() -> None:
    """Treat a zero timeout as no limit."""
    result = SubprocessInvoker().invoke(
        _python("import time; time.sleep(0.2); print('done')", timeout=0)
    )
    assert result.succeeded
    assert not result.timed_out


def test_infinite_timeout_waits_unbounded() -> None:
    """Treat an infinite timeout as no limit instead of overflowing the wait."""
    result = SubprocessInvoker().invoke(_python("print('done')", timeout=float("inf")))
    assert result.succeeded
    assert result.stdout == "done\n"


def test_timeout_beyond_poll_range_waits_unbounded() -> None:
    """Accept finite limits too large for the platform wait call."""
    result = SubprocessInvoker().invoke(_python("print('done')", timeout=3_000_000.0))
    assert result.succeeded
    assert not result.timed_out


@pytest.mark.skipif(os.name != "posix", reason="requires POSIX process groups")
def test_timeout_kills_whole_process_group(tmp_path: Path) -> None:
    """Kill grandchildren of a timed-out child so they cannot hold the pipes open."""
    pid_file = tmp_path / "grandchild.pid"
    invoker = SubprocessInvoker(grace_period=5.0)
    started = time.monotonic()

    result = invoker.invoke(_python(_grandchild_code(pid_file, new_session=False), timeout=2.0))

    assert time.monotonic() - started < 2.0 + invoker.grace_period
    assert result.timed_out
    assert result.stderr != ESCAPED_OUTPUT_NOTE
    assert _wait_until_gone(int(pid_file.read_text()))


@pytest.mark.skipif(os.name != "posix", reason="requires POSIX sessions")
def test_escaped_descendant_reports_missing_output(tmp_path: Path) -> None:
    """Stop reading after the grace period and say why the output is empty."""
    pid_file = tmp_path / "grandchild.pid"
    started = time.monotonic()
    try:
        result = SubprocessInvoker(grace_period=0.5).invoke(
            _python(_grandchild_code(pid_file, new_session=True), timeout=2.0)
        )
        assert time.monotonic() - started < 10.0
        assert result.timed_out
        assert result.failure_kind == "timeout"
        assert result.stdout == ""
        assert result.stderr == ESCAPED_OUTPUT_NOTE
    finally:
        if pid_file.exists():
            try:
                os.kill(int(pid_file.read_text()), signal.SIGKILL)
            except ProcessLookupError:
                pass
