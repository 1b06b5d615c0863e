"""Unit tests for invocation and pass result objects."""

from __future__ import annotations

from pathlib import Path

from lessc_batch.application.results import (
    FileOutcome,
    InvocationResult,
    InvocationSpec,
    PassOutcome,
)


def test_invocation_spec_argv_prepends_command() -> None:
    """Place the command before its arguments."""
    spec = InvocationSpec(command="lessc", arguments=("/a.less", "/a.css"))
    assert spec.argv() == ["lessc", "/a.less", "/a.css"]


def test_failure_kind_classification() -> None:
    """Classify launch, timeout and execution failures separately."""
    assert InvocationResult(returncode=0).failure_kind is None
    assert InvocationResult(returncode=0).succeeded
    assert InvocationResult(returncode=None, launch_error="boom").failure_kind == "launch"
    assert InvocationResult(returncode=-9, timed_out=True).failure_kind == "timeout"
    assert InvocationResult(returncode=0, timed_out=True).failure_kind == "timeout"
    assert InvocationResult(returncode=2).failure_kind == "execution"
    assert InvocationResult(returncode=2).describe_failure() == "exited with status 2"


def test_pass_outcome_views() -> None:
    """Partition files by status while keeping order."""
    files = tuple(
        FileOutcome(name=name, status=status, source_path=Path(name), target_path=Path(name))
        for name, status in (("a", "success"), ("b", "failed"), ("c", "skipped"), ("d", "success"))
    )
    outcome = PassOutcome(files=files, passed=False)
    assert [item.name for item in outcome.succeeded] == ["a", "d"]
    assert [item.name for item in outcome.failed] == ["b"]
    assert [item.name for item in outcome.skipped] == ["c"]
