"""Shared pytest configuration, marker assignment and fixtures."""

from __future__ import annotations

import logging
import sys
import textwrap
from collections.abc import Iterator
from pathlib import Path

import pytest

FAKE_COMPILER_SOURCE = textwrap.dedent(
    """
    import os
    import pathlib
    import sys
    import time

    source, target = pathlib.Path(sys.argv[-2]), pathlib.Path(sys.argv[-1])
    text = source.read_text(encoding="utf-8")
    if "@fail" in text:
        sys.stderr.write(f"ParseError: Unrecognised input in {source.name} on line 1\\n")
        sys.exit(1)
    if "@sleep" in text:
        source.with_suffix(".pid").write_text(str(os.getpid()), encoding="utf-8")
        time.sleep(60)
    print(f"compiled {source.name}")
    target.write_text("/* compiled */\\n" + text, encoding="utf-8")
    """
)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def fake_compiler(tmp_path: Path) -> tuple[str, tuple[str, ...]]:
    """Return ``(command, fixed_arguments)`` running a Python stand-in for lessc.

    The stand-in copies the source into the target, fails with a diagnostic
    when the source contains ``@fail`` and sleeps when it contains ``@sleep``.
    """
    script = tmp_path / "fake_lessc.py"
    script.write_text(FAKE_COMPILER_SOURCE, encoding="utf-8")
    return sys.executable, (str(script),)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers the CLI attaches so later tests do not write to closed streams."""
    yield
    package_logger = logging.getLogger("lessc_batch")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
