"""Typed option objects shared across compilation use-cases."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompileOptions:
    """Shared compile options passed through use-cases.

    ``timeout`` is in seconds; ``0`` means the compiler may run unbounded.
    ``fail_on_error`` selects the strict failure policy.
    """

    command: str = "lessc"
    arguments: tuple[str, ...] = ()
    timeout: float = 0.0
    overwrite: bool = False
    fail_on_error: bool = True
    source_extension: str = ".less"
    target_extension: str = ".css"
    workers: int = 1
    log_matches: bool = True
