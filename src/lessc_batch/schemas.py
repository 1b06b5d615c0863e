"""Pydantic schemas for runtime validation of compile inputs."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Largest finite per-file limit (one week).
MAX_TIMEOUT_SECONDS = 7 * 24 * 60 * 60.0


class CompileConfig(BaseModel):
    """Validated input for a batch compilation pass."""

    model_config = ConfigDict(extra="forbid")

    command: str
    arguments: tuple[str, ...] = ()
    timeout: float = Field(default=0.0, ge=0.0)
    overwrite: bool = False
    fail_on_error: bool = True
    source_extension: str = ".less"
    target_extension: str = ".css"
    workers: int = Field(default=1, ge=1)
    log_matches: bool = True

    @field_validator("command")
    @classmethod
    def _validate_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command cannot be empty.")
        return value.strip()

    @field_validator("timeout")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if math.isnan(value):
            raise ValueError("timeout must be a number.")
        if math.isinf(value):
            return 0.0
        if value > MAX_TIMEOUT_SECONDS:
            raise ValueError(
                f"timeout cannot exceed {MAX_TIMEOUT_SECONDS:.0f} seconds; "
                "use 0 or inf for no limit."
            )
        return value

    @field_validator("source_extension", "target_extension")
    @classmethod
    def _validate_extension(cls, value: str) -> str:
        if len(value) < 2 or not value.startswith("."):
            raise ValueError("extensions must start with '.' followed by a name.")
        if "/" in value or "\\" in value:
            raise ValueError("extensions cannot contain path separators.")
        return value

    @model_validator(mode="after")
    def _validate_distinct_extensions(self) -> CompileConfig:
        if self.source_extension == self.target_extension:
            raise ValueError("source and target extensions must differ.")
        return self
