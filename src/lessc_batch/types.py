"""Shared type aliases for compilation modules."""

from __future__ import annotations

from typing import Literal

type FileStatus = Literal["success", "skipped", "failed"]
type FailureKind = Literal["launch", "execution", "timeout"]
