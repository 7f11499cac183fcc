"""Domain models for build runs."""

from __future__ import annotations

from .models import (
    CopyAction,
    CopyOutcome,
    CopyPolicy,
    PipelineReport,
    StepResult,
    StepState,
)


__all__ = [
    "CopyAction",
    "CopyOutcome",
    "CopyPolicy",
    "PipelineReport",
    "StepResult",
    "StepState",
]
