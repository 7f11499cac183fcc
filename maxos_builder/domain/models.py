"""Domain objects for build runs.

Small value types shared by the file helpers, the build steps and the
pipeline report printed by the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


# ==============================================================================
# File Copy Domain
# ==============================================================================


class CopyPolicy(Enum):
    """How a staged file treats an existing destination."""

    KEEP_EXISTING = "keep-existing"  # cp -n
    OVERWRITE = "overwrite"  # cp


class CopyAction(Enum):
    COPIED = "copied"
    KEPT = "kept"


@dataclass(frozen=True)
class CopyOutcome:
    """Result of copying one file into the staging tree."""

    source: Path
    destination: Path
    action: CopyAction
    stale: bool = False  # kept file differs from its source

    @property
    def copied(self) -> bool:
        return self.action is CopyAction.COPIED


# ==============================================================================
# Pipeline Domain
# ==============================================================================


class StepState(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    """Outcome of a single pipeline step.

    ``details`` carries step-specific facts (e.g. whether a clone happened,
    which files were kept) so callers and tests can inspect what was done.
    """

    name: str
    state: StepState = StepState.SUCCEEDED
    details: dict = field(default_factory=dict)
    error: Optional[Exception] = None
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.state is StepState.SUCCEEDED


@dataclass
class PipelineReport:
    """Ordered results of a pipeline run."""

    name: str
    steps: list[StepResult] = field(default_factory=list)

    @property
    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if step.state is StepState.FAILED:
                return step
        return None

    @property
    def succeeded(self) -> bool:
        return self.failed_step is None

    @property
    def error(self) -> Optional[Exception]:
        failed = self.failed_step
        return failed.error if failed else None

    @property
    def exit_code(self) -> int:
        """Process exit status: 0, the failing tool's status, or 1."""
        error = self.error
        if error is None:
            return 0
        returncode = getattr(error, "returncode", None)
        if isinstance(returncode, int) and returncode > 0:
            return returncode
        return 1

    def step(self, name: str) -> Optional[StepResult]:
        for step in self.steps:
            if step.name == name:
                return step
        return None
