"""Sequencing of build steps and the three top-level tasks.

Steps run strictly in order. The first failing step stops the pipeline; the
remaining steps are recorded as skipped and nothing is rolled back.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from maxos_builder.config import BuildConfig
from maxos_builder.domain import PipelineReport, StepResult, StepState
from maxos_builder.logging import LoggerFactory, operation_context

from .bootloader import acquire_bootloader
from .emulator import launch_emulator
from .exceptions import BuildError
from .files import remove_tree
from .iso import install_bios_stages, master_iso
from .staging import stage_iso_tree

log = LoggerFactory.for_system()


@dataclass(frozen=True)
class Step:
    name: str
    action: Callable[[], Optional[StepResult]]


class Pipeline:
    """An ordered list of named steps executed fail-fast."""

    def __init__(self, name: str):
        self.name = name
        self.steps: list[Step] = []

    def add(self, name: str, action: Callable[[], Optional[StepResult]]) -> Pipeline:
        self.steps.append(Step(name, action))
        return self

    def execute(self) -> PipelineReport:
        report = PipelineReport(name=self.name)
        failed = False
        for step in self.steps:
            if failed:
                report.steps.append(StepResult(name=step.name, state=StepState.SKIPPED))
                continue
            start_time = time.time()
            try:
                with operation_context(step.name, pipeline=self.name):
                    result = step.action()
            except KeyboardInterrupt:
                log.warning(f"{self.name}: step '{step.name}' interrupted")
                raise
            except (BuildError, OSError) as error:
                failed = True
                report.steps.append(
                    StepResult(
                        name=step.name,
                        state=StepState.FAILED,
                        error=error,
                        duration_seconds=round(time.time() - start_time, 2),
                    )
                )
                continue
            if result is None:
                result = StepResult(name=step.name)
            result.name = step.name
            result.duration_seconds = round(time.time() - start_time, 2)
            report.steps.append(result)
        return report


def clean(config: BuildConfig) -> StepResult:
    """Delete the whole output tree; succeeds if it is already gone."""
    removed = remove_tree(config.target_path)
    if removed:
        log.info(f"Removed {config.target_path}")
    else:
        log.info(f"{config.target_path} does not exist, nothing to clean")
    return StepResult(name="clean", details={"removed": removed})


def clean_pipeline(config: BuildConfig) -> Pipeline:
    return Pipeline("clean").add("clean", lambda: clean(config))


def acquire_pipeline(config: BuildConfig) -> Pipeline:
    return Pipeline("acquire-bootloader").add(
        "acquire-bootloader", lambda: acquire_bootloader(config)
    )


def run_pipeline(config: BuildConfig, kernel: Path) -> Pipeline:
    """Bootloader, staging, ISO mastering, BIOS install, then QEMU."""
    return (
        Pipeline("run")
        .add("acquire-bootloader", lambda: acquire_bootloader(config))
        .add("stage", lambda: stage_iso_tree(config, kernel))
        .add("master-iso", lambda: master_iso(config))
        .add("bios-install", lambda: install_bios_stages(config))
        .add("qemu", lambda: launch_emulator(config))
    )
