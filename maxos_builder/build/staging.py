"""Assemble the ISO directory tree from Limine artifacts and a kernel binary."""

from __future__ import annotations

from pathlib import Path

from maxos_builder.config import BuildConfig
from maxos_builder.domain import CopyPolicy, StepResult
from maxos_builder.logging import LoggerFactory

from .exceptions import SourceFileMissingError
from .files import copy_files, copy_overwrite, ensure_dir

log = LoggerFactory.for_staging()


def stage_iso_tree(config: BuildConfig, kernel: Path) -> StepResult:
    """Populate ``iso/boot`` and ``iso/EFI/BOOT`` for xorriso.

    Limine's BIOS/UEFI stages and EFI stubs are copied only when absent, so
    whatever is already staged is kept. ``limine.conf`` and the kernel are
    always overwritten because they change between iterations.

    The kernel is checked first so a bad path fails before the tree is
    touched.

    Raises:
        SourceFileMissingError: the kernel, config or a Limine artifact is missing
    """
    kernel = Path(kernel)
    if not kernel.is_file():
        raise SourceFileMissingError(kernel, role="kernel binary")

    limine_boot_dir = ensure_dir(config.limine_boot_dir)
    outcomes = copy_files(
        [config.limine_dir / name for name in config.bios_artifacts],
        limine_boot_dir,
        CopyPolicy.KEEP_EXISTING,
        role="Limine artifact",
    )
    outcomes.append(
        copy_overwrite(config.limine_conf_path, limine_boot_dir, role="Limine config")
    )

    efi_dir = ensure_dir(config.efi_dir)
    outcomes.extend(
        copy_files(
            [config.limine_dir / name for name in config.efi_artifacts],
            efi_dir,
            CopyPolicy.KEEP_EXISTING,
            role="EFI binary",
        )
    )

    kernel_outcome = copy_overwrite(kernel, config.boot_dir, role="kernel binary")
    outcomes.append(kernel_outcome)

    kept = [outcome.destination.name for outcome in outcomes if not outcome.copied]
    stale = [outcome.destination.name for outcome in outcomes if outcome.stale]
    log.info(
        f"Staged {len(outcomes)} file(s) into {config.iso_root}"
        + (f", kept {len(kept)} existing" if kept else "")
    )

    return StepResult(
        name="stage",
        details={
            "outcomes": outcomes,
            "kept": kept,
            "stale": stale,
            "kernel": kernel_outcome.destination,
        },
    )
