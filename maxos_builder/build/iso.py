"""Hybrid BIOS/UEFI ISO creation.

This module masters the staged tree with xorriso and then patches Limine's
BIOS boot sectors into the resulting image.
"""

from __future__ import annotations

from maxos_builder.config import BuildConfig
from maxos_builder.domain import StepResult
from maxos_builder.logging import LoggerFactory

from .command_runners import find_tool, run_checked_command, run_tool
from .exceptions import (
    BiosInstallError,
    CommandFailedError,
    IsoMasteringError,
    ToolNotFoundError,
)

log = LoggerFactory.for_iso()

# Report SORRY-class messages and worse. xorriso only aborts on FAILURE, so
# SORRY warnings are printed without failing the build.
XORRISO_REPORT_LEVEL = "SORRY"


def xorriso_command(config: BuildConfig, xorriso_path: str) -> list[str]:
    bios_cd = config.iso_relative(config.limine_boot_dir / config.bios_cd)
    uefi_cd = config.iso_relative(config.limine_boot_dir / config.uefi_cd)
    return [
        xorriso_path,
        "-report_about", XORRISO_REPORT_LEVEL,
        "-as", "mkisofs",
        "-R", "-r", "-J",
        "-b", bios_cd,
        "-no-emul-boot",
        "-boot-load-size", "4",
        "-boot-info-table",
        "-hfsplus",
        "-apm-block-size", "2048",
        "--efi-boot", uefi_cd,
        "-efi-boot-part",
        "--efi-boot-image",
        "--protective-msdos-label",
        str(config.iso_root),
        "-o", str(config.iso_file),
    ]


def bios_install_command(config: BuildConfig) -> list[str]:
    return [str(config.limine_executable), "bios-install", "--quiet", str(config.iso_file)]


def master_iso(config: BuildConfig) -> StepResult:
    """Run xorriso over ``config.iso_root`` to produce ``config.iso_file``.

    Raises:
        ToolNotFoundError: xorriso is not installed
        IsoMasteringError: xorriso failed or wrote no image
    """
    xorriso_path = find_tool(config.xorriso)
    config.iso_file.parent.mkdir(parents=True, exist_ok=True)
    log.info(f"Mastering {config.iso_file}")
    try:
        run_tool(xorriso_command(config, xorriso_path))
    except CommandFailedError as error:
        raise IsoMasteringError(config.iso_file, cause=error) from error
    if not config.iso_file.is_file():
        raise IsoMasteringError(config.iso_file, reason="xorriso produced no image")
    return StepResult(
        name="master-iso",
        details={"iso_file": config.iso_file, "size_bytes": config.iso_file.stat().st_size},
    )


def install_bios_stages(config: BuildConfig) -> StepResult:
    """Patch Limine's BIOS boot sectors into the mastered ISO.

    Raises:
        IsoMasteringError: the ISO does not exist yet
        ToolNotFoundError: the Limine installer was not built
        BiosInstallError: the Limine installer failed
    """
    if not config.iso_file.is_file():
        raise IsoMasteringError(config.iso_file, reason="ISO must be mastered before bios-install")
    if not config.limine_executable.is_file():
        raise ToolNotFoundError(str(config.limine_executable))
    log.info(f"Installing Limine BIOS stages into {config.iso_file}")
    try:
        run_checked_command(bios_install_command(config))
    except CommandFailedError as error:
        raise BiosInstallError(config.iso_file, error) from error
    return StepResult(name="bios-install", details={"iso_file": config.iso_file})
