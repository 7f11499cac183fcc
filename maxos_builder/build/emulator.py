"""Boot the ISO under QEMU with split OVMF firmware."""

from __future__ import annotations

from maxos_builder.config import BuildConfig
from maxos_builder.domain import StepResult
from maxos_builder.logging import LoggerFactory

from .command_runners import find_tool, run_tool
from .exceptions import CommandFailedError, EmulatorError, SourceFileMissingError

log = LoggerFactory.for_emulator()


def qemu_command(config: BuildConfig, qemu_path: str) -> list[str]:
    return [
        qemu_path,
        "-M", config.machine,
        "-m", config.memory,
        "-drive", f"if=pflash,unit=0,format=raw,file={config.ovmf_code},readonly=on",
        "-drive", f"if=pflash,unit=1,format=raw,file={config.ovmf_vars}",
        "-cdrom", str(config.iso_file),
    ]


def launch_emulator(config: BuildConfig) -> StepResult:
    """Run QEMU in the foreground until the user closes it.

    Firmware code is attached read-only; the vars image is writable so the
    firmware can persist its settings.

    Raises:
        ToolNotFoundError: QEMU is not installed
        SourceFileMissingError: the ISO or a firmware image is missing
        EmulatorError: QEMU exited with a non-zero status
    """
    qemu_path = find_tool(config.qemu)
    for path, role in (
        (config.iso_file, "ISO image"),
        (config.ovmf_code, "firmware code image"),
        (config.ovmf_vars, "firmware vars image"),
    ):
        if not path.is_file():
            raise SourceFileMissingError(path, role=role)

    log.info(f"Booting {config.iso_file} ({config.machine}, {config.memory})")
    try:
        run_tool(qemu_command(config, qemu_path))
    except CommandFailedError as error:
        raise EmulatorError(config.qemu, error) from error
    return StepResult(name="qemu", details={"iso_file": config.iso_file})
