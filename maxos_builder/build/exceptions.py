"""Custom exceptions for build operations.

This module defines a hierarchy of exceptions for the build pipeline so the
orchestrator can report which step and which external tool failed.

Exception Hierarchy:
    BuildError (base)
        ├── ConfigError
        ├── ToolNotFoundError
        ├── CommandFailedError
        ├── AcquisitionError
        │   ├── CloneFailedError
        │   └── BootloaderBuildError
        ├── StagingError
        │   └── SourceFileMissingError
        ├── IsoError
        │   ├── IsoMasteringError
        │   └── BiosInstallError
        └── EmulatorError

Usage:
    from maxos_builder.build.exceptions import SourceFileMissingError

    if not kernel.is_file():
        raise SourceFileMissingError(kernel, role="kernel binary")
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


def _format_command(command: Sequence[object]) -> str:
    return " ".join(str(part) for part in command)


class BuildError(Exception):
    """Base exception for all build operations."""

    command: Optional[list[str]] = None
    returncode: Optional[int] = None


class ConfigError(BuildError):
    """Build configuration could not be used."""



class ToolNotFoundError(BuildError):
    """An external tool is not installed or not on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} not found")


class CommandFailedError(BuildError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: Sequence[object], returncode: int, output: str = ""):
        self.command = [str(part) for part in command]
        self.returncode = returncode
        self.output = output
        msg = f"Command failed with exit status {returncode}: {_format_command(command)}"
        if output:
            msg += f": {output}"
        super().__init__(msg)


class _ToolStepError(BuildError):
    """A build step failed because its external tool failed."""

    def __init__(self, message: str, cause: Optional[CommandFailedError] = None):
        self.cause = cause
        if cause is not None:
            self.command = cause.command
            self.returncode = cause.returncode
            tool = Path(cause.command[0]).name if cause.command else "command"
            message = f"{message} ({tool} exit status {cause.returncode})"
        super().__init__(message)


class AcquisitionError(_ToolStepError):
    """Base exception for bootloader fetch/build errors."""



class CloneFailedError(AcquisitionError):
    """git clone of the bootloader repository failed."""

    def __init__(self, repo: str, branch: str, cause: Optional[CommandFailedError] = None):
        self.repo = repo
        self.branch = branch
        super().__init__(f"Failed to clone {repo} (branch {branch})", cause)


class BootloaderBuildError(AcquisitionError):
    """make inside the bootloader checkout failed."""

    def __init__(self, checkout: Path, cause: Optional[CommandFailedError] = None):
        self.checkout = checkout
        super().__init__(f"Failed to build bootloader in {checkout}", cause)


class StagingError(BuildError):
    """Base exception for ISO tree staging errors."""



class SourceFileMissingError(StagingError):
    """A file that must be copied into the ISO tree does not exist."""

    def __init__(self, path: Path, role: str = "file"):
        self.path = Path(path)
        self.role = role
        super().__init__(f"Missing {role}: {path}")


class IsoError(_ToolStepError):
    """Base exception for ISO creation errors."""



class IsoMasteringError(IsoError):
    """xorriso failed or did not produce the ISO."""

    def __init__(self, iso_file: Path, reason: str = "", cause: Optional[CommandFailedError] = None):
        self.iso_file = Path(iso_file)
        msg = f"Failed to master {iso_file}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, cause)


class BiosInstallError(IsoError):
    """limine bios-install failed on the mastered ISO."""

    def __init__(self, iso_file: Path, cause: Optional[CommandFailedError] = None):
        self.iso_file = Path(iso_file)
        super().__init__(f"Failed to install BIOS stages into {iso_file}", cause)


class EmulatorError(_ToolStepError):
    """The emulator exited with a non-zero status."""

    def __init__(self, emulator: str, cause: Optional[CommandFailedError] = None):
        self.emulator = emulator
        super().__init__(f"{emulator} exited abnormally", cause)
