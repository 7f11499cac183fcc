"""Build steps for the MaxOS boot image.

Modules:
    - bootloader: clone and build Limine
    - staging: assemble the ISO directory tree
    - iso: master the hybrid ISO and install BIOS stages
    - emulator: boot the ISO under QEMU
    - pipeline: fail-fast sequencing of the above

Import the step modules directly; this package only re-exports the
exception hierarchy so configuration code can use it without pulling in
the steps.
"""

from .exceptions import (
    AcquisitionError,
    BiosInstallError,
    BootloaderBuildError,
    BuildError,
    CloneFailedError,
    CommandFailedError,
    ConfigError,
    EmulatorError,
    IsoError,
    IsoMasteringError,
    SourceFileMissingError,
    StagingError,
    ToolNotFoundError,
)

__all__ = [
    "AcquisitionError",
    "BiosInstallError",
    "BootloaderBuildError",
    "BuildError",
    "CloneFailedError",
    "CommandFailedError",
    "ConfigError",
    "EmulatorError",
    "IsoError",
    "IsoMasteringError",
    "SourceFileMissingError",
    "StagingError",
    "ToolNotFoundError",
]
