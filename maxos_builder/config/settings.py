"""Build configuration: where things live and which tools to call."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from maxos_builder.build.exceptions import ConfigError
from maxos_builder.logging import LoggerFactory

log = LoggerFactory.for_system()

CONFIG_ENV_VAR = "MAXOS_BUILDER_CONFIG"
ROOT_ENV_VAR = "MAXOS_BUILDER_ROOT"
DEFAULT_CONFIG_NAME = "maxos-builder.json"

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_LIMINE_REPO = "https://github.com/limine-bootloader/limine.git"
DEFAULT_LIMINE_BRANCH = "v9.x-binary"
DEFAULT_MACHINE = "q35"
DEFAULT_MEMORY = "1G"


@dataclass(frozen=True)
class BuildConfig:
    root: Path = field(default_factory=Path.cwd)

    target_dir: str = "iso_target"
    iso_name: str = "max-os.iso"

    ovmf_dir: str = "build/ovmf"
    ovmf_code_name: str = "OVMF_CODE.4m.fd"
    ovmf_vars_name: str = "OVMF_VARS.4m.fd"

    limine_repo: str = DEFAULT_LIMINE_REPO
    limine_branch: str = DEFAULT_LIMINE_BRANCH
    limine_conf: str = "build/limine.conf"
    sysfile: str = "limine-bios.sys"
    bios_cd: str = "limine-bios-cd.bin"
    uefi_cd: str = "limine-uefi-cd.bin"
    x64_efi: str = "BOOTX64.EFI"
    ia32_efi: str = "BOOTIA32.EFI"

    machine: str = DEFAULT_MACHINE
    memory: str = DEFAULT_MEMORY

    git: str = "git"
    make: str = "make"
    xorriso: str = "xorriso"
    qemu: str = "qemu-system-x86_64"

    @property
    def target_path(self) -> Path:
        return self.root / self.target_dir

    @property
    def iso_root(self) -> Path:
        return self.target_path / "iso"

    @property
    def boot_dir(self) -> Path:
        return self.iso_root / "boot"

    @property
    def limine_boot_dir(self) -> Path:
        return self.boot_dir / "limine"

    @property
    def efi_dir(self) -> Path:
        return self.iso_root / "EFI" / "BOOT"

    @property
    def iso_file(self) -> Path:
        return self.target_path / self.iso_name

    @property
    def ovmf_code(self) -> Path:
        return self.root / self.ovmf_dir / self.ovmf_code_name

    @property
    def ovmf_vars(self) -> Path:
        return self.root / self.ovmf_dir / self.ovmf_vars_name

    @property
    def limine_dir(self) -> Path:
        return self.target_path / "limine"

    @property
    def limine_conf_path(self) -> Path:
        return self.root / self.limine_conf

    @property
    def limine_executable(self) -> Path:
        return self.limine_dir / "limine"

    @property
    def bios_artifacts(self) -> tuple[str, str, str]:
        """Limine files copied into boot/limine."""
        return (self.sysfile, self.bios_cd, self.uefi_cd)

    @property
    def efi_artifacts(self) -> tuple[str, str]:
        """EFI stubs copied into EFI/BOOT."""
        return (self.x64_efi, self.ia32_efi)

    def iso_relative(self, path: Path) -> str:
        """Path of a staged file as seen from the ISO root."""
        return path.relative_to(self.iso_root).as_posix()


OVERRIDABLE_KEYS = frozenset(f.name for f in fields(BuildConfig) if f.name != "root")


def _resolve_root(root: Path | str | None) -> Path:
    if root is not None:
        return Path(root)
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root)
    return Path.cwd()


def _resolve_config_path(path: Path | str | None, root: Path) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return root / DEFAULT_CONFIG_NAME


def _read_overrides(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        log.warning(f"Ignoring unreadable config {config_path}: {error}")
        return {}
    if not isinstance(data, dict):
        log.warning(f"Ignoring config {config_path}: top level must be an object")
        return {}
    overrides = {}
    for key, value in data.items():
        if key not in OVERRIDABLE_KEYS:
            log.warning(f"Ignoring unknown config key {key!r} in {config_path}")
            continue
        if not isinstance(value, str):
            log.warning(f"Ignoring config key {key!r}: expected a string, got {value!r}")
            continue
        overrides[key] = value
    return overrides


def load_config(
    path: Path | str | None = None,
    root: Path | str | None = None,
) -> BuildConfig:
    """Build a BuildConfig from defaults plus an optional JSON override file.

    An explicitly requested file must exist; the environment or default
    location may be absent, in which case the defaults apply.
    """
    resolved_root = _resolve_root(root)
    config_path = _resolve_config_path(path, resolved_root)
    if path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    overrides = _read_overrides(config_path)
    if overrides:
        log.debug(f"Loaded {len(overrides)} override(s) from {config_path}")
    return BuildConfig(root=resolved_root, **overrides)

