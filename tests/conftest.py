"""
Pytest configuration and shared fixtures for maxos-builder tests.

This module provides common fixtures and utilities used across all test modules.
"""

import subprocess
from pathlib import Path
from typing import Dict
from unittest.mock import Mock

import pytest

from maxos_builder.config import BuildConfig
from maxos_builder.logging import logger


LIMINE_ARTIFACTS: Dict[str, bytes] = {
    "limine-bios.sys": b"limine bios stage",
    "limine-bios-cd.bin": b"limine bios cd",
    "limine-uefi-cd.bin": b"limine uefi cd",
    "BOOTX64.EFI": b"MZ x64 stub",
    "BOOTIA32.EFI": b"MZ ia32 stub",
}


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added by a test so later tests don't write to stale streams."""
    yield
    logger.remove()


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture
def build_config(tmp_path) -> BuildConfig:
    """
    Fixture providing a BuildConfig rooted in a temporary project directory.

    Args:
        tmp_path: pytest's built-in temporary directory fixture.

    Returns:
        BuildConfig with default names and tmp_path as root.
    """
    return BuildConfig(root=tmp_path)


@pytest.fixture
def limine_conf(build_config) -> Path:
    """Fixture writing a limine.conf at the configured location."""
    path = build_config.limine_conf_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "timeout: 0\n\n/MaxOS\n    protocol: limine\n    kernel_path: boot():/boot/kernel.bin\n"
    )
    return path


@pytest.fixture
def limine_checkout(build_config) -> Path:
    """
    Fixture providing a fake, already built Limine checkout.

    Returns:
        Path to the checkout containing the BIOS/UEFI artifacts and an
        executable ``limine`` installer.
    """
    checkout = build_config.limine_dir
    checkout.mkdir(parents=True)
    for name, content in LIMINE_ARTIFACTS.items():
        (checkout / name).write_bytes(content)
    installer = checkout / "limine"
    installer.write_text("#!/bin/sh\nexit 0\n")
    installer.chmod(0o755)
    return checkout


@pytest.fixture
def kernel_binary(build_config) -> Path:
    """Fixture providing a kernel binary at <root>/kernel.bin."""
    kernel = build_config.root / "kernel.bin"
    kernel.write_bytes(b"\x7fELF fake kernel v1")
    return kernel


@pytest.fixture
def firmware_images(build_config) -> Dict[str, Path]:
    """Fixture providing OVMF code and vars images."""
    build_config.ovmf_code.parent.mkdir(parents=True, exist_ok=True)
    build_config.ovmf_code.write_bytes(b"ovmf code")
    build_config.ovmf_vars.write_bytes(b"ovmf vars")
    return {"code": build_config.ovmf_code, "vars": build_config.ovmf_vars}


@pytest.fixture
def staged_project(build_config, limine_conf, limine_checkout, kernel_binary, firmware_images):
    """Fixture combining every input a full run needs."""
    return build_config


# ==============================================================================
# Subprocess Mock Fixtures
# ==============================================================================


@pytest.fixture
def fake_tools(mocker) -> Mock:
    """
    Fixture making every external tool resolvable on PATH.

    Returns:
        Mock for shutil.which returning /usr/bin/<name>.
    """
    return mocker.patch(
        "maxos_builder.build.command_runners.shutil.which",
        side_effect=lambda name: f"/usr/bin/{name}",
    )


@pytest.fixture
def missing_tools(mocker) -> Mock:
    """Fixture making every external tool unresolvable on PATH."""
    return mocker.patch(
        "maxos_builder.build.command_runners.shutil.which", return_value=None
    )


@pytest.fixture
def mock_subprocess_success(mocker) -> Mock:
    """
    Fixture providing a mock subprocess.run that always succeeds.

    Returns:
        Mock object for subprocess.run.
    """
    mock_result = Mock()
    mock_result.returncode = 0
    mock_result.stdout = ""
    mock_result.stderr = ""
    return mocker.patch("subprocess.run", return_value=mock_result)


@pytest.fixture
def mock_subprocess_failure(mocker) -> Mock:
    """
    Fixture providing a mock subprocess.run that always exits with status 2.

    Returns:
        Mock object for subprocess.run.
    """
    mock_result = Mock()
    mock_result.returncode = 2
    mock_result.stdout = ""
    mock_result.stderr = "Mock error"
    return mocker.patch("subprocess.run", return_value=mock_result)


@pytest.fixture
def iso_writing_subprocess(mocker, build_config) -> Mock:
    """
    Fixture providing a successful subprocess.run that also fakes side effects.

    When xorriso is invoked the configured ISO file is written so later
    steps see it on disk, and a git clone creates the checkout directory.
    """

    def fake_run(command, *args, **kwargs):
        if Path(command[0]).name == "xorriso":
            build_config.iso_file.write_bytes(b"CD001 fake iso")
        if Path(command[0]).name == "git":
            Path(command[3]).mkdir(parents=True, exist_ok=True)
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    return mocker.patch("subprocess.run", side_effect=fake_run)


@pytest.fixture
def command_names():
    """Fixture returning a helper listing executable basenames of recorded calls."""

    def names(mock_run: Mock):
        return [Path(call.args[0][0]).name for call in mock_run.call_args_list]

    return names
