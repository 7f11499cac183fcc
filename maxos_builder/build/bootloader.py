"""Fetch and build the Limine bootloader."""

from __future__ import annotations

from maxos_builder.config import BuildConfig
from maxos_builder.domain import StepResult
from maxos_builder.logging import LoggerFactory

from .command_runners import find_tool, run_tool
from .exceptions import BootloaderBuildError, CloneFailedError, CommandFailedError

log = LoggerFactory.for_bootloader()


def clone_command(config: BuildConfig, git_path: str) -> list[str]:
    return [
        git_path,
        "clone",
        config.limine_repo,
        str(config.limine_dir),
        f"--branch={config.limine_branch}",
        "--depth=1",
    ]


def build_command(config: BuildConfig, make_path: str) -> list[str]:
    return [make_path, "-C", str(config.limine_dir), "--silent"]


def acquire_bootloader(config: BuildConfig) -> StepResult:
    """Ensure a built Limine checkout exists at ``config.limine_dir``.

    The checkout is cloned (shallow, single branch) only when the directory
    is missing; an existing directory is reused as-is without checking its
    branch or contents. ``make`` always runs.

    Raises:
        ToolNotFoundError: git or make is not installed
        CloneFailedError: git clone failed
        BootloaderBuildError: make failed
    """
    limine_dir = config.limine_dir
    cloned = False
    if limine_dir.exists():
        log.info(f"Reusing existing Limine checkout at {limine_dir}")
    else:
        git_path = find_tool(config.git)
        log.info(f"Cloning Limine {config.limine_branch} into {limine_dir}")
        limine_dir.parent.mkdir(parents=True, exist_ok=True)
        try:
            run_tool(clone_command(config, git_path))
        except CommandFailedError as error:
            raise CloneFailedError(config.limine_repo, config.limine_branch, error) from error
        cloned = True

    make_path = find_tool(config.make)
    try:
        run_tool(build_command(config, make_path))
    except CommandFailedError as error:
        raise BootloaderBuildError(limine_dir, error) from error

    return StepResult(
        name="acquire-bootloader",
        details={"cloned": cloned, "checkout": limine_dir},
    )
