"""Command execution utilities for external build tools."""

import shutil
import subprocess

from maxos_builder.logging import LoggerFactory

from .exceptions import CommandFailedError, ToolNotFoundError

log = LoggerFactory.for_commands()


def _format_command(command):
    return " ".join(str(part) for part in command)


def find_tool(name):
    """Resolve an executable name on PATH, raising if it is not installed."""
    path = shutil.which(str(name))
    if not path:
        raise ToolNotFoundError(str(name))
    return path


def run_checked_command(command, input_text=None, cwd=None):
    """Run a command, capture its output and raise CommandFailedError if it fails."""
    log.debug(f"Running command: {_format_command(command)}")
    result = subprocess.run(
        [str(part) for part in command],
        input=input_text,
        text=True,
        capture_output=True,
        cwd=cwd,
    )
    if result.stderr:
        log.bind(tags=["command", "tool-output"]).trace(f"stderr: {result.stderr.strip()}")
    if result.returncode != 0:
        stderr = result.stderr.strip()
        stdout = result.stdout.strip()
        message = stderr or stdout or "Command failed"
        raise CommandFailedError(command, result.returncode, message)
    return result.stdout


def run_tool(command, cwd=None):
    """Run a command with inherited stdio so its own output reaches the user.

    Blocks until the tool exits. Nothing is captured; the tool's output is the
    diagnostic surface.
    """
    log.debug(f"Running command: {_format_command(command)}")
    result = subprocess.run([str(part) for part in command], cwd=cwd)
    if result.returncode != 0:
        log.debug(f"Command failed with code {result.returncode}: {_format_command(command)}")
        raise CommandFailedError(command, result.returncode)
    log.debug("Command completed successfully")
    return result


__all__ = [
    "find_tool",
    "run_checked_command",
    "run_tool",
]
