"""Tests for external command execution helpers."""
import shutil
import subprocess
from unittest.mock import Mock

import pytest

from maxos_builder.build.command_runners import find_tool, run_checked_command, run_tool
from maxos_builder.build.exceptions import CommandFailedError, ToolNotFoundError


class TestFindTool:
    """Tests for find_tool function."""

    def test_returns_resolved_path(self, fake_tools):
        assert find_tool("xorriso") == "/usr/bin/xorriso"

    def test_missing_tool_raises(self, missing_tools):
        with pytest.raises(ToolNotFoundError, match="xorriso not found") as excinfo:
            find_tool("xorriso")
        assert excinfo.value.tool == "xorriso"


class TestRunTool:
    """Tests for run_tool function."""

    def test_successful_command_inherits_stdio(self, mock_subprocess_success, tmp_path):
        """Output is not captured so the tool talks to the user directly."""
        run_tool(["make", "-C", tmp_path, "--silent"])

        mock_subprocess_success.assert_called_once_with(
            ["make", "-C", str(tmp_path), "--silent"], cwd=None
        )

    def test_cwd_is_forwarded(self, mock_subprocess_success, tmp_path):
        run_tool(["git", "status"], cwd=tmp_path)

        assert mock_subprocess_success.call_args.kwargs["cwd"] == tmp_path

    def test_failure_raises_with_returncode(self, mock_subprocess_failure):
        with pytest.raises(CommandFailedError) as excinfo:
            run_tool(["make", "-C", "limine"])

        error = excinfo.value
        assert error.returncode == 2
        assert error.command == ["make", "-C", "limine"]
        assert "exit status 2" in str(error)


class TestRunCheckedCommand:
    """Tests for run_checked_command function."""

    def test_successful_command(self, mock_subprocess_run_output):
        mock_subprocess_run_output.return_value = Mock(returncode=0, stdout="output", stderr="")

        result = run_checked_command(["echo", "test"])

        assert result == "output"
        mock_subprocess_run_output.assert_called_once_with(
            ["echo", "test"],
            input=None,
            text=True,
            capture_output=True,
            cwd=None,
        )

    def test_command_failure_with_stderr(self, mock_subprocess_run_output):
        mock_subprocess_run_output.return_value = Mock(
            returncode=1, stdout="", stderr="error message"
        )

        with pytest.raises(CommandFailedError, match="error message"):
            run_checked_command(["false"])

    def test_command_failure_with_stdout(self, mock_subprocess_run_output):
        mock_subprocess_run_output.return_value = Mock(
            returncode=1, stdout="stdout error", stderr=""
        )

        with pytest.raises(CommandFailedError, match="stdout error"):
            run_checked_command(["false"])

    def test_command_failure_with_no_output(self, mock_subprocess_run_output):
        mock_subprocess_run_output.return_value = Mock(returncode=3, stdout="", stderr="")

        with pytest.raises(CommandFailedError, match="Command failed") as excinfo:
            run_checked_command(["false"])
        assert excinfo.value.returncode == 3


@pytest.fixture
def mock_subprocess_run_output(mocker):
    return mocker.patch("maxos_builder.build.command_runners.subprocess.run")


@pytest.mark.skipif(shutil.which("true") is None, reason="Requires POSIX true")
def test_real_command_round_trip(tmp_path):
    """A real, always-available command runs through run_tool unchanged."""
    result = run_tool(["true"], cwd=tmp_path)
    assert isinstance(result, subprocess.CompletedProcess)
    assert result.returncode == 0
