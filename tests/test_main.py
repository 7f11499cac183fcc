"""Tests for the command line entry point."""

import pytest

from maxos_builder import main as main_module
from maxos_builder.__version__ import __version__


@pytest.fixture
def cli(tmp_path, monkeypatch):
    monkeypatch.delenv("MAXOS_BUILDER_CONFIG", raising=False)
    monkeypatch.delenv("MAXOS_BUILDER_ROOT", raising=False)

    def invoke(*args):
        return main_module.main(["--root", str(tmp_path), "--log-dir", str(tmp_path / "logs"), *args])

    return invoke


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        main_module.build_parser().parse_args([])


def test_run_requires_binary():
    with pytest.raises(SystemExit):
        main_module.build_parser().parse_args(["run"])


def test_limine_alias():
    args = main_module.build_parser().parse_args(["limine"])
    assert args.command == "limine"


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_clean_on_empty_project(cli, tmp_path):
    assert cli("clean") == 0
    assert cli("clean") == 0


def test_clean_removes_target(cli, tmp_path):
    (tmp_path / "iso_target" / "iso").mkdir(parents=True)

    assert cli("clean") == 0
    assert not (tmp_path / "iso_target").exists()


def test_run_with_missing_kernel_fails(cli, tmp_path, mocker):
    (tmp_path / "iso_target" / "limine").mkdir(parents=True)
    mocker.patch("maxos_builder.build.command_runners.shutil.which", side_effect=lambda name: name)
    run = mocker.patch("subprocess.run", return_value=mocker.Mock(returncode=0))

    status = cli("run", str(tmp_path / "kernel.bin"))

    assert status == 1
    assert [call.args[0][0] for call in run.call_args_list] == ["make"]


def test_tool_exit_status_is_returned(cli, mocker):
    mocker.patch("maxos_builder.build.command_runners.shutil.which", side_effect=lambda name: name)
    mocker.patch("subprocess.run", return_value=mocker.Mock(returncode=128))

    assert cli("acquire-bootloader") == 128


def test_missing_config_file(cli, tmp_path):
    assert cli("--config", str(tmp_path / "missing.json"), "clean") == 1


def test_interrupt_returns_130(cli, tmp_path, mocker):
    (tmp_path / "iso_target" / "limine").mkdir(parents=True)
    mocker.patch("maxos_builder.build.command_runners.shutil.which", side_effect=lambda name: name)
    mocker.patch("subprocess.run", side_effect=KeyboardInterrupt)

    assert cli("acquire-bootloader") == 130
