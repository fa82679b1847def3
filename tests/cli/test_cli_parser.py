"""
Tests for CLI argument parser.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from codeckit.cli.parser import (
    CLI,
    package_main,
    setup_ndk_main,
    split_global_args,
)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        cli = CLI()
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        result = CLI().run([])

        assert result == 1
        assert "usage:" in capsys.readouterr().out.lower()

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "codeckit" in capsys.readouterr().out

    def test_global_options(self, tmp_path):
        args = CLI().parse_args(
            ["-v", "--config", "c.yaml", "--project-root", str(tmp_path), "ndk"]
        )

        assert args.verbose is True
        assert args.config == Path("c.yaml")
        assert args.project_root == tmp_path

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["frobnicate"])


class TestNdkCommand:
    """Test ndk command parsing."""

    def test_default_target(self):
        args = CLI().parse_args(["ndk"])

        assert args.command == "ndk"
        assert args.target is None
        assert args.install_dir is None
        assert args.env_file is None

    @pytest.mark.parametrize("word", ["list", "verify", "help", "r25c"])
    def test_target(self, word):
        assert CLI().parse_args(["ndk", word]).target == word

    def test_options(self):
        args = CLI().parse_args(
            ["ndk", "r26b", "--install-dir", "/opt/ndk", "--env-file", "env.sh"]
        )

        assert args.install_dir == Path("/opt/ndk")
        assert args.env_file == Path("env.sh")


class TestPackageCommand:
    """Test package command parsing."""

    def test_default_architecture(self):
        args = CLI().parse_args(["package"])

        assert args.command == "package"
        assert args.architecture == "arm64-v8a"

    def test_options(self):
        args = CLI().parse_args(
            [
                "package",
                "x86",
                "--ndk",
                "/opt/ndk",
                "--source",
                "src",
                "--output",
                "out",
                "-j",
                "8",
            ]
        )

        assert args.architecture == "x86"
        assert args.ndk == Path("/opt/ndk")
        assert args.source == Path("src")
        assert args.output == Path("out")
        assert args.jobs == 8


class TestDispatch:
    """Test command dispatch and error handling."""

    def test_dispatches_to_command_module(self):
        with patch("codeckit.cli.commands.ndk.run", return_value=0) as run:
            assert CLI().run(["ndk", "list"]) == 0

        assert run.call_args.args[0].target == "list"

    def test_keyboard_interrupt(self):
        with patch("codeckit.cli.commands.package.run", side_effect=KeyboardInterrupt):
            assert CLI().run(["package"]) == 130

    def test_unexpected_error(self):
        with patch(
            "codeckit.cli.commands.package.run", side_effect=RuntimeError("boom")
        ):
            assert CLI().run(["-q", "package"]) == 1


class TestShortcuts:
    """Test the setup-ndk and package-safe-core entry points."""

    def test_setup_ndk(self):
        with patch("sys.argv", ["setup-ndk", "-q", "list"]):
            with patch("codeckit.cli.commands.ndk.run", return_value=0) as run:
                with pytest.raises(SystemExit) as exc_info:
                    setup_ndk_main()

        assert exc_info.value.code == 0
        args = run.call_args.args[0]
        assert args.target == "list"
        assert args.quiet is True

    def test_package_safe_core(self):
        with patch("sys.argv", ["package-safe-core", "x86_64"]):
            with patch("codeckit.cli.commands.package.run", return_value=1) as run:
                with pytest.raises(SystemExit) as exc_info:
                    package_main()

        assert exc_info.value.code == 1
        assert run.call_args.args[0].architecture == "x86_64"

    def test_setup_ndk_with_project_root(self, tmp_path):
        argv = ["setup-ndk", "--project-root", str(tmp_path), "list"]
        with patch("sys.argv", argv):
            with patch("codeckit.cli.commands.ndk.run", return_value=0) as run:
                with pytest.raises(SystemExit) as exc_info:
                    setup_ndk_main()

        assert exc_info.value.code == 0
        args = run.call_args.args[0]
        assert args.project_root == tmp_path
        assert args.target == "list"

    def test_package_safe_core_with_config(self):
        argv = ["package-safe-core", "x86", "--config=ci.yaml", "-j", "4", "-v"]
        with patch("sys.argv", argv):
            with patch("codeckit.cli.commands.package.run", return_value=0) as run:
                with pytest.raises(SystemExit) as exc_info:
                    package_main()

        assert exc_info.value.code == 0
        args = run.call_args.args[0]
        assert args.config == Path("ci.yaml")
        assert args.architecture == "x86"
        assert args.jobs == 4
        assert args.verbose is True


class TestSplitGlobalArgs:
    """Test split_global_args()."""

    def test_moves_options_with_values(self):
        global_args, rest = split_global_args(
            ["x86", "--config", "c.yaml", "--ndk", "/ndk", "-q"]
        )

        assert global_args == ["--config", "c.yaml", "-q"]
        assert rest == ["x86", "--ndk", "/ndk"]

    def test_equals_form(self):
        global_args, rest = split_global_args(["--project-root=/work", "list"])

        assert global_args == ["--project-root=/work"]
        assert rest == ["list"]

    def test_nothing_global(self):
        assert split_global_args(["r26b"]) == ([], ["r26b"])
