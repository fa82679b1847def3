"""
Tests for external process execution.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from codeckit.core.exceptions import ExternalToolError
from codeckit.core.process import default_jobs, run_command


class TestRunCommand:
    """Test run_command()."""

    def test_success(self, tmp_path):
        completed = subprocess.CompletedProcess(["make"], 0)

        with patch("codeckit.core.process.subprocess.run", return_value=completed) as run:
            run_command(["make", "-j4"], tmp_path, {"PATH": "/bin"})

        run.assert_called_once_with(
            ["make", "-j4"], cwd=str(tmp_path), env={"PATH": "/bin"}
        )

    def test_nonzero_exit(self, tmp_path):
        completed = subprocess.CompletedProcess(["make"], 2)

        with patch("codeckit.core.process.subprocess.run", return_value=completed):
            with pytest.raises(ExternalToolError) as exc_info:
                run_command(["make", "install"], tmp_path)

        assert exc_info.value.returncode == 2
        assert exc_info.value.command == ["make", "install"]
        assert "exit code 2: make install" in str(exc_info.value)

    def test_missing_executable(self, tmp_path):
        with patch(
            "codeckit.core.process.subprocess.run", side_effect=FileNotFoundError("make")
        ):
            with pytest.raises(ExternalToolError) as exc_info:
                run_command(["make"], tmp_path)

        assert exc_info.value.returncode is None
        assert "Command not found" in str(exc_info.value)

    def test_inherits_environment_by_default(self, tmp_path):
        completed = subprocess.CompletedProcess(["true"], 0)

        with patch("codeckit.core.process.subprocess.run", return_value=completed) as run:
            run_command(["true"], Path(tmp_path))

        assert run.call_args.kwargs["env"] is None


class TestDefaultJobs:
    def test_uses_cpu_count(self):
        with patch("codeckit.core.process.os.cpu_count", return_value=12):
            assert default_jobs() == 12

    def test_unknown_cpu_count(self):
        with patch("codeckit.core.process.os.cpu_count", return_value=None):
            assert default_jobs() == 1
