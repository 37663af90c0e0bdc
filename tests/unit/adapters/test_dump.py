"""Unit tests for the one-shot 'cm cat' dump."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from plastic_shell.adapters.shell.dump import run_dump_to_file


class TestRunDumpToFile:
    """Tests for run_dump_to_file."""

    def test_missing_binary_returns_false(self, tmp_path: Path) -> None:
        assert not run_dump_to_file(
            str(tmp_path / "no-such-cm"), "rev:Map.umap#cs:12", str(tmp_path / "out.tmp")
        )

    def test_runs_cat_with_raw_file_output(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"", stderr=b"")
        with patch(
            "plastic_shell.adapters.shell.dump.subprocess.run", return_value=completed
        ) as mock_run:
            assert run_dump_to_file("/usr/bin/cm", "revid:1230@rep:myrep", "/tmp/Name124.tmp")

        cmd = mock_run.call_args[0][0]
        assert cmd == [
            "/usr/bin/cm",
            "cat",
            "revid:1230@rep:myrep",
            "--raw",
            "--file=/tmp/Name124.tmp",
        ]

    def test_non_zero_exit_code_fails(self, caplog: pytest.LogCaptureFixture) -> None:
        completed = subprocess.CompletedProcess(
            args=[], returncode=1, stdout=b"", stderr=b"The revision does not exist"
        )
        with (
            patch("plastic_shell.adapters.shell.dump.subprocess.run", return_value=completed),
            caplog.at_level(logging.ERROR),
        ):
            assert not run_dump_to_file("/usr/bin/cm", "revid:1", "/tmp/out")

        assert "The revision does not exist" in caplog.text

    def test_stderr_alone_is_logged_but_not_failure(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        completed = subprocess.CompletedProcess(
            args=[], returncode=0, stdout=b"", stderr=b"warning: slow server"
        )
        with (
            patch("plastic_shell.adapters.shell.dump.subprocess.run", return_value=completed),
            caplog.at_level(logging.ERROR),
        ):
            assert run_dump_to_file("/usr/bin/cm", "revid:1", "/tmp/out")

        assert "slow server" in caplog.text
