"""Unit tests for CLI errors and progress reporting."""

from unittest.mock import MagicMock

import pytest

from plastic_shell.core.errors import (
    PlasticCliError,
    command_failed_error,
    workspace_not_found_error,
)
from plastic_shell.core.progress import RichProgressCallback, progress_context


class TestPlasticCliError:
    """Tests for PlasticCliError formatting."""

    def test_message_with_hint(self) -> None:
        error = PlasticCliError("Something failed", hint="Try again")
        assert error.format_message() == "Something failed\nHint: Try again"

    def test_message_without_hint(self) -> None:
        assert PlasticCliError("Something failed").format_message() == "Something failed"

    def test_workspace_not_found(self) -> None:
        with pytest.raises(PlasticCliError, match="Not in a Plastic SCM workspace: /tmp/x"):
            workspace_not_found_error("/tmp/x")

    def test_command_failed_lists_errors(self) -> None:
        with pytest.raises(PlasticCliError) as exc_info:
            command_failed_error("checkin", ["first", "second"])
        assert "cm checkin failed:\nfirst\nsecond" in exc_info.value.message


class TestRichProgressCallback:
    """Tests for RichProgressCallback."""

    def test_lifecycle(self) -> None:
        progress = MagicMock()
        progress.add_task.return_value = 7
        callback = RichProgressCallback(progress)

        callback.on_start(3, "Updating status")
        callback.on_progress(1, "/ws/Content")
        callback.on_complete()

        progress.add_task.assert_called_once_with("Updating status", total=3, current_item="")
        progress.update.assert_called_once_with(7, completed=1, current_item="/ws/Content")
        progress.remove_task.assert_called_once_with(7)

    def test_progress_before_start_is_ignored(self) -> None:
        progress = MagicMock()
        RichProgressCallback(progress).on_progress(1)
        progress.update.assert_not_called()

    def test_quiet_mode_yields_none(self) -> None:
        with progress_context(quiet_mode=True) as callback:
            assert callback is None
