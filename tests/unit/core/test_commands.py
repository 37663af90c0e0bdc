"""Unit tests for source control command post-processing."""

from plastic_shell.core.commands import SourceControlCommand, remove_redundant_errors


class TestRemoveRedundantErrors:
    """Tests for remove_redundant_errors."""

    def test_all_errors_redundant_makes_success(self) -> None:
        command = SourceControlCommand(
            name="checkin",
            error_messages=[
                "/ws/a is not in a workspace",
                "/ws/b is not in a workspace",
            ],
        )

        remove_redundant_errors(command, "is not in a workspace")

        assert command.success
        assert command.error_messages == []
        assert command.info_messages == [
            "/ws/a is not in a workspace",
            "/ws/b is not in a workspace",
        ]

    def test_remaining_errors_keep_failure(self) -> None:
        command = SourceControlCommand(
            name="checkin",
            error_messages=["/ws/a is not in a workspace", "Server unreachable"],
        )

        remove_redundant_errors(command, "is not in a workspace")

        assert not command.success
        assert command.error_messages == ["Server unreachable"]
        assert command.info_messages == ["/ws/a is not in a workspace"]

    def test_no_match_leaves_command_unchanged(self) -> None:
        command = SourceControlCommand(name="undo")

        remove_redundant_errors(command, "is not in a workspace")

        assert not command.success
        assert command.error_messages == []
        assert command.info_messages == []

    def test_filter_is_case_sensitive(self) -> None:
        command = SourceControlCommand(name="add", error_messages=["Already Added"])

        remove_redundant_errors(command, "already added")

        assert command.error_messages == ["Already Added"]
        assert not command.success
