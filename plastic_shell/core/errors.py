"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all plastic-shell CLI commands.
"""

from typing import NoReturn

import click


class PlasticCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise PlasticCliError(
            "Not in a Plastic SCM workspace",
            hint="Run from inside a workspace or set [workspace] root in the config",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
        """
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def workspace_not_found_error(path: str) -> NoReturn:
    """Raise error when no Plastic SCM workspace contains the path.

    Args:
        path: Directory the search started from.

    Raises:
        PlasticCliError: Always raises with workspace hint.
    """
    raise PlasticCliError(
        f"Not in a Plastic SCM workspace: {path}",
        hint="Run from inside a workspace, or set 'root' in the [workspace] config section",
    )


def command_failed_error(command: str, errors: list[str]) -> NoReturn:
    """Raise error when a cm command reported a failure.

    Args:
        command: cm command that failed.
        errors: Error lines reported by the tool.

    Raises:
        PlasticCliError: Always raises with the tool's error lines.
    """
    details = "\n".join(errors) if errors else "no error output"
    raise PlasticCliError(
        f"cm {command} failed:\n{details}",
        hint="Run with --verbose to see the commands sent to the cm shell",
    )
