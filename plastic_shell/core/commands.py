"""Source control command results and their post-processing."""

from dataclasses import dataclass, field


@dataclass
class SourceControlCommand:
    """Outcome of a source control operation as shown to the user.

    Attributes:
        name: cm command that was run.
        success: Whether the operation is considered successful.
        info_messages: Informational lines.
        error_messages: Error lines, displayed verbatim.
    """

    name: str
    success: bool = False
    info_messages: list[str] = field(default_factory=list)
    error_messages: list[str] = field(default_factory=list)


def remove_redundant_errors(command: SourceControlCommand, filter_text: str) -> None:
    """Reclassify benign errors containing filter_text as info messages.

    If this leaves no error at all, the command is considered successful.

    Args:
        command: Command whose messages are updated in place.
        filter_text: Case-sensitive substring identifying a benign error.
    """
    redundant = [message for message in command.error_messages if filter_text in message]
    if not redundant:
        return

    command.info_messages.extend(redundant)
    command.error_messages = [
        message for message in command.error_messages if filter_text not in message
    ]

    if not command.error_messages:
        command.success = True
