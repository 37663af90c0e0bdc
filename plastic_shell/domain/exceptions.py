"""Domain exceptions for plastic-shell.

Most failures of the cm tool are reported through result values and error
lines. These exceptions cover the few cases that must stop the caller, and
are converted to user-facing messages at the CLI boundary.
"""


class PlasticDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ShellUnavailableError(PlasticDomainError):
    """Raised when a cm shell session is required but cannot be started."""

    pass


class ChangesetLogParseError(PlasticDomainError):
    """Raised when a 'cm log --xml' reply is not a well-formed document."""

    pass
