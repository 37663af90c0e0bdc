"""Settings and identity ports.

Narrow interfaces through which the shell and the use cases read the
binary path, workspace root and the identity used for lock ownership.
"""

from typing import Protocol


class ShellSettings(Protocol):
    """Where to find the cm binary and which workspace to run it in.

    Read again on every shell restart, so implementations may change the
    values between calls.
    """

    @property
    def binary_path(self) -> str:
        """Path to the cm binary."""
        ...

    @property
    def workspace_root(self) -> str:
        """Working directory of the cm shell process."""
        ...


class Identity(Protocol):
    """Current user and workspace, compared against lock owners."""

    @property
    def user_name(self) -> str:
        """Plastic SCM user configured for this client."""
        ...

    @property
    def workspace_name(self) -> str:
        """Name of the current workspace."""
        ...
