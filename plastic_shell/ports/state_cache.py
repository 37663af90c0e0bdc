"""File state cache port.

Defines the process-wide store of per-path file states. The cache is only
mutated by the state projection; it performs no locking itself.
"""

from typing import Protocol

from plastic_shell.domain.entities import FileState


class StateCache(Protocol):
    """Protocol for the process-wide cache of file states."""

    def get_state(self, local_filename: str) -> FileState:
        """Get the cached state for a path, creating it if missing.

        Args:
            local_filename: Absolute path of the file.

        Returns:
            The cached FileState instance (mutable, shared).
        """
        ...

    def find_state(self, local_filename: str) -> FileState | None:
        """Get the cached state for a path without creating it.

        Args:
            local_filename: Absolute path of the file.

        Returns:
            The cached FileState, or None if the path was never seen.
        """
        ...
