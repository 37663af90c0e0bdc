"""In-memory process-wide cache of file states.

Implements the StateCache protocol with a dict keyed by absolute path.
Entries are never removed here; invalidation is up to the owner.
"""

from collections.abc import Iterator

from plastic_shell.domain.entities import FileState


class InMemoryStateCache:
    """Dict-backed state cache. Not thread-safe."""

    def __init__(self) -> None:
        self._states: dict[str, FileState] = {}

    def get_state(self, local_filename: str) -> FileState:
        """Get the cached state for a path, creating an UNKNOWN one if missing."""
        state = self._states.get(local_filename)
        if state is None:
            state = FileState(local_filename=local_filename)
            self._states[local_filename] = state
        return state

    def find_state(self, local_filename: str) -> FileState | None:
        return self._states.get(local_filename)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[FileState]:
        return iter(list(self._states.values()))
