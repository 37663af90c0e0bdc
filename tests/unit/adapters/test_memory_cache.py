"""Unit tests for the in-memory state cache."""

from plastic_shell.adapters.state.memory_cache import InMemoryStateCache
from plastic_shell.domain.entities import WorkspaceState


class TestInMemoryStateCache:
    """Tests for InMemoryStateCache."""

    def test_get_state_creates_unknown_entry(self) -> None:
        cache = InMemoryStateCache()
        state = cache.get_state("/ws/a.txt")

        assert state.local_filename == "/ws/a.txt"
        assert state.workspace_state == WorkspaceState.UNKNOWN
        assert len(cache) == 1

    def test_get_state_returns_same_entry(self) -> None:
        cache = InMemoryStateCache()
        assert cache.get_state("/ws/a.txt") is cache.get_state("/ws/a.txt")

    def test_find_state_does_not_create(self) -> None:
        cache = InMemoryStateCache()
        assert cache.find_state("/ws/a.txt") is None
        assert len(cache) == 0

    def test_iterates_entries(self) -> None:
        cache = InMemoryStateCache()
        cache.get_state("/ws/a")
        cache.get_state("/ws/b")
        assert sorted(s.local_filename for s in cache) == ["/ws/a", "/ws/b"]
