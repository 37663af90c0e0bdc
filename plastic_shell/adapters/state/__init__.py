"""File state cache adapters."""

from plastic_shell.adapters.state.memory_cache import InMemoryStateCache

__all__ = ["InMemoryStateCache"]
