"""Projection of freshly parsed file states into the state cache."""

import logging

from plastic_shell.domain.entities import FileState
from plastic_shell.ports.state_cache import StateCache

logger = logging.getLogger(__name__)


def update_cached_states(cache: StateCache, states: list[FileState]) -> int:
    """Merge new states into the process-wide cache.

    A cached entry is only touched when its workspace state differs from
    the new one, so that unchanged files do not trigger a refresh.

    Args:
        cache: Process-wide state cache.
        states: States observed by the last query.

    Returns:
        Number of cache entries actually changed.
    """
    updated = 0
    for state in states:
        cached = cache.get_state(state.local_filename)
        if cached.workspace_state != state.workspace_state:
            cached.workspace_state = state.workspace_state
            cached.pending_merge_base_hash = state.pending_merge_base_hash
            cached.observed_at = state.observed_at
            updated += 1

    if updated:
        logger.debug(f"Updated {updated} cached state(s)")
    return updated
