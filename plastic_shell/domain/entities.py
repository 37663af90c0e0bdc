"""Domain entities for Plastic SCM workspace state.

Core domain models representing files, revisions and repositories as seen
through the cm command-line tool. Pure Python dataclasses with no
dependencies on infrastructure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class WorkspaceState(str, Enum):
    """State of a single file in the local workspace.

    Exactly one state holds per file at a given observation.
    """

    CONTROLLED = "controlled"  # Unmodified, no pending change
    CHANGED = "changed"  # Modified but not checked-out
    CHECKED_OUT = "checked_out"
    COPIED = "copied"
    REPLACED = "replaced"
    ADDED = "added"
    PRIVATE = "private"  # Not under source control
    IGNORED = "ignored"
    DELETED = "deleted"
    MOVED = "moved"
    CONFLICTED = "conflicted"
    LOCKED_BY_OTHER = "locked_by_other"
    UNKNOWN = "unknown"


@dataclass
class FileState:
    """Observed state of one file, keyed by its absolute local path.

    Instances are created per query and merged into the process-wide
    state cache, where the cached entry is mutated in place.

    Attributes:
        local_filename: Absolute path of the file (unique key).
        workspace_state: Current workspace state.
        local_revision_changeset: Changeset the workspace copy is based on.
        depot_revision_changeset: Latest changeset known on the server.
        lock_owner_user: User holding the lock ("" when unlocked).
        lock_owner_workspace: Workspace holding the lock ("" when unlocked).
        observed_at: When this state was observed.
        pending_merge_base_hash: Opaque base hash for conflict resolution.
    """

    local_filename: str
    workspace_state: WorkspaceState = WorkspaceState.UNKNOWN
    local_revision_changeset: int = 0
    depot_revision_changeset: int = 0
    lock_owner_user: str = ""
    lock_owner_workspace: str = ""
    observed_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    pending_merge_base_hash: str = ""

    def is_locked(self) -> bool:
        """Check if any user currently holds a lock on this file."""
        return bool(self.lock_owner_user)

    def is_locked_by_other(self, user_name: str, workspace_name: str) -> bool:
        """Check if the lock is held by anyone but the given identity.

        Args:
            user_name: Current Plastic SCM user.
            workspace_name: Current workspace name.

        Returns:
            True if locked, and either the user or the workspace differs.
        """
        return self.is_locked() and (
            self.lock_owner_user != user_name or self.lock_owner_workspace != workspace_name
        )

    def is_conflicted(self) -> bool:
        return self.workspace_state == WorkspaceState.CONFLICTED

    def touch(self) -> None:
        """Refresh the observation timestamp."""
        self.observed_at = datetime.now(UTC)


@dataclass(frozen=True)
class RevisionSource:
    """Back-reference to the revision a renamed file was moved from."""

    filename: str
    revision_number: int


@dataclass(frozen=True)
class Revision:
    """One revision of a file in its history.

    Identity is the (changeset_number, revision_number) pair. Revisions are
    immutable once parsed; the log parser returns updated copies.

    Attributes:
        changeset_number: Changeset this revision belongs to.
        revision_number: Revision id of the file in that changeset.
        revision: Opaque string form of the revision id.
        filename: Path of the file at that revision.
        action: One of "add", "branch" (rename/move), "delete", "edit".
        description: Changeset comment.
        author: Changeset owner.
        date: Changeset date, None if missing or unparseable.
        renamed_from: Source of a rename, None otherwise.
    """

    changeset_number: int
    revision_number: int
    revision: str = ""
    filename: str = ""
    action: str = "edit"
    description: str = ""
    author: str = ""
    date: datetime | None = None
    renamed_from: RevisionSource | None = None


History = list[Revision]


@dataclass(frozen=True)
class RepositorySpec:
    """Repository and server of the current workspace.

    Derived from a single "cs:N@rep:NAME@repserver:URL" status line,
    recomputed on every query.
    """

    repository_name: str
    server_url: str
    changeset: int = 0

    def changeset_spec(self, changeset: int | str) -> str:
        """Format a changeset specification for this repository.

        Args:
            changeset: Changeset number.

        Returns:
            Specification like "cs:14@rep:myrep@repserver:localhost:8087".
        """
        return f"cs:{changeset}@rep:{self.repository_name}@repserver:{self.server_url}"
