"""Status update of a set of files through 'cm status' and 'cm fileinfo'.

Files are grouped by directory, because fileinfo returns nothing at all
when called with a file that is not in a workspace. Within a group, status
is run file by file until the first failure, then fileinfo is run once for
the whole group to get revisions and locks.
"""

import logging
import os

from plastic_shell.adapters.parsers.fileinfo import FILEINFO_FORMAT, parse_fileinfo_line
from plastic_shell.adapters.parsers.status import parse_status_results
from plastic_shell.adapters.shell.channel import CommandChannel
from plastic_shell.domain.entities import FileState, WorkspaceState
from plastic_shell.ports.progress import ProgressCallback
from plastic_shell.ports.settings import Identity

logger = logging.getLogger(__name__)

STATUS_PARAMETERS = ["--nostatus", "--noheaders", "--all", "--ignored"]


def group_files_by_directory(files: list[str]) -> dict[str, list[str]]:
    """Group files by parent directory, keeping first-seen order."""
    groups: dict[str, list[str]] = {}
    for file in files:
        groups.setdefault(os.path.dirname(file), []).append(file)
    return groups


def run_status(
    channel: CommandChannel, files: list[str], errors: list[str]
) -> tuple[list[FileState], bool]:
    """Run one status command per file, stopping at the first failure.

    Files after a failure are still returned, with an UNKNOWN state.

    Args:
        channel: Command channel to the cm shell.
        files: Files of one directory.
        errors: Error lines are appended here.

    Returns:
        Tuple of (states in files order, success).
    """
    states: list[FileState] = []
    success = True
    for file in files:
        state = FileState(local_filename=file)
        states.append(state)
        # No more status commands after the first failure
        if not success:
            continue

        reply = channel.run_command("status", STATUS_PARAMETERS, [file])
        errors.extend(reply.errors)
        success = reply.success
        if success:
            state.workspace_state = parse_status_results(reply.results)
            state.touch()
            logger.debug(f"{file} = {state.workspace_state.value}")

    return states, success


def run_fileinfo(
    channel: CommandChannel,
    identity: Identity,
    states: list[FileState],
    errors: list[str],
) -> bool:
    """Fill revisions and locks of the given states with one fileinfo command.

    A file locked by another user or in another workspace is promoted to
    LOCKED_BY_OTHER.

    Args:
        channel: Command channel to the cm shell.
        identity: Current user and workspace.
        states: States of one directory, updated in place.
        errors: Error lines are appended here.

    Returns:
        True if the fileinfo command succeeded.
    """
    files = [state.local_filename for state in states]
    reply = channel.run_command("fileinfo", [FILEINFO_FORMAT], files)
    errors.extend(reply.errors)
    if not reply.success:
        return False

    # One line per file, in the order of the files
    for state, line in zip(states, reply.results):
        info = parse_fileinfo_line(line)
        state.local_revision_changeset = info.revision_changeset
        state.depot_revision_changeset = info.revision_head_changeset
        state.lock_owner_user = info.locked_by
        state.lock_owner_workspace = info.locked_where

        if state.is_locked_by_other(identity.user_name, identity.workspace_name):
            logger.warning(
                f"{state.local_filename} locked by '{state.lock_owner_user}' "
                f"in '{state.lock_owner_workspace}'"
            )
            state.workspace_state = WorkspaceState.LOCKED_BY_OTHER

        logger.debug(
            f"{state.local_filename}: {state.local_revision_changeset};"
            f"{state.depot_revision_changeset} by '{state.lock_owner_user}' "
            f"({state.lock_owner_workspace})"
        )

    return True


def run_update_status(
    channel: CommandChannel,
    identity: Identity,
    files: list[str],
    progress: ProgressCallback | None = None,
) -> tuple[list[FileState], list[str], bool]:
    """Get the workspace state, revisions and locks of the given files.

    Files that do not exist on disk (newly created then deleted) are
    reported PRIVATE without running any command, and make the result
    unsuccessful.

    Args:
        channel: Command channel to the cm shell.
        identity: Current user and workspace, for lock ownership.
        files: Absolute paths of the files.
        progress: Optional progress callback, one step per directory.

    Returns:
        Tuple of (states in files order, error lines, success).
    """
    errors: list[str] = []
    success = True
    states_by_file: dict[str, FileState] = {}
    existing: list[str] = []

    for file in dict.fromkeys(files):
        if os.path.exists(file):
            existing.append(file)
        else:
            states_by_file[file] = FileState(
                local_filename=file, workspace_state=WorkspaceState.PRIVATE
            )
            success = False

    groups = group_files_by_directory(existing)
    if progress:
        progress.on_start(len(groups), "Updating status")

    for index, (directory, group) in enumerate(groups.items(), start=1):
        states, status_ok = run_status(channel, group, errors)
        if status_ok:
            status_ok = run_fileinfo(channel, identity, states, errors)
        success = success and status_ok
        states_by_file.update((state.local_filename, state) for state in states)
        if progress:
            progress.on_progress(index, directory)

    if progress:
        progress.on_complete()

    return [states_by_file[file] for file in dict.fromkeys(files)], errors, success
