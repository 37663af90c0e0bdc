"""Workspace discovery and workspace-level queries.

Functions for finding the cm binary and the workspace root, and for asking
the cm shell about the client version, the current user, workspace,
repository and branch.
"""

import logging
import os
import sys

from plastic_shell.adapters.shell.channel import CommandChannel
from plastic_shell.domain.entities import RepositorySpec

logger = logging.getLogger(__name__)

# Present at the root of every Plastic SCM workspace
WORKSPACE_MARKER = ".plastic"

_CHANGESET_PREFIX = "cs:"
_REPOSITORY_PREFIX = "rep:"
_SERVER_PREFIX = "repserver:"


def find_binary_path() -> str:
    """Default path of the cm binary for this platform.

    On Windows the cm command is found through the PATH.
    """
    if sys.platform == "win32":
        return "cm"
    return "/usr/bin/cm"


def find_root_directory(start_path: str) -> tuple[bool, str]:
    """Find the root of the Plastic workspace containing start_path.

    Walks up parent directories looking for the ".plastic" subdirectory.

    Args:
        start_path: Directory to start searching from.

    Returns:
        Tuple of (found, root). When not found, root is start_path itself
        as the best possible guess.
    """
    root = start_path.rstrip("\\").rstrip("/")

    while root:
        if os.path.isdir(os.path.join(root, WORKSPACE_MARKER)):
            return True, root
        last_separator = max(root.rfind("/"), root.rfind("\\"))
        root = root[:last_separator] if last_separator > 0 else ""

    return False, start_path


def get_version(channel: CommandChannel) -> str:
    """Version of the cm command line tool, "" if unavailable."""
    reply = channel.run_command("version")
    if reply.success and reply.results:
        return reply.results[0]
    return ""


def get_user_name(channel: CommandChannel) -> str:
    """Plastic SCM user configured on this client, "" if unavailable."""
    reply = channel.run_command("whoami")
    if reply.success and reply.results:
        return reply.results[0]
    return ""


def get_workspace_name(channel: CommandChannel, workspace_root: str) -> tuple[bool, str]:
    """Name of the workspace at the given root.

    Args:
        channel: Command channel to the cm shell.
        workspace_root: Root directory of the workspace.

    Returns:
        Tuple of (success, workspace name).
    """
    reply = channel.run_command("getworkspacefrompath", ["--format={0}"], [workspace_root])
    if reply.success and reply.results:
        return True, reply.results[0]
    return reply.success, ""


def parse_repository_specification(line: str) -> RepositorySpec | None:
    """Parse a workspace status line into a repository specification.

    Args:
        line: Line like "cs:41@rep:UE4PlasticPlugin@repserver:localhost:8087".

    Returns:
        RepositorySpec, or None if the line has not exactly three parts.
    """
    parts = line.strip().split("@")
    if len(parts) != 3:
        return None

    changeset = parts[0].removeprefix(_CHANGESET_PREFIX)
    return RepositorySpec(
        repository_name=parts[1].removeprefix(_REPOSITORY_PREFIX),
        server_url=parts[2].removeprefix(_SERVER_PREFIX),
        changeset=int(changeset) if changeset.isdigit() else 0,
    )


def get_repository_specification(
    channel: CommandChannel, workspace_root: str
) -> RepositorySpec | None:
    """Repository name and server URL of the workspace.

    Args:
        channel: Command channel to the cm shell.
        workspace_root: Root directory of the workspace.

    Returns:
        RepositorySpec, or None if the command failed or the reply is malformed.
    """
    reply = channel.run_command("status", ["--nochanges"], [workspace_root])
    if not reply.success or not reply.results:
        return None

    spec = parse_repository_specification(reply.results[0])
    if spec is None:
        logger.error(f"Unexpected workspace status: '{reply.results[0]}'")
    return spec


def get_branch_name(channel: CommandChannel, workspace_root: str) -> str:
    """Branch currently loaded in the workspace, "" if unavailable."""
    reply = channel.run_command(
        "status", ["--wkconfig", "--nochanges", "--nostatus"], [workspace_root]
    )
    if reply.success and reply.results:
        return reply.results[0]
    return ""
