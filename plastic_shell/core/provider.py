"""Source control provider owning the cm shell session.

The provider is the single owner of the background shell, its command
channel and the process-wide state cache. It is handed around by reference
instead of living in module globals; callers must not use it from several
threads at once.
"""

from __future__ import annotations

import logging
import os
from plastic_shell.adapters.shell.channel import CommandChannel, CommandLines
from plastic_shell.adapters.shell.dump import run_dump_to_file
from plastic_shell.adapters.shell.session import ShellSession
from plastic_shell.adapters.state.memory_cache import InMemoryStateCache
from plastic_shell.core.commands import SourceControlCommand
from plastic_shell.core.history_usecase import run_get_history
from plastic_shell.core.state_projection import update_cached_states
from plastic_shell.core.status_usecase import run_update_status
from plastic_shell.core.workspace import (
    find_binary_path,
    find_root_directory,
    get_branch_name,
    get_repository_specification,
    get_user_name,
    get_version,
    get_workspace_name,
)
from plastic_shell.domain.config import PlasticConfig
from plastic_shell.domain.entities import FileState, History, RepositorySpec
from plastic_shell.ports.progress import ProgressCallback
from plastic_shell.ports.state_cache import StateCache
from plastic_shell.shared.temp_file import ScopedTempFile

logger = logging.getLogger(__name__)


class SourceControlProvider:
    """Entry point for all Plastic SCM operations of one client.

    Implements the ShellSettings and Identity ports for the components it
    owns.

    Example:
        with SourceControlProvider(config, start_path) as provider:
            if provider.connect():
                states, errors, ok = provider.run_update_status(files)
    """

    def __init__(
        self,
        config: PlasticConfig | None = None,
        start_path: str | None = None,
        cache: StateCache | None = None,
        session: ShellSession | None = None,
    ) -> None:
        """Initialize the provider and locate the workspace root.

        Args:
            config: Configuration (default: built-in defaults).
            start_path: Directory to look for the workspace from
                (default: configured root, else CWD).
            cache: State cache (default: a new in-memory cache).
            session: Shell session (default: a new idle session).
        """
        self.config = config or PlasticConfig.default()
        start = start_path or self.config.workspace.root or os.getcwd()
        self.workspace_found, self._workspace_root = find_root_directory(start)
        if not self.workspace_found:
            logger.info(f"No Plastic SCM workspace found from '{start}'")

        self.cache: StateCache = cache or InMemoryStateCache()
        self.session = session or ShellSession(exit_wait=self.config.shell.exit_wait)
        self.channel = CommandChannel(
            self.session, self, activity_timeout=self.config.shell.activity_timeout
        )

        self.version = ""
        self.user_name = ""
        self.workspace_name = ""
        self.branch_name = ""
        self.repository: RepositorySpec | None = None

    def __enter__(self) -> SourceControlProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.terminate_session()

    @property
    def binary_path(self) -> str:
        return self.config.shell.binary_path or find_binary_path()

    @property
    def workspace_root(self) -> str:
        return self._workspace_root

    def launch_session(self) -> bool:
        """Start the background shell if not already running."""
        return self.session.launch(self.binary_path, self.workspace_root)

    def terminate_session(self) -> None:
        """Stop the background shell and release its pipes."""
        self.session.terminate_gracefully()

    def connect(self) -> bool:
        """Launch the shell and query the workspace identity.

        Returns:
            True if the shell runs and the workspace and repository are known.
        """
        if not self.launch_session():
            return False

        self.version = get_version(self.channel)
        self.user_name = get_user_name(self.channel)
        found, self.workspace_name = get_workspace_name(self.channel, self.workspace_root)
        self.repository = get_repository_specification(self.channel, self.workspace_root)
        self.branch_name = get_branch_name(self.channel, self.workspace_root)
        logger.info(
            f"Connected: cm {self.version}, user '{self.user_name}', "
            f"workspace '{self.workspace_name}', branch '{self.branch_name}'"
        )
        return found and self.repository is not None

    def run_command(
        self,
        command: str,
        parameters: list[str] | None = None,
        files: list[str] | None = None,
    ) -> CommandLines:
        """Run any cm command through the shell."""
        return self.channel.run_command(command, parameters, files)

    def run_update_status(
        self, files: list[str], progress: ProgressCallback | None = None
    ) -> tuple[list[FileState], list[str], bool]:
        """Get states of the given files (see status_usecase.run_update_status)."""
        return run_update_status(self.channel, self, files, progress)

    def update_cached_states(self, states: list[FileState]) -> bool:
        """Merge states into the cache.

        Returns:
            True if any cached state changed.
        """
        return update_cached_states(self.cache, states) > 0

    def run_get_history(self, file: str) -> tuple[History, list[str], bool]:
        """Get the history of a file, oldest revision first."""
        if self.repository is None:
            return [], [f"history of {file}: repository of the workspace is unknown"], False
        return run_get_history(self.channel, self.repository, file)

    def run_dump_to_file(self, revision_spec: str, dump_filename: str) -> bool:
        """Write the raw content of a revision to a file (outside the shell)."""
        return run_dump_to_file(self.binary_path, revision_spec, dump_filename)

    def checkin(self, files: list[str], message: str) -> SourceControlCommand:
        """Check in files with a (possibly multi-line) comment.

        Args:
            files: Files to check in.
            message: Check-in comment, passed through a temporary file.

        Returns:
            SourceControlCommand with the outcome and messages.
        """
        with ScopedTempFile(message) as temp:
            reply = self.run_command("checkin", [f'--commentsfile="{temp.filename}"'], files)

        return SourceControlCommand(
            name="checkin",
            success=reply.success,
            info_messages=reply.results,
            error_messages=reply.errors,
        )