"""Request/response channel over the 'cm shell' session.

Sends one framed command at a time and collects its reply up to the
sentinel line. Detects a crashed shell and restarts it before the next
command. The channel is not reentrant: callers must serialize commands.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from plastic_shell.adapters.shell.protocol import (
    EXIT_COMMAND,
    SentinelScanner,
    format_command_line,
    split_lines,
)
from plastic_shell.adapters.shell.session import ShellSession
from plastic_shell.adapters.shell.timeouts import ShellTimeouts
from plastic_shell.ports.settings import ShellSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    """Raw reply of one command.

    Attributes:
        success: True if the sentinel reported code 0.
        output: Accumulated output on success, "" on failure.
        errors: Accumulated output (or a diagnostic) on failure, "" on success.
    """

    success: bool
    output: str = ""
    errors: str = ""


@dataclass(frozen=True)
class CommandLines:
    """Reply of one command split into non-empty lines."""

    success: bool
    results: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def shell_not_running_message(command: str) -> str:
    return f"{command}: Plastic SCM shell not running!"


class CommandChannel:
    """Framed request/response protocol on top of a ShellSession."""

    def __init__(
        self,
        session: ShellSession,
        settings: ShellSettings,
        activity_timeout: float = ShellTimeouts.ACTIVITY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the channel.

        Args:
            session: Session owning the cm shell process.
            settings: Source of binary path and workspace root for restarts.
            activity_timeout: Seconds without output before a timeout warning.
            clock: Monotonic clock, injectable for tests.
        """
        self.session = session
        self.settings = settings
        self.activity_timeout = activity_timeout
        self._clock = clock

    def _ensure_running(self, command: str) -> bool:
        """Restart a crashed shell before sending anything but 'exit'."""
        if not self.session.has_process():
            return False
        if self.session.is_alive():
            return True
        if command == EXIT_COMMAND:
            return False

        logger.warning("'cm shell' has stopped. Restarting!")
        return self.session.restart(self.settings.binary_path, self.settings.workspace_root)

    def execute(
        self,
        command: str,
        parameters: list[str] | None = None,
        files: list[str] | None = None,
    ) -> CommandOutput:
        """Run one command through the shell and wait for its sentinel.

        Blocks until the sentinel line is received or the process dies. A
        long silence only logs a warning: commands printing progress late
        are not aborted.

        Args:
            command: The cm command (e.g. "status").
            parameters: Parameters of the command.
            files: Files to operate on (quoted on the command line).

        Returns:
            CommandOutput with success flag, output and error text.
        """
        if not self._ensure_running(command):
            logger.error(f"{command}: 'cm shell' not running")
            return CommandOutput(success=False, errors=shell_not_running_message(command))

        command_line = format_command_line(command, parameters, files)
        logger.info(f"Running: '{command_line.rstrip()}'")
        if not self.session.write(command_line):
            return CommandOutput(success=False, errors=shell_not_running_message(command))

        scanner = SentinelScanner()
        start = self._clock()
        last_activity = start
        logged_len = 0
        done = False
        while not done and self.session.is_alive():
            chunk = self.session.read(ShellTimeouts.READ_POLL_INTERVAL)
            if chunk:
                # Any output, like percentage of progress, refreshes the timeout
                last_activity = self._clock()
                done = scanner.feed(chunk)
            elif self._clock() - last_activity > self.activity_timeout:
                logger.warning(
                    f"{command}: TIMEOUT after {self._clock() - start:.1f}s, "
                    f"still waiting. Output:\n{scanner.output[logged_len:]}"
                )
                logged_len = len(scanner.output)
                last_activity = self._clock()

        if not done:
            # Output the process wrote right before exiting may still be in the pipe
            done = scanner.feed(self.session.drain())

        elapsed = self._clock() - start
        if command != EXIT_COMMAND and not self.session.is_alive():
            # 'cm shell' only terminates on 'exit'; restarted on next command
            logger.error(
                f"{command}: 'cm shell' stopped after {elapsed:.1f}s. Output:\n{scanner.output}"
            )
        else:
            logger.debug(
                f"{command}: result={scanner.result_code} in {elapsed:.3f}s. Output:\n{scanner.output}"
            )

        if scanner.success:
            return CommandOutput(success=True, output=scanner.output)
        return CommandOutput(success=False, errors=scanner.output)

    def run_command(
        self,
        command: str,
        parameters: list[str] | None = None,
        files: list[str] | None = None,
    ) -> CommandLines:
        """Run one command and split its reply into lines.

        Args:
            command: The cm command.
            parameters: Parameters of the command.
            files: Files to operate on.

        Returns:
            CommandLines with one entry per non-empty output/error line.
        """
        reply = self.execute(command, parameters, files)
        return CommandLines(
            success=reply.success,
            results=split_lines(reply.output),
            errors=split_lines(reply.errors),
        )
