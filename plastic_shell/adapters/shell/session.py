"""Lifecycle of the background 'cm shell' process.

Handles spawning, liveness checks, graceful exit and force-closing of the
single long-lived cm worker, and owns its input and output pipes.
"""

import codecs
import contextlib
import logging
import os
import queue
import subprocess
import threading
import time
from typing import BinaryIO

from plastic_shell.adapters.shell.protocol import EXIT_COMMAND, format_command_line
from plastic_shell.adapters.shell.timeouts import ShellTimeouts

logger = logging.getLogger(__name__)

SHELL_SUBCOMMAND = "shell"


def _pump_output(stream: BinaryIO, chunks: "queue.Queue[bytes]", chunk_size: int) -> None:
    """Forward raw output of the shell to a queue until end of stream.

    Runs on the reader thread so that the channel can wait for output with
    a timeout instead of blocking on the pipe.
    """
    fd = stream.fileno()
    while True:
        try:
            data = os.read(fd, chunk_size)
        except (OSError, ValueError):
            # Pipe closed under us during force close
            return
        if not data:
            return
        chunks.put(data)


class ShellSession:
    """Owner of the 'cm shell' process and its two pipes.

    Only one session is meant to exist per client. The session is not
    thread-safe: the surrounding code must serialize its use.
    """

    def __init__(self, exit_wait: float = ShellTimeouts.EXIT_WAIT) -> None:
        """Initialize an idle session.

        Args:
            exit_wait: Seconds to wait for the shell to exit on terminate.
        """
        self.exit_wait = exit_wait
        self._process: subprocess.Popen | None = None
        self._reader: threading.Thread | None = None
        self._chunks: queue.Queue[bytes] = queue.Queue()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def pid(self) -> int | None:
        """PID of the shell process, None if never launched or closed."""
        return self._process.pid if self._process is not None else None

    def has_process(self) -> bool:
        """Check if a process handle is held (running or not)."""
        return self._process is not None

    def is_alive(self) -> bool:
        """Check if the shell process is still running.

        Returns:
            True if a process was launched and has not exited.
        """
        return self._process is not None and self._process.poll() is None

    def launch(self, binary_path: str, working_directory: str) -> bool:
        """Start 'cm shell' in the background, unless already running.

        A missing cm binary is an expected condition (no Plastic SCM client
        installed), so failure is reported as False rather than raised.

        Args:
            binary_path: Path to the cm binary.
            working_directory: Directory to run the shell from (workspace root).

        Returns:
            True if the shell is running.
        """
        if self.is_alive():
            return True
        if self._process is not None:
            # Stale handle of a crashed shell
            self.close()

        cmd = [binary_path, SHELL_SUBCOMMAND]
        logger.info(f"Launching background shell: '{' '.join(cmd)}' in '{working_directory}'")
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                cwd=working_directory or None,
                creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
            )
        except (OSError, ValueError) as e:
            # Not a bug, just no Plastic SCM cli found
            logger.warning(f"Failed to launch 'cm shell': {e}")
            self.close()
            return False

        self._process = process
        self._chunks = queue.Queue()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._reader = threading.Thread(
            target=_pump_output,
            args=(process.stdout, self._chunks, ShellTimeouts.READ_CHUNK_SIZE),
            name="cm-shell-reader",
            daemon=True,
        )
        self._reader.start()
        logger.debug(f"'cm shell' started with PID {process.pid}")
        return True

    def write(self, text: str) -> bool:
        """Write text to the shell input in one go.

        Args:
            text: Complete command line, newline included.

        Returns:
            True if the text was written and flushed.
        """
        if self._process is None or self._process.stdin is None:
            return False
        try:
            self._process.stdin.write(text.encode("utf-8"))
            self._process.stdin.flush()
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Failed to write to 'cm shell': {e}")
            return False

    def read(self, timeout: float = ShellTimeouts.READ_POLL_INTERVAL) -> str:
        """Read whatever output is available, waiting at most `timeout`.

        Args:
            timeout: Maximum seconds to wait for a chunk.

        Returns:
            Decoded text, or "" if nothing arrived in time.
        """
        try:
            data = self._chunks.get(timeout=timeout)
        except queue.Empty:
            return ""
        return self._decoder.decode(data)

    def drain(self) -> str:
        """Collect all output left once the shell has exited.

        Waits for the reader thread to reach the end of the pipe, so output
        written right before the process died is not lost.

        Returns:
            Decoded text still pending, "" if none or the shell is running.
        """
        if self.is_alive():
            return ""
        if self._reader is not None:
            self._reader.join(timeout=ShellTimeouts.KILL_WAIT)
            if self._reader.is_alive():
                logger.warning("'cm shell' output still open after exit")

        parts = []
        while True:
            try:
                data = self._chunks.get_nowait()
            except queue.Empty:
                break
            parts.append(self._decoder.decode(data))
        parts.append(self._decoder.decode(b"", final=True))
        return "".join(parts)

    def wait_for_exit(
        self,
        timeout: float,
        check_interval: float = ShellTimeouts.EXIT_CHECK_INTERVAL,
    ) -> bool:
        """Poll the process until it exits or the timeout elapses.

        Args:
            timeout: Maximum seconds to wait.
            check_interval: Seconds between liveness checks.

        Returns:
            True if the process is no longer running.
        """
        deadline = time.monotonic() + timeout
        while self.is_alive():
            if time.monotonic() >= deadline:
                return False
            time.sleep(check_interval)
        return True

    def terminate_gracefully(self) -> None:
        """Ask the shell to exit, then close process and pipes unconditionally."""
        if self._process is None:
            return

        if self.is_alive():
            logger.info("Stopping 'cm shell'...")
            self.write(format_command_line(EXIT_COMMAND))
            if not self.wait_for_exit(self.exit_wait):
                logger.warning(
                    f"'cm shell' did not exit within {self.exit_wait:.1f}s, killing it"
                )
        self.close()

    def restart(self, binary_path: str, working_directory: str) -> bool:
        """Force-close the current shell and launch a new one.

        Args:
            binary_path: Path to the cm binary.
            working_directory: Directory to run the shell from.

        Returns:
            True if the new shell is running.
        """
        logger.info("Restarting 'cm shell'...")
        self.close()
        return self.launch(binary_path, working_directory)

    def close(self) -> None:
        """Force-close the process handle and both pipes."""
        process = self._process
        self._process = None
        if process is None:
            return

        if process.poll() is None:
            with contextlib.suppress(OSError):
                process.kill()
        try:
            process.wait(timeout=ShellTimeouts.KILL_WAIT)
        except subprocess.TimeoutExpired:
            logger.error(f"'cm shell' (PID {process.pid}) survived kill")

        for stream in (process.stdin, process.stdout):
            if stream is not None:
                with contextlib.suppress(OSError, ValueError):
                    stream.close()

        if self._reader is not None:
            self._reader.join(timeout=ShellTimeouts.KILL_WAIT)
            self._reader = None
        logger.debug(f"Closed 'cm shell' (PID {process.pid})")
