"""Text protocol of the 'cm shell' background process.

Each command is written as one line on the process input. The process
streams any number of output lines and ends the reply with a sentinel line
"CommandResult <code>", where 0 means success.
"""

import logging
import re
import sys
from enum import Enum

logger = logging.getLogger(__name__)

COMMAND_RESULT_MARKER = "CommandResult "
EXIT_COMMAND = "exit"

# cm writes native line endings
LINE_DELIMITER = "\r\n" if sys.platform == "win32" else "\n"

_RESULT_CODE_PATTERN = re.compile(r"\s*(-?\d+)")


def format_command_line(
    command: str,
    parameters: list[str] | None = None,
    files: list[str] | None = None,
) -> str:
    """Build the line sent to the shell for one command.

    Args:
        command: The cm command (e.g. "status", "log", "checkin").
        parameters: Parameters appended as-is, in order.
        files: Files appended last, each one double-quoted.

    Returns:
        Space-separated command line terminated by a single newline.
    """
    parts = [command]
    parts.extend(parameters or [])
    parts.extend(f'"{file}"' for file in files or [])
    return " ".join(parts) + "\n"


def split_lines(text: str) -> list[str]:
    """Split shell output into its non-empty lines.

    Args:
        text: Raw output accumulated from the shell.

    Returns:
        Ordered list of non-empty lines, without terminators.
    """
    return [line for line in text.split(LINE_DELIMITER) if line]


def parse_result_code(text: str) -> int | None:
    """Parse the numeric code following the sentinel marker.

    Args:
        text: Text between the marker and the line terminator.

    Returns:
        The code, or None if the text does not start with an integer.
    """
    match = _RESULT_CODE_PATTERN.match(text)
    if match is None:
        return None
    return int(match.group(1))


class ScannerState(str, Enum):
    """States of the sentinel reader."""

    ACCUMULATING = "accumulating"
    SENTINEL_FOUND = "sentinel_found"
    DONE = "done"


class SentinelScanner:
    """Incremental reader that finds the end of one command reply.

    Chunks are kept in a list as they are read from the pipe and joined
    only once. The marker is searched in a short tail (the end of the
    previous chunks, to catch a marker split across chunks) plus the new
    chunk, keeping the last occurrence; once a marker is seen the tail
    starts at it and the line terminator is searched from just past it.

    States:
        ACCUMULATING: No marker seen yet.
        SENTINEL_FOUND: Marker seen, waiting for its line terminator.
        DONE: Result code parsed, output trimmed.
    """

    def __init__(self, delimiter: str = LINE_DELIMITER) -> None:
        self.delimiter = delimiter
        self.state = ScannerState.ACCUMULATING
        self.result_code: int | None = None
        self._chunks: list[str] = []
        self._length = 0
        self._tail = ""
        self._marker_index = -1

    @property
    def output(self) -> str:
        """Output accumulated so far, without the sentinel once done."""
        if len(self._chunks) > 1:
            self._chunks = ["".join(self._chunks)]
        return self._chunks[0] if self._chunks else ""

    @property
    def success(self) -> bool:
        """True if the reply ended with a result code of zero."""
        return self.state == ScannerState.DONE and self.result_code == 0

    def feed(self, chunk: str) -> bool:
        """Append a chunk of output and look for the sentinel.

        Args:
            chunk: Newly read text.

        Returns:
            True once the full sentinel line has been received.
        """
        if self.state == ScannerState.DONE:
            if chunk:
                logger.warning(f"Discarding {len(chunk)} characters received after sentinel")
            return True
        if not chunk:
            return False

        window = self._tail + chunk
        window_start = self._length - len(self._tail)
        self._chunks.append(chunk)
        self._length += len(chunk)

        index = window.rfind(COMMAND_RESULT_MARKER)
        if index != -1:
            self._marker_index = window_start + index
            self.state = ScannerState.SENTINEL_FOUND
            self._tail = window[index:]
        elif self.state == ScannerState.SENTINEL_FOUND:
            # Tail already starts at the marker
            self._tail = window
        else:
            self._tail = window[-(len(COMMAND_RESULT_MARKER) - 1) :]

        if self.state == ScannerState.SENTINEL_FOUND:
            return self._complete()
        return False

    def _complete(self) -> bool:
        code_start = len(COMMAND_RESULT_MARKER)
        code_end = self._tail.find(self.delimiter, code_start)
        if code_end == -1:
            return False

        code_text = self._tail[code_start:code_end]
        self.result_code = parse_result_code(code_text)
        if self.result_code is None:
            logger.warning(f"Unparseable result code '{code_text}'")

        # Callers never see the sentinel line nor anything after it
        self._chunks = ["".join(self._chunks)[: self._marker_index]]
        self._tail = ""
        self.state = ScannerState.DONE
        return True
