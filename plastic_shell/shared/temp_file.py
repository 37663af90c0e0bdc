"""Temporary file holding text passed to cm through a file argument.

Multi-line arguments, such as check-in comments, cannot go on the shell
command line and are written to a file instead (--commentsfile=...).
"""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class ScopedTempFile:
    """Temporary UTF-8 text file deleted when leaving its scope.

    Example:
        with ScopedTempFile(message) as temp:
            channel.run_command("checkin", [f'--commentsfile="{temp.filename}"'], files)
    """

    def __init__(self, text: str, directory: Path | None = None) -> None:
        """Write text (UTF-8 without BOM) to a new temporary file.

        Args:
            text: Content of the file.
            directory: Where to create the file (default: system temp dir).
        """
        self.filename = ""
        try:
            fd, filename = tempfile.mkstemp(
                prefix="Plastic-Temp", suffix=".txt", dir=directory
            )
        except OSError as e:
            logger.error(f"Failed to create temp file: {e}")
            return

        self.filename = filename
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to write to temp file {filename}: {e}")
            self.close()

    def __enter__(self) -> "ScopedTempFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Delete the file. Safe to call more than once."""
        if not self.filename:
            return
        path = Path(self.filename)
        self.filename = ""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete temp file {path}: {e}")
