"""Centralized timeout configuration for cm shell operations.

All shell-related timeout values are defined here so they can be tuned in
one place and documented next to their purpose.
"""


class ShellTimeouts:
    """Centralized timeout configuration for cm shell operations.

    All values are in seconds.

    Groups:
        ACTIVITY_*: Waiting for output of a running command
        READ_*: Polling the output pipe
        EXIT_*: Graceful shutdown of the shell process
        KILL_*: Force kill after a failed graceful shutdown
    """

    # =========================================================================
    # Command Activity
    # =========================================================================

    ACTIVITY_TIMEOUT: float = 60.0
    """Time without any output after which a timeout warning is logged.

    Lengthy operations (update, checkin of large files) print intermediate
    progress such as percentages, and every chunk of output refreshes the
    activity timestamp. The warning does not abort the command: the wait
    resumes until the sentinel line appears or the process dies.
    """

    # =========================================================================
    # Output Polling
    # =========================================================================

    READ_POLL_INTERVAL: float = 0.01
    """Maximum time a single read of the output pipe blocks.

    The channel loops on reads of this length so that it can check process
    liveness and the activity timeout between them.
    """

    READ_CHUNK_SIZE: int = 4096
    """Number of bytes read from the output pipe at once."""

    # =========================================================================
    # Graceful Shutdown
    # =========================================================================

    EXIT_WAIT: float = 1.0
    """Time to wait for 'cm shell' to exit after the 'exit' command."""

    EXIT_CHECK_INTERVAL: float = 0.01
    """Interval between liveness checks while waiting for exit."""

    # =========================================================================
    # Force Kill
    # =========================================================================

    KILL_WAIT: float = 2.0
    """Time to wait for the process to be reaped after kill()."""
