"""One-shot 'cm cat' invocation writing a revision's raw content to disk.

Binary content cannot share the text sentinel protocol of the shell, so
each dump spawns its own cm process.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)


def run_dump_to_file(binary_path: str, revision_spec: str, dump_filename: str) -> bool:
    """Dump the content of a revision into a file.

    Equivalent to: cm cat revid:1230@rep:myrep@repserver:myserver:8084 --raw --file=Name124.tmp

    Args:
        binary_path: Path to the cm binary.
        revision_spec: Specification of the revision to get.
        dump_filename: File to write the content to.

    Returns:
        True if cm ran and exited with code 0.
    """
    cmd = [binary_path, "cat", revision_spec, "--raw", f"--file={dump_filename}"]
    logger.info(f"Dumping revision: '{' '.join(cmd)}'")
    try:
        result = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as e:
        logger.error(f"Failed to run '{binary_path}': {e}")
        return False

    stdout = result.stdout.decode("utf-8", errors="replace").strip()
    stderr = result.stderr.decode("utf-8", errors="replace").strip()
    logger.debug(f"cat exit code {result.returncode}. Output: '{stdout}'")
    if result.returncode != 0 or stderr:
        logger.error(f"cat exit code {result.returncode}. Errors: '{stderr}'")

    return result.returncode == 0
