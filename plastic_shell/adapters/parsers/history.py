"""Correlation of 'cm history' results with their changeset logs.

The history command is run with --format="{1};{6}" and prints one
changeset number and revision id per line, most recent first:
18;223
17;220
14;176
"""

import logging
from collections.abc import Callable

from plastic_shell.domain.entities import History, Revision

logger = logging.getLogger(__name__)

HISTORY_FORMAT = '--format="{1};{6}"'

# Resolves a bare revision against its changeset log, None on failure
RevisionResolver = Callable[[Revision], Revision | None]


def parse_history_line(line: str) -> Revision | None:
    """Parse one "changeset;revisionId" line into a bare revision.

    Args:
        line: Line like "14;176".

    Returns:
        Revision with changeset and revision numbers set, or None if the
        line does not hold exactly two integer fields.
    """
    fields = line.split(";")
    if len(fields) != 2:
        return None
    changeset, revision_id = (f.strip() for f in fields)
    try:
        return Revision(
            changeset_number=int(changeset),
            revision_number=int(revision_id),
            revision=revision_id,
        )
    except ValueError:
        return None


def correlate_history(lines: list[str], resolve: RevisionResolver) -> tuple[History, bool]:
    """Build the history of a file, resolving each revision's changeset.

    Lines are processed in reverse order so that the history goes from the
    oldest revision to the most recent one. Processing stops at the first
    malformed line or failed resolution; revisions appended before that
    stay in the returned history.

    Args:
        lines: Output lines of the history command.
        resolve: Callback running the log lookup for a revision.

    Returns:
        Tuple of (history, success).
    """
    history: History = []
    for line in reversed(lines):
        revision = parse_history_line(line)
        if revision is None:
            logger.error(f"Malformed history record: '{line}'")
            return history, False

        resolved = resolve(revision)
        if resolved is None:
            # Keep the bare revision: partial results are reported as well
            history.append(revision)
            return history, False
        history.append(resolved)

    return history, True
