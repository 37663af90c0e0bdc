"""File history through 'cm history' and one 'cm log' per revision."""

import logging

from plastic_shell.adapters.parsers.changeset_log import parse_changeset_log
from plastic_shell.adapters.parsers.history import HISTORY_FORMAT, correlate_history
from plastic_shell.adapters.shell.channel import CommandChannel
from plastic_shell.adapters.shell.protocol import split_lines
from plastic_shell.domain.entities import History, RepositorySpec, Revision
from plastic_shell.domain.exceptions import ChangesetLogParseError

logger = logging.getLogger(__name__)

LOG_PARAMETERS = ["--xml", '--encoding="utf-8"']


def resolve_revision(
    channel: CommandChannel,
    repository: RepositorySpec,
    revision: Revision,
    errors: list[str],
) -> Revision | None:
    """Fill a revision with the log of its changeset.

    The raw reply is kept whole (not split into lines) for XML parsing.

    Args:
        channel: Command channel to the cm shell.
        repository: Repository of the workspace.
        revision: Bare revision from the history listing.
        errors: Error lines are appended here.

    Returns:
        The resolved revision, or None on failure.
    """
    spec = repository.changeset_spec(revision.changeset_number)
    reply = channel.execute("log", [spec, *LOG_PARAMETERS])
    if not reply.success:
        errors.extend(split_lines(reply.errors))
        return None

    try:
        return parse_changeset_log(reply.output, revision)
    except ChangesetLogParseError as e:
        logger.error(f"log {spec}: {e.message}")
        errors.append(e.message)
        return None


def run_get_history(
    channel: CommandChannel, repository: RepositorySpec, file: str
) -> tuple[History, list[str], bool]:
    """Get the history of a file, from its oldest to its most recent revision.

    Args:
        channel: Command channel to the cm shell.
        repository: Repository of the workspace, used to address changesets.
        file: Absolute path of the file.

    Returns:
        Tuple of (history, error lines, success). On failure the history
        holds the revisions processed before the failing one.
    """
    reply = channel.run_command("history", [HISTORY_FORMAT], [file])
    errors = list(reply.errors)
    if not reply.success:
        return [], errors, False

    history, success = correlate_history(
        reply.results,
        lambda revision: resolve_revision(channel, repository, revision, errors),
    )
    if not success and not errors:
        errors.append(f"history of {file}: malformed or incomplete history")
    return history, errors, success
