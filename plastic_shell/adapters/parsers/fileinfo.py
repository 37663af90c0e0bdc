"""Parser for 'cm fileinfo' results.

The command is run with
--format="{RevisionChangeset};{RevisionHeadChangeset};{LockedBy};{LockedWhere}"
and prints one line per file:
16;16;;
14;15;;
17;17;srombauts;Workspace_2
"""

from dataclasses import dataclass

FILEINFO_FORMAT = (
    '--format="{RevisionChangeset};{RevisionHeadChangeset};{LockedBy};{LockedWhere}"'
)


@dataclass(frozen=True)
class FileInfo:
    """Revision and lock fields of one fileinfo line."""

    revision_changeset: int = 0
    revision_head_changeset: int = 0
    locked_by: str = ""
    locked_where: str = ""


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def parse_fileinfo_line(line: str) -> FileInfo:
    """Parse one semicolon-delimited fileinfo line.

    Args:
        line: Line like "17;17;srombauts;Workspace_2".

    Returns:
        FileInfo; both changesets stay 0 when fewer than 2 fields are
        present, missing lock fields default to "".
    """
    fields = line.split(";")
    if len(fields) < 2:
        return FileInfo()

    return FileInfo(
        revision_changeset=_to_int(fields[0]),
        revision_head_changeset=_to_int(fields[1]),
        locked_by=fields[2] if len(fields) >= 3 else "",
        locked_where=fields[3] if len(fields) >= 4 else "",
    )
