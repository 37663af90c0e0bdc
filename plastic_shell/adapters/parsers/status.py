"""Parser for 'cm status --nostatus --noheaders --all --ignored' results.

Example results, one line per file:
 CH Content/Changed_BP.uasset
 CO Content/CheckedOut_BP.uasset
 CP Content/Copied_BP.uasset
 RP Content/Replaced_BP.uasset
 AD Content/Added_BP.uasset
 PR Content/Private_BP.uasset
 IG Content/Ignored_BP.uasset
 DE Content/Deleted_BP.uasset
 LD Content/Deleted2_BP.uasset
 MV 100% Content/ToMove_BP.uasset -> Content/Moved_BP.uasset
 LM 100% Content/ToMove2_BP.uasset -> Content/Moved2_BP.uasset
"""

import logging

from plastic_shell.domain.entities import WorkspaceState

logger = logging.getLogger(__name__)

# Maps the 2-letter status code to the workspace state
_STATUS_CODE_MAP: dict[str, WorkspaceState] = {
    "CH": WorkspaceState.CHANGED,  # Modified but not checked-out
    "CO": WorkspaceState.CHECKED_OUT,
    "CP": WorkspaceState.COPIED,
    "RP": WorkspaceState.REPLACED,
    "AD": WorkspaceState.ADDED,
    "PR": WorkspaceState.PRIVATE,  # Not controlled/untracked
    "IG": WorkspaceState.IGNORED,
    "DE": WorkspaceState.DELETED,
    "LD": WorkspaceState.DELETED,  # Locally deleted (missing)
    "MV": WorkspaceState.MOVED,
    "LM": WorkspaceState.MOVED,  # Locally moved
}


def parse_status_line(line: str) -> WorkspaceState:
    """Map one status line to a workspace state.

    Args:
        line: Line like " CO Content/Foo.uasset" (leading space optional).

    Returns:
        The mapped state, or UNKNOWN for an unrecognized code.
    """
    code = line.lstrip()[:2]
    state = _STATUS_CODE_MAP.get(code)
    if state is None:
        logger.warning(f"Unknown status code '{code}' in '{line}'")
        return WorkspaceState.UNKNOWN
    return state


def parse_status_results(results: list[str]) -> WorkspaceState:
    """Interpret the status results of a single file.

    Args:
        results: Non-empty output lines of a status command on one file.

    Returns:
        CONTROLLED when there is no line (unchanged or hidden changes),
        else the state of the last line. A file renamed by the editor
        reports two lines, checked-out then moved, and the last one wins.
    """
    if not results:
        return WorkspaceState.CONTROLLED
    return parse_status_line(results[-1])
