"""Parser for 'cm log --xml' results on a single changeset.

Example cm log results:
<?xml version="1.0" encoding="utf-8"?>
<LogList>
  <Changeset>
    <ObjId>989</ObjId>
    <ChangesetId>2</ChangesetId>
    <Branch>/main</Branch>
    <Comment>Ignore Collections and Developers content</Comment>
    <Owner>dev</Owner>
    <GUID>a985c487-0f54-45c5-b0ef-9b87c4c3c3f9</GUID>
    <Changes>
      <Item>
        <Branch>/main</Branch>
        <RevNo>2</RevNo>
        <Owner>dev</Owner>
        <RevId>985</RevId>
        <ParentRevId>282</ParentRevId>
        <SrcCmPath>/ignore.conf</SrcCmPath>
        <SrcParentItemId>2</SrcParentItemId>
        <DstCmPath>/ignore.conf</DstCmPath>
        <DstParentItemId>2</DstParentItemId>
        <Date>2016-04-18T10:44:49.0000000+02:00</Date>
        <Type>Changed</Type>
      </Item>
    </Changes>
    <Date>2016-04-18T10:44:49.0000000+02:00</Date>
  </Changeset>
</LogList>
"""

import dataclasses
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime

from plastic_shell.domain.entities import Revision, RevisionSource
from plastic_shell.domain.exceptions import ChangesetLogParseError

logger = logging.getLogger(__name__)

# cm log item types to history actions; anything else is an edit
_ACTION_MAP: dict[str, str] = {
    "Added": "add",
    "Moved": "branch",
    "Deleted": "delete",
}

# 7 fractional digits, only milliseconds are kept
_FRACTION_PATTERN = re.compile(r"(\.\d{3})\d+")


def translate_action(item_type: str) -> str:
    """Translate a cm log item type to a history action keyword."""
    return _ACTION_MAP.get(item_type, "edit")


def parse_log_date(value: str) -> datetime | None:
    """Parse a cm log date, truncating sub-millisecond precision.

    "2016-04-18T10:44:49.0000000+02:00" => 2016-04-18T10:44:49.000+02:00

    Args:
        value: Date text from the XML.

    Returns:
        Timezone-aware datetime, or None if the text is not a valid date.
    """
    normalized = _FRACTION_PATTERN.sub(r"\1", value.strip(), count=1)
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        logger.warning(f"Invalid date in cm log: '{value}'")
        return None


def _int_or(text: str | None, default: int) -> int:
    if text is None:
        return default
    try:
        return int(text.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class ChangeItem:
    """One Item of the Changes of a changeset."""

    revision_id: int
    parent_revision_id: int | None
    source_path: str | None
    destination_path: str | None
    item_type: str | None


@dataclass(frozen=True)
class ChangesetLog:
    """Typed content of a LogList holding one Changeset."""

    comment: str | None = None
    owner: str | None = None
    date: datetime | None = None
    items: list[ChangeItem] = field(default_factory=list)


def decode_changeset_log(xml_text: str) -> ChangesetLog | None:
    """Decode the XML reply of 'cm log --xml' into a ChangesetLog.

    Args:
        xml_text: Full XML document.

    Returns:
        The decoded changeset, or None if the document holds no
        LogList/Changeset.

    Raises:
        ChangesetLogParseError: If the text is not well-formed XML.
    """
    try:
        root = ET.fromstring(xml_text.strip().encode("utf-8"))
    except ET.ParseError as e:
        raise ChangesetLogParseError(f"Invalid cm log XML: {e}") from e

    if root.tag != "LogList":
        return None
    changeset = root.find("Changeset")
    if changeset is None:
        return None

    date_text = changeset.findtext("Date")
    items = [
        ChangeItem(
            revision_id=_int_or(item.findtext("RevId"), -1),
            parent_revision_id=(
                _int_or(item.findtext("ParentRevId"), 0)
                if item.find("ParentRevId") is not None
                else None
            ),
            source_path=item.findtext("SrcCmPath"),
            destination_path=item.findtext("DstCmPath"),
            item_type=item.findtext("Type"),
        )
        for item in changeset.iterfind("Changes/Item")
    ]
    return ChangesetLog(
        comment=changeset.findtext("Comment"),
        owner=changeset.findtext("Owner"),
        date=parse_log_date(date_text) if date_text is not None else None,
        items=items,
    )


def apply_changeset_log(log: ChangesetLog, revision: Revision) -> Revision:
    """Fill a revision with the details of its changeset.

    Every item matching the revision id is applied, in order: a rename is
    logged as two items (Changed then Moved) and both must be visited, so
    the last match decides filename and action.

    Args:
        log: Decoded changeset.
        revision: Revision with changeset and revision numbers set.

    Returns:
        Updated copy of the revision.
    """
    changes: dict = {}
    if log.comment is not None:
        changes["description"] = log.comment
    if log.owner is not None:
        changes["author"] = log.owner
    if log.date is not None:
        changes["date"] = log.date

    for item in log.items:
        if item.revision_id != revision.revision_number:
            continue
        if item.destination_path is not None:
            changes["filename"] = item.destination_path
            if (
                item.parent_revision_id is not None
                and item.source_path is not None
                and item.source_path != item.destination_path
            ):
                changes["renamed_from"] = RevisionSource(
                    filename=item.source_path,
                    revision_number=item.parent_revision_id,
                )
        if item.item_type is not None:
            changes["action"] = translate_action(item.item_type)

    return dataclasses.replace(revision, **changes)


def parse_changeset_log(xml_text: str, revision: Revision) -> Revision:
    """Decode a 'cm log --xml' reply and apply it to a revision.

    Args:
        xml_text: Full XML document.
        revision: Revision being resolved.

    Returns:
        Updated copy of the revision (unchanged if no changeset found).

    Raises:
        ChangesetLogParseError: If the text is not well-formed XML.
    """
    log = decode_changeset_log(xml_text)
    if log is None:
        logger.warning(f"No changeset in cm log reply for revision {revision.revision}")
        return revision
    return apply_changeset_log(log, revision)
