"""Document numbering - human-readable codes per organization, type and day.

Codes look like ``SR-20240115-0007``: type prefix, creation date, and a
sequence that restarts at 1 every day for each organization. The sequence is
zero-padded to four digits and simply widens past 9999.

Generation is a read; uniqueness is enforced by the per-organization unique
constraint on the code column, and document_service retries the insert with
a fresh code when two creators race for the same number.
"""

import re
from datetime import date
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldcrm.core.document_types import DocumentType

CODE_PATTERN = re.compile(r"^(?P<prefix>[A-Z]{2,3})-(?P<day>\d{8})-(?P<sequence>\d{4,})$")


class DocumentCode(NamedTuple):
    prefix: str
    day: date
    sequence: int


def day_stamp(day: date) -> str:
    """YYYYMMDD for a calendar day."""
    return day.strftime("%Y%m%d")


def format_document_code(prefix: str, day: date, sequence: int) -> str:
    """Format ``{PREFIX}-{YYYYMMDD}-{NNNN}``."""
    if sequence < 1:
        raise ValueError("Document sequence starts at 1")
    return f"{prefix}-{day_stamp(day)}-{sequence:04d}"


def parse_document_code(code: str) -> DocumentCode:
    """Split a document code into prefix, day and sequence."""
    match = CODE_PATTERN.match(code)
    if not match:
        raise ValueError(f"Malformed document code: {code!r}")
    raw_day = match.group("day")
    day = date(int(raw_day[:4]), int(raw_day[4:6]), int(raw_day[6:]))
    return DocumentCode(match.group("prefix"), day, int(match.group("sequence")))


def count_documents_for_day(
    db: Session,
    org_id: UUID,
    doc_type: DocumentType,
    day: date,
) -> int:
    """
    Number of codes already issued to the organization for this type and day.

    Uses the highest issued sequence when it exceeds the row count, so a
    deleted document leaves a gap instead of a code that collides forever.
    """
    day_prefix = f"{doc_type.prefix}-{day_stamp(day)}-"
    codes = db.execute(
        select(doc_type.code_column).where(
            doc_type.model.organization_id == org_id,
            doc_type.code_column.like(f"{day_prefix}%"),
        )
    ).scalars().all()

    highest = 0
    for code in codes:
        try:
            highest = max(highest, parse_document_code(code).sequence)
        except ValueError:
            continue
    return max(len(codes), highest)


def next_document_code(
    db: Session,
    org_id: UUID,
    doc_type: DocumentType,
    day: date,
) -> str:
    """Generate the next code for (organization, type, day). Pure read."""
    count = count_documents_for_day(db, org_id, doc_type, day)
    return format_document_code(doc_type.prefix, day, count + 1)
