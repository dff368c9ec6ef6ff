from __future__ import annotations

import logging
from typing import List, Optional

from .lines import SourceLines
from .types import COLUMN_COUNT_MISMATCH, Defect, Document

log = logging.getLogger(__name__)


def mismatch_message(found: int, expected: int) -> str:
    if found > expected:
        return (
            f"Row has {found - expected} extra column(s). "
            "Extra fields will be ignored for type checks."
        )
    return (
        f"Row is missing {expected - found} column(s). "
        "Missing values are treated as empty for type checks."
    )


def check_structure(document: Document, source: Optional[SourceLines] = None) -> List[Defect]:
    """
    Compare every data record's width to the first record's width.

    Rows are never dropped or altered; a mismatch is only reported.
    """
    defects: List[Defect] = []
    expected = document.expected_columns
    if expected is None:
        return defects

    for i, record in document.data_records():
        found = len(record)
        if found == expected:
            continue
        defects.append(Defect(
            line=record.line,
            row=i + 1,
            kind=COLUMN_COUNT_MISMATCH,
            message=mismatch_message(found, expected),
            raw_line=source.raw_line(record.line) if source is not None else "",
        ))

    log.debug("structure: %d mismatch(es) against width %d", len(defects), expected)
    return defects
