from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union


class ValueKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    DATE = "date"
    EMAIL = "email"
    URL = "url"


class DateLayout(str, Enum):
    ISO = "ISO"
    MDY = "MM/DD/YYYY"
    DMY = "DD/MM/YYYY"


# ---------------------------------------------------------------------------
# Defect kinds
# ---------------------------------------------------------------------------

UNCLOSED_QUOTE = "unclosed_quote"
EMPTY_FILE = "empty_file"
COLUMN_COUNT_MISMATCH = "column_count_mismatch"
REQUIRED_MISSING = "required_missing"


def type_tag(kind: Union[str, ValueKind]) -> str:
    """Defect kind for a failed type check, e.g. ``type_integer``."""
    return f"type_{_spelling(kind)}"


def _spelling(v: Union[str, Enum]) -> str:
    return v.value if isinstance(v, Enum) else str(v)


class RuleConfigError(ValueError):
    """A rule cannot be applied to the document it was configured for."""


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rule:
    """
    A per-column check applied to every data record.

    ``column`` is a 0-based index, or a header name that is bound to an
    index once the header is known. ``kind`` and ``date_layout`` keep the
    spelling they were configured with; unknown spellings are reported as
    defects when the rule runs.
    """

    column: Union[int, str]
    kind: Union[str, ValueKind] = ValueKind.TEXT
    date_layout: Union[str, DateLayout] = DateLayout.ISO
    required: bool = False

    @property
    def kind_name(self) -> str:
        return _spelling(self.kind)

    @property
    def layout_name(self) -> str:
        return _spelling(self.date_layout)


# ---------------------------------------------------------------------------
# Parsed input
# ---------------------------------------------------------------------------

class Record(list):
    """Field strings of one parsed row, tagged with its 1-based source line."""

    def __init__(self, fields: Iterable[str] = (), line: int = 1):
        super().__init__(fields)
        self.line = line

    def __repr__(self) -> str:
        return f"Record({list.__repr__(self)}, line={self.line})"

    def field(self, index: int) -> str:
        """Field at ``index``, or ``""`` when the record is too short."""
        return self[index] if 0 <= index < len(self) else ""


@dataclass(frozen=True)
class Document:
    records: Tuple[Record, ...] = ()
    has_header: bool = False
    expected_columns: Optional[int] = None

    @property
    def header(self) -> Optional[Record]:
        if self.has_header and self.records:
            return self.records[0]
        return None

    @property
    def data_start(self) -> int:
        return 1 if self.has_header else 0

    def data_records(self) -> List[Tuple[int, Record]]:
        """(0-based record index, record) for every data record."""
        return [(i, self.records[i]) for i in range(self.data_start, len(self.records))]

    def label_for(self, column: int) -> str:
        header = self.header
        if header is not None and 0 <= column < len(header):
            return header[column]
        return f"col_{column + 1}"


# ---------------------------------------------------------------------------
# Defects
# ---------------------------------------------------------------------------

EXPORT_COLUMNS = ("row", "line", "column", "header", "rule", "value", "message", "raw_line")


@dataclass(frozen=True)
class Defect:
    """
    One reported problem.

    row    : 1-based record index (None for file-level defects)
    column : 1-based column number (None when not column specific)
    """

    line: int
    kind: str
    message: str
    row: Optional[int] = None
    column: Optional[int] = None
    header: str = ""
    value: str = ""
    raw_line: str = ""

    def as_dict(self) -> Dict[str, Any]:
        """Export-ordered mapping; missing row/column render as blank."""
        return {
            "row": "" if self.row is None else self.row,
            "line": self.line,
            "column": "" if self.column is None else self.column,
            "header": self.header,
            "rule": self.kind,
            "value": self.value,
            "message": self.message,
            "raw_line": self.raw_line,
        }
