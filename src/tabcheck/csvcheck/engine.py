"""
One validation run: raw text in, parsed document plus ordered defects out.

Stages run in a fixed order and each appends to the same result:

    detect delimiter (when "auto") -> tokenize -> structure -> rules

Nothing here performs I/O; every run is a pure function of its inputs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from .detect import AUTO, delimiter_name, detect_delimiter, parse_delimiter
from .lines import SourceLines
from .rules import bind_rules, evaluate
from .structure import check_structure
from .tokenize import tokenize
from .types import Defect, Document, Rule

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    document: Document
    defects: Tuple[Defect, ...]
    delimiter: str
    rules: Tuple[Rule, ...] = ()
    row_budget: Optional[int] = None
    total_lines: int = 0

    @property
    def ok(self) -> bool:
        return not self.defects

    @property
    def data_rows(self) -> int:
        return max(0, len(self.document.records) - self.document.data_start)

    @property
    def validated_rows(self) -> int:
        if self.row_budget is None:
            return self.data_rows
        return min(self.data_rows, self.row_budget)

    @property
    def skipped_rows(self) -> int:
        return self.data_rows - self.validated_rows

    def count_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for d in self.defects:
            counts[d.kind] = counts.get(d.kind, 0) + 1
        return counts

    def summary(self) -> Dict[str, Any]:
        """Run statistics in display order."""
        doc = self.document
        return {
            "delimiter": delimiter_name(self.delimiter),
            "total_lines": self.total_lines,
            "parsed_rows": len(doc.records),
            "expected_columns": doc.expected_columns,
            "header_row": "yes" if doc.has_header else "no",
            "checks": len(self.rules),
            "validated_rows": self.validated_rows,
            "skipped_rows": self.skipped_rows,
            "issues": len(self.defects),
        }


def resolve_delimiter(text: str, delimiter: Optional[str]) -> str:
    if delimiter is None:
        return detect_delimiter(text)
    delimiter = parse_delimiter(delimiter)
    if delimiter == AUTO:
        return detect_delimiter(text)
    return delimiter


def validate_text(
    text: str,
    delimiter: Optional[str] = AUTO,
    has_header: bool = True,
    rules: Sequence[Rule] = (),
    row_budget: Optional[int] = None,
) -> ValidationResult:
    """
    Validate ``text`` and return the parsed document with every defect found.

    Data problems are reported, never raised. Configuration problems raise:
      - RuleConfigError for a rule column the header cannot satisfy
      - ValueError for a bad delimiter or a negative row budget
    """
    if row_budget is not None and row_budget < 0:
        raise ValueError(f"row_budget must be >= 0, got {row_budget}")

    rules = tuple(rules)
    source = SourceLines(text)
    delim = resolve_delimiter(text, delimiter)

    records, defects = tokenize(text, delim, source=source)
    defects = list(defects)

    expected = len(records[0]) if records else None
    document = Document(records=tuple(records), has_header=has_header, expected_columns=expected)

    bound = bind_rules(rules, document.header)

    defects.extend(check_structure(document, source=source))
    defects.extend(evaluate(document, bound, row_budget=row_budget, source=source))

    log.debug(
        "validated %d record(s) with delimiter %r: %d defect(s)",
        len(records), delim, len(defects),
    )
    return ValidationResult(
        document=document,
        defects=tuple(defects),
        delimiter=delim,
        rules=bound,
        row_budget=row_budget,
        total_lines=source.count(),
    )

