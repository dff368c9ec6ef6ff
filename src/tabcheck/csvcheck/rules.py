from __future__ import annotations

import logging
import math
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from .dates import PASS, Outcome, validate_date
from .lines import SourceLines
from .types import (
    REQUIRED_MISSING,
    Defect,
    Document,
    Record,
    Rule,
    RuleConfigError,
    ValueKind,
    type_tag,
)

log = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_NUMBER = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_WHITESPACE = re.compile(r"\s")
_INDEX = re.compile(r"-?[0-9]+")

# schemes that cannot exist without a host
_HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


# ---------------------------------------------------------------------------
# Value validators
# ---------------------------------------------------------------------------

def check_text(value: str, rule: Rule) -> Outcome:
    return PASS


def check_integer(value: str, rule: Rule) -> Outcome:
    if _INTEGER.fullmatch(value):
        return PASS
    return Outcome(False, "Expected integer.")


def check_number(value: str, rule: Rule) -> Outcome:
    if _NUMBER.fullmatch(value) and math.isfinite(float(value)):
        return PASS
    return Outcome(False, "Expected number.")


def check_email(value: str, rule: Rule) -> Outcome:
    if _EMAIL.fullmatch(value):
        return PASS
    return Outcome(False, "Expected email-like value.")


def is_absolute_url(value: str) -> bool:
    if _WHITESPACE.search(value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # raises on a malformed port
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME.fullmatch(parts.scheme):
        return False
    if parts.scheme.lower() in _HOST_SCHEMES:
        return bool(parts.hostname)
    return bool(parts.netloc or parts.path)


def check_url(value: str, rule: Rule) -> Outcome:
    if is_absolute_url(value):
        return PASS
    return Outcome(False, "Expected URL.")


def check_date(value: str, rule: Rule) -> Outcome:
    return validate_date(value, rule.date_layout)


VALIDATORS: Dict[ValueKind, Callable[[str, Rule], Outcome]] = {
    ValueKind.TEXT: check_text,
    ValueKind.INTEGER: check_integer,
    ValueKind.NUMBER: check_number,
    ValueKind.DATE: check_date,
    ValueKind.EMAIL: check_email,
    ValueKind.URL: check_url,
}


def validate_value(value: str, rule: Rule) -> Outcome:
    """Run the validator for ``rule.kind``; unknown kinds fail instead of raising."""
    try:
        kind = ValueKind(rule.kind)
    except ValueError:
        return Outcome(False, "Unknown rule type.")
    return VALIDATORS[kind](value, rule)


# ---------------------------------------------------------------------------
# Binding rules to a document
# ---------------------------------------------------------------------------

def bind_rules(rules: Sequence[Rule], header: Optional[Record]) -> Tuple[Rule, ...]:
    """
    Resolve header names to indices and check every index fits the header.

    Raises RuleConfigError for a column the document cannot have.
    """
    bound: List[Rule] = []
    for rule in rules:
        col = rule.column
        if isinstance(col, str) and not _INDEX.fullmatch(col):
            if header is None:
                raise RuleConfigError(f"Column {col!r} given by name but the input has no header row")
            if col not in header:
                raise RuleConfigError(f"Column {col!r} not found in header {list(header)}")
            col = list(header).index(col)
        else:
            col = int(col)

        if col < 0:
            raise RuleConfigError(f"Column index must be >= 0, got {col}")
        if header is not None and col >= len(header):
            raise RuleConfigError(
                f"Column index {col} is out of range for a header of {len(header)} column(s)"
            )
        bound.append(Rule(column=col, kind=rule.kind, date_layout=rule.date_layout, required=rule.required))
    return tuple(bound)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate(
    document: Document,
    rules: Sequence[Rule],
    row_budget: Optional[int] = None,
    source: Optional[SourceLines] = None,
) -> List[Defect]:
    """
    Apply every rule to every data record, in rule order, up to ``row_budget``
    data records (None = no limit).

    Every failing rule instance yields its own defect; evaluation never stops
    early. Rules are bound to the header first, so a column the header
    cannot satisfy raises RuleConfigError before any row is read.
    """
    if row_budget is not None and row_budget < 0:
        raise ValueError(f"row_budget must be >= 0, got {row_budget}")
    rules = bind_rules(rules, document.header)

    defects: List[Defect] = []
    if not rules:
        return defects

    data = document.data_records()
    if row_budget is not None:
        data = data[:row_budget]

    for i, record in data:
        raw_line = source.raw_line(record.line) if source is not None else ""
        for rule in rules:
            col = rule.column
            value = record.field(col).strip()
            where = dict(
                line=record.line,
                row=i + 1,
                column=col + 1,
                header=document.label_for(col),
                raw_line=raw_line,
            )

            if not value:
                if rule.required:
                    defects.append(Defect(kind=REQUIRED_MISSING, message="Required value missing.", **where))
                continue

            ok, message = validate_value(value, rule)
            if not ok:
                defects.append(Defect(kind=type_tag(rule.kind), value=value, message=message, **where))

    log.debug("rules: %d rule(s) over %d row(s), %d defect(s)", len(rules), len(data), len(defects))
    return defects
