from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .lines import SourceLines
from .types import EMPTY_FILE, UNCLOSED_QUOTE, Defect, Record

log = logging.getLogger(__name__)

QUOTE = '"'


def _check_delimiter(delimiter: str) -> None:
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
    if delimiter in (QUOTE, "\n", "\r"):
        raise ValueError(f"delimiter cannot be {delimiter!r}")


def tokenize(
    text: str,
    delimiter: str = ",",
    source: Optional[SourceLines] = None,
) -> Tuple[List[Record], List[Defect]]:
    """
    Split raw text into records without ever aborting.

    Quote handling:
      - a quote outside quoting opens a quoted section
      - a doubled quote inside quoting is one literal quote
      - a lone quote inside quoting closes it
    Carriage returns are dropped everywhere. Every ``\\n`` advances the line
    counter, including ones embedded in quoted fields; a record is tagged with
    the line its terminating newline sits on.

    Returns (records, defects). Defects cover unclosed quoting and empty input.
    """
    _check_delimiter(delimiter)
    if source is None:
        source = SourceLines(text)

    records: List[Record] = []
    defects: List[Defect] = []

    row: List[str] = []
    buf: List[str] = []
    in_quotes = False
    line = 1
    field_start_line = 1

    def push_field():
        nonlocal field_start_line
        row.append("".join(buf))
        buf.clear()
        field_start_line = line

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch == "\r":
            i += 1
            continue

        if in_quotes:
            if ch == QUOTE:
                if i + 1 < n and text[i + 1] == QUOTE:
                    buf.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                buf.append(ch)
                if ch == "\n":
                    line += 1
            i += 1
            continue

        if ch == QUOTE:
            in_quotes = True
        elif ch == delimiter:
            push_field()
        elif ch == "\n":
            row.append("".join(buf))
            buf.clear()
            records.append(Record(row, line=line))
            row = []
            line += 1
            field_start_line = line
        else:
            buf.append(ch)
        i += 1

    # flush whatever is pending, trailing newline or not
    row.append("".join(buf))
    records.append(Record(row, line=line))

    if in_quotes:
        defects.append(Defect(
            line=field_start_line,
            kind=UNCLOSED_QUOTE,
            message="A quoted field was not closed with a matching quote.",
            raw_line=source.raw_line(field_start_line),
        ))

    # A final newline leaves a lone blank record behind. This misfires on
    # single-column files whose last row really is blank; kept as-is.
    if len(records) >= 2:
        last, prev = records[-1], records[-2]
        if len(last) == 1 and last[0] == "" and len(prev) > 1:
            records.pop()

    if len(records) == 1 and len(records[0]) == 1 and records[0][0].strip() == "":
        defects.append(Defect(
            line=1,
            row=1,
            kind=EMPTY_FILE,
            message="CSV appears empty.",
            raw_line=source.raw_line(1),
        ))

    log.debug("tokenized %d record(s) over %d line(s)", len(records), line)
    return records, defects
