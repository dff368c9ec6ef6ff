from __future__ import annotations

import logging

from .lines import split_lines
from .tokenize import QUOTE

log = logging.getLogger(__name__)

# preference order; earlier candidates win ties
CANDIDATES = (",", ";", "\t", "|")

AUTO = "auto"

_NAMES = {
    ",": "Comma",
    ";": "Semicolon",
    "\t": "Tab",
    "|": "Pipe",
}


def first_nonblank_line(text: str) -> str:
    for line in split_lines(text):
        if line.strip():
            return line
    return ""


def count_outside_quotes(line: str, delimiter: str) -> int:
    in_quotes = False
    count = 0
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and line[i + 1:i + 2] == QUOTE:
                i += 2
                continue
            in_quotes = not in_quotes
        elif not in_quotes and ch == delimiter:
            count += 1
        i += 1
    return count


def detect_delimiter(text: str) -> str:
    """Candidate seen most often outside quotes on the first non-blank line."""
    line = first_nonblank_line(text)
    best = ","
    best_count = 0
    for delim in CANDIDATES:
        count = count_outside_quotes(line, delim)
        if count > best_count:
            best, best_count = delim, count
    log.debug("detected delimiter %r (%d occurrence(s))", best, best_count)
    return best


def parse_delimiter(s: str) -> str:
    """Accept the literal character, the ``\\t`` escape, ``tab`` or ``auto``."""
    if s == "\\t" or s.lower() == "tab":
        return "\t"
    if s.lower() == AUTO:
        return AUTO
    return s


def delimiter_name(d: str) -> str:
    return _NAMES.get(d, str(d))
