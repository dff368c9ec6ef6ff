from __future__ import annotations

import re
from typing import List

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> List[str]:
    """Physical lines of ``text``; a trailing newline yields a final ``""``."""
    return _LINE_BREAK.split(text)


class SourceLines:
    """1-based lookup of the raw text behind each reported line number."""

    def __init__(self, text: str):
        self._text = text
        self._lines = split_lines(text)

    def raw_line(self, line_number) -> str:
        try:
            idx = max(0, int(line_number or 1) - 1)
        except (TypeError, ValueError):
            idx = 0
        if idx < len(self._lines):
            return self._lines[idx]
        return ""

    def count(self) -> int:
        if not self._text:
            return 0
        return len(self._lines)

    def __len__(self) -> int:
        return self.count()
