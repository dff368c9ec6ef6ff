from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from tabcheck.data.io import jsonl_extend

from .types import EXPORT_COLUMNS, Defect, Document

PREVIEW_ROWS = 25


# ============================================================================
# Defects -> delimited text
# ============================================================================

def defects_to_csv(defects: Sequence[Defect]) -> str:
    """
    Serialize defects as comma-delimited text with a header row.

    Fields holding a comma, quote, CR or LF are quoted and inner quotes are
    doubled (RFC 4180). Records end with CRLF.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=",", quotechar='"', quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(EXPORT_COLUMNS)
    for d in defects:
        row = d.as_dict()
        writer.writerow([row[c] for c in EXPORT_COLUMNS])
    return buf.getvalue()


def write_defects_csv(defects: Sequence[Defect], path: Path) -> Path:
    path = Path(path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the CRLF terminators untouched
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(defects_to_csv(defects))
    return path


def defects_to_jsonl(defects: Sequence[Defect], path: Path) -> int:
    """Append one JSON object per defect; returns how many were written."""
    return jsonl_extend(path, (d.as_dict() for d in defects))


# ============================================================================
# Tabular views
# ============================================================================

def defects_frame(defects: Sequence[Defect]) -> pd.DataFrame:
    return pd.DataFrame([d.as_dict() for d in defects], columns=list(EXPORT_COLUMNS))


def preview_frame(document: Document, limit: Optional[int] = PREVIEW_ROWS) -> pd.DataFrame:
    """
    First ``limit`` data records, one column per expected field.

    Short records are padded with "" and extra fields are dropped.
    """
    width = document.expected_columns or 0
    header = document.header
    if header is not None:
        columns = list(header)
    else:
        columns = [document.label_for(i) for i in range(width)]

    data = document.data_records()
    if limit is not None:
        data = data[:limit]
    rows = [[record.field(c) for c in range(width)] for _, record in data]
    return pd.DataFrame(rows, columns=columns)
