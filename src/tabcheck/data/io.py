from __future__ import annotations
import json, pathlib
from typing import Any, Dict, Iterable, List

BOM = "\ufeff"


def read_text(path, encoding: str = "utf-8") -> str:
    """Decode a file for validation; a leading UTF-8 BOM is dropped."""
    p = pathlib.Path(path).expanduser()
    if not p.is_file():
        raise FileNotFoundError(path)
    # newline="" keeps \r so raw lines are reported as written
    with p.open("r", encoding=encoding, newline="") as f:
        text = f.read()
    if text.startswith(BOM):
        text = text[1:]
    return text


def jsonl_append(path, rec: Dict[str, Any]):
    p = pathlib.Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as f:
        f.write(json.dumps(rec, ensure_ascii=False) + "\n")


def jsonl_extend(path, recs: Iterable[Dict[str, Any]]) -> int:
    n = 0
    for rec in recs:
        jsonl_append(path, rec)
        n += 1
    return n


def read_jsonl(path) -> List[Dict[str, Any]]:
    p = pathlib.Path(path)
    if not p.exists():
        raise FileNotFoundError(path)
    rows = []
    with p.open("r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                rows.append(json.loads(line))
    return rows
