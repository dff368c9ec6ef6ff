import csv
import io

from tabcheck.csvcheck.engine import validate_text
from tabcheck.csvcheck.export import (
    defects_frame,
    defects_to_csv,
    defects_to_jsonl,
    preview_frame,
    write_defects_csv,
)
from tabcheck.csvcheck.types import EXPORT_COLUMNS, Defect, Rule
from tabcheck.data.io import read_jsonl


def _defects():
    return [
        Defect(line=1, kind="unclosed_quote", message="A quoted field was not closed with a matching quote.",
               raw_line='say "hi",x'),
        Defect(line=3, row=3, column=2, header="email", kind="type_email", value="a,b",
               message="Expected email-like value.", raw_line='Bob,"a,b"'),
    ]


def test_csv_header_and_quoting():
    text = defects_to_csv(_defects())
    lines = text.split("\r\n")

    assert lines[0] == "row,line,column,header,rule,value,message,raw_line"
    assert lines[1] == ',1,,,unclosed_quote,,A quoted field was not closed with a matching quote.,"say ""hi"",x"'
    assert lines[2] == '3,3,2,email,type_email,"a,b",Expected email-like value.,"Bob,""a,b"""'
    assert lines[3] == ""


def test_csv_reads_back():
    text = defects_to_csv(_defects())
    rows = list(csv.reader(io.StringIO(text, newline="")))
    assert rows[0] == list(EXPORT_COLUMNS)
    assert rows[1][7] == 'say "hi",x'
    assert rows[2][5] == "a,b"


def test_embedded_newline_is_quoted():
    d = Defect(line=2, kind="type_integer", value="1\n2", message="Expected integer.")
    text = defects_to_csv([d])
    assert '"1\n2"' in text


def test_write_defects_csv(tmp_path):
    out = write_defects_csv(_defects(), tmp_path / "out" / "errors.csv")
    assert out.is_file()
    assert out.read_bytes().startswith(b"row,line,column")
    assert b"\r\n" in out.read_bytes()


def test_jsonl(tmp_path):
    path = tmp_path / "errors.jsonl"
    assert defects_to_jsonl(_defects(), path) == 2
    rows = read_jsonl(path)
    assert [r["rule"] for r in rows] == ["unclosed_quote", "type_email"]
    assert rows[0]["row"] == ""
    assert rows[1]["column"] == 2


def test_defects_frame_columns():
    df = defects_frame(_defects())
    assert list(df.columns) == list(EXPORT_COLUMNS)
    assert len(df) == 2

    empty = defects_frame([])
    assert list(empty.columns) == list(EXPORT_COLUMNS)
    assert empty.empty


def test_preview_frame_pads_and_trims():
    result = validate_text("a,b,c\n1,2\n3,4,5,6\n", delimiter=",", rules=[Rule(0, "integer")])
    df = preview_frame(result.document)

    assert list(df.columns) == ["a", "b", "c"]
    assert df.values.tolist() == [["1", "2", ""], ["3", "4", "5"]]


def test_preview_frame_without_header_and_limit():
    result = validate_text("1,2\n3,4\n5,6\n", delimiter=",", has_header=False)
    df = preview_frame(result.document, limit=2)

    assert list(df.columns) == ["col_1", "col_2"]
    assert len(df) == 2
