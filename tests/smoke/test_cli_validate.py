from pathlib import Path
import json

import pytest
from typer.testing import CliRunner

from tabcheck.cli import app


runner = CliRunner()


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _normalized(result) -> str:
    combined = result.output or ""
    # Strip Typer / Rich box-drawing characters
    for ch in "│─╭╮╰╯":
        combined = combined.replace(ch, " ")
    return " ".join(combined.split())


RULES = '''
rules:
  - { column: email, kind: email, required: true }
'''


# ==========================================================
# HAPPY PATH
# ==========================================================


def test_validate_clean_file(tmp_path: Path):
    data = _write(tmp_path, "people.csv", "name,email\nAda,ada@x.com\n")

    result = runner.invoke(app, ["validate", str(data)])

    assert result.exit_code == 0
    assert "No issues found" in result.output
    assert "Delimiter: Comma" in result.output


def test_validate_reports_issues_and_exports(tmp_path: Path):
    data = _write(tmp_path, "people.csv", "name,email\nAda,ada@x.com\nBob,not-an-email\n")
    rules = _write(tmp_path, "rules.yaml", RULES)
    out_csv = tmp_path / "errors.csv"
    out_jsonl = tmp_path / "errors.jsonl"

    result = runner.invoke(
        app,
        [
            "validate", str(data),
            "--rules", str(rules),
            "--errors-csv", str(out_csv),
            "--errors-jsonl", str(out_jsonl),
        ],
    )

    assert result.exit_code == 1
    assert "type_email" in result.output
    assert out_csv.is_file()
    assert "Bob,not-an-email" in out_csv.read_text(encoding="utf-8")
    assert len(out_jsonl.read_text(encoding="utf-8").splitlines()) == 1


def test_validate_json_output(tmp_path: Path):
    data = _write(tmp_path, "semi.csv", "a;b\n1;2\n3")

    result = runner.invoke(app, ["validate", str(data), "--json"])

    assert result.exit_code == 1
    start = result.output.index("{")
    payload = json.loads(result.output[start:])
    assert payload["summary"]["delimiter"] == "Semicolon"
    assert [d["rule"] for d in payload["defects"]] == ["column_count_mismatch"]


def test_flags_override_rules_file(tmp_path: Path):
    data = _write(tmp_path, "nums.csv", "n\nx\ny\n")
    rules = _write(tmp_path, "rules.yaml", "row_budget: 10\nrules:\n  - { column: 0, kind: integer }\n")

    result = runner.invoke(app, ["validate", str(data), "--rules", str(rules), "--row-budget", "1", "--json"])

    payload = json.loads(result.output[result.output.index("{"):])
    assert payload["summary"]["validated_rows"] == 1
    assert len(payload["defects"]) == 1


def test_detect_and_preview(tmp_path: Path):
    data = _write(tmp_path, "pipes.csv", "id|name\n1|Ada\n2|Bob\n")

    result = runner.invoke(app, ["detect", str(data)])
    assert result.exit_code == 0
    assert result.output.strip() == "Pipe"

    result = runner.invoke(app, ["preview", str(data), "--limit", "1"])
    assert result.exit_code == 0
    assert "name" in result.output
    assert "Ada" in result.output
    assert "Bob" not in result.output


# ==========================================================
# CONFIGURATION ERRORS
# ==========================================================


@pytest.mark.parametrize(
    "rules_text, match",
    [
        ("rules:\n  - { column: 9, kind: integer }\n", "out of range"),
        ("rules: nope\n", "invalid rules file"),
        ("rules: [ {column: 1\n", "invalid rules file"),
    ],
)
def test_bad_rules_exit_2(tmp_path: Path, rules_text, match):
    data = _write(tmp_path, "people.csv", "name,email\nAda,ada@x.com\n")
    rules = _write(tmp_path, "rules.yaml", rules_text)

    result = runner.invoke(app, ["validate", str(data), "--rules", str(rules)])

    assert result.exit_code == 2
    assert match in _normalized(result)


def test_missing_input_exit_2(tmp_path: Path):
    result = runner.invoke(app, ["validate", str(tmp_path / "absent.csv")])
    assert result.exit_code == 2


def test_preview_rejects_negative_limit(tmp_path: Path):
    data = _write(tmp_path, "pipes.csv", "id|name\n1|Ada\n2|Bob\n")
    result = runner.invoke(app, ["preview", str(data), "--limit", "-1"])
    assert result.exit_code == 2
