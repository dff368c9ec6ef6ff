from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from tabcheck.csvcheck.config import ValidationConfig
from tabcheck.csvcheck.detect import delimiter_name, detect_delimiter, parse_delimiter
from tabcheck.csvcheck.engine import validate_text
from tabcheck.csvcheck.export import (
    PREVIEW_ROWS,
    defects_to_jsonl,
    preview_frame,
    write_defects_csv,
)
from tabcheck.data.io import read_text

app = typer.Typer(help="tab-check CLI")

log = logging.getLogger("tabcheck")

MAX_LISTED_ISSUES = 1000


def _configure_logging(verbose: bool) -> None:
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[tabcheck] %(message)s"))
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if verbose else logging.INFO)


def _read_input(path: Path) -> str:
    try:
        return read_text(path)
    except FileNotFoundError:
        raise typer.BadParameter(f"{path} not found")
    except UnicodeDecodeError as e:
        raise typer.BadParameter(f"{path} is not valid UTF-8: {e}")


def _load_config(rules: Optional[Path]) -> ValidationConfig:
    if rules is None:
        return ValidationConfig()
    try:
        return ValidationConfig.from_yaml(rules)
    except FileNotFoundError:
        raise typer.BadParameter(f"rules file {rules} not found")
    except ValueError as e:
        raise typer.BadParameter(str(e))


# -----------------------------
# validate
# -----------------------------

@app.command()
def validate(
    path: Path = typer.Argument(..., help="Delimited text file to validate"),
    rules: Optional[Path] = typer.Option(None, "--rules", "-r", help="YAML rules file"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="auto | , | ; | \\t | tab | |"),
    header: Optional[bool] = typer.Option(None, "--header/--no-header", help="First row is a header"),
    row_budget: Optional[int] = typer.Option(None, "--row-budget", "-n", help="Max data rows the rules check"),
    errors_csv: Optional[Path] = typer.Option(None, "--errors-csv", help="Write defects as CSV here"),
    errors_jsonl: Optional[Path] = typer.Option(None, "--errors-jsonl", help="Append defects as JSONL here"),
    as_json: bool = typer.Option(False, "--json", help="Print summary and defects as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Validate structure and column rules; exit 1 when issues are found."""
    _configure_logging(verbose)
    text = _read_input(path)

    try:
        cfg = _load_config(rules).override(
            delimiter=parse_delimiter(delimiter) if delimiter is not None else None,
            has_header=header,
            row_budget=row_budget,
        )
        result = validate_text(
            text,
            delimiter=cfg.delimiter,
            has_header=cfg.has_header,
            rules=cfg.snapshot(),
            row_budget=cfg.row_budget,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    log.debug("%s: %s", path, result.count_by_kind())

    if errors_csv is not None:
        out = write_defects_csv(result.defects, errors_csv)
        log.info("wrote %d defect(s) to %s", len(result.defects), out)
    if errors_jsonl is not None:
        n = defects_to_jsonl(result.defects, errors_jsonl)
        log.info("appended %d defect(s) to %s", n, errors_jsonl)

    if as_json:
        payload = {
            "file": str(path),
            "summary": result.summary(),
            "defects": [d.as_dict() for d in result.defects],
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        typer.echo(f"File: {path.name}")
        for key, value in result.summary().items():
            label = key.replace("_", " ").capitalize()
            typer.echo(f"{label}: {value if value is not None else 'n/a'}")
        if result.ok:
            typer.secho("OK No issues found.", fg=typer.colors.GREEN)
        else:
            typer.secho(f"Issues found: {len(result.defects)} issue(s).", fg=typer.colors.RED)
            for d in result.defects[:MAX_LISTED_ISSUES]:
                typer.echo(f"  line {d.line}\t{d.kind}\t{d.message}")

    if not result.ok:
        raise typer.Exit(code=1)


# -----------------------------
# detect / preview
# -----------------------------

@app.command()
def detect(path: Path = typer.Argument(..., help="Delimited text file")):
    """Print the delimiter auto-detection would pick."""
    text = _read_input(path)
    typer.echo(delimiter_name(detect_delimiter(text)))


@app.command()
def preview(
    path: Path = typer.Argument(..., help="Delimited text file"),
    delimiter: str = typer.Option("auto", "--delimiter", "-d"),
    header: bool = typer.Option(True, "--header/--no-header"),
    limit: int = typer.Option(PREVIEW_ROWS, "--limit", min=0, help="Rows to show"),
):
    """Show the first data rows as parsed."""
    text = _read_input(path)
    try:
        result = validate_text(text, delimiter=delimiter, has_header=header)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    df = preview_frame(result.document, limit=limit)
    if df.empty:
        typer.echo("No data.")
    else:
        typer.echo(df.to_string(index=False))


if __name__ == "__main__":
    app()
