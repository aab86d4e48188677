"""Command-line interface for the settlement report parser."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer

from .config import load_config
from .loader import detect_strategy, read_rows, read_text
from .locator import iter_sections
from .logging import configure_logging
from .numeral import format_amount
from .parser import STRATEGIES, TABULAR, ReportNotRecognizedError, parse_report
from .text import normalize_document_text

app = typer.Typer(add_completion=False, help="Weekly settlement report parser")


@app.command("parse")
def parse_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Spreadsheet, CSV or PDF report"),
    period: Optional[str] = typer.Option(
        None,
        "--period",
        help="Report period; required for spreadsheet reports",
    ),
    strategy: Optional[str] = typer.Option(
        None,
        "--strategy",
        help="tabular or textual; inferred from the file type when omitted",
    ),
    delimiter: str = typer.Option(";", "--delimiter", help="Cell delimiter for CSV files"),
    check: Optional[bool] = typer.Option(
        None,
        "--check/--no-check",
        help="Cross-check reported partial and net figures (PDF reports)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Log every extracted row"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
) -> None:
    config = load_config()
    if debug:
        config = replace(config, debug=True)
    if check is not None:
        config = replace(config, check_consistency=check)
    configure_logging(config.log_level, debug=config.debug)

    try:
        chosen = strategy or detect_strategy(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if chosen not in STRATEGIES:
        raise typer.BadParameter(f"--strategy must be one of {', '.join(STRATEGIES)}")

    if chosen == TABULAR:
        if not period or not period.strip():
            raise typer.BadParameter("--period is required for spreadsheet reports")
        try:
            source = read_rows(path, delimiter=delimiter)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    else:
        source = read_text(path)

    try:
        result = parse_report(
            source,
            chosen,
            period=period.strip() if period else None,
            config=config,
            require_groups=True,
        )
    except ReportNotRecognizedError as exc:
        typer.echo(f"No data recognized in {path.name}: {exc}", err=True)
        raise typer.Exit(code=1)

    payload = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if output:
        output.write_text(payload + "\n", encoding="utf-8")
        typer.echo(f"{len(result.groups)} group(s), {result.record_count} record(s) written to {output}")
    else:
        typer.echo(payload)


@app.command("sections")
def sections_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="PDF or text report"),
) -> None:
    """List the manager sections found in a PDF report."""
    config = load_config()
    configure_logging(config.log_level, debug=config.debug)

    text = normalize_document_text(read_text(path))
    found = 0
    for section in iter_sections(text):
        found += 1
        typer.echo(
            f"{section.name}\tR$ {format_amount(section.commission)}\t{section.period or '-'}"
        )
    if not found:
        typer.echo(f"No sections found in {path.name}", err=True)
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
