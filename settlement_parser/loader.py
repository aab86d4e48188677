"""Read report files into the inputs the parser expects.

Spreadsheets become a list of rows (first sheet only, blank rows dropped);
PDFs become one text string assembled page by page.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
import pdfplumber

from .logging import get_logger
from .text import normalize_cell

logger = get_logger(__name__)

SPREADSHEET_SUFFIXES = {".xlsx", ".xls", ".xlsm"}
CSV_SUFFIXES = {".csv"}
TEXT_SUFFIXES = {".pdf", ".txt"}


def detect_strategy(path: Path) -> str:
    """``textual`` for PDF or plain text files, ``tabular`` for spreadsheets."""
    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return "textual"
    if suffix in SPREADSHEET_SUFFIXES or suffix in CSV_SUFFIXES:
        return "tabular"
    raise ValueError(f"Unsupported report file type '{suffix or path.name}'")


def _frame_to_rows(df: pd.DataFrame) -> List[List[object]]:
    df = df.astype(object).where(pd.notna(df), None)
    rows: List[List[object]] = []
    for row in df.values.tolist():
        if not any(normalize_cell(cell) for cell in row):
            continue
        rows.append(row)
    return rows


def read_rows(path: Path, delimiter: str = ";") -> List[List[object]]:
    """Cells of the first sheet; numeric cells keep their native type.

    CSV exports are read as text with ``delimiter`` between cells.
    """
    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        df = pd.read_csv(
            path,
            header=None,
            dtype=str,
            keep_default_na=False,
            sep=delimiter,
            encoding="utf-8-sig",
        )
    elif suffix in SPREADSHEET_SUFFIXES:
        df = pd.read_excel(path, sheet_name=0, header=None)
    else:
        raise ValueError(f"Unsupported spreadsheet type '{suffix}'")

    rows = _frame_to_rows(df)
    if not rows:
        raise ValueError(f"Spreadsheet '{path.name}' is empty")
    logger.info("rows_loaded", file=path.name, rows=len(rows))
    return rows


def read_pdf_text(path: Path) -> str:
    """Text of every page joined in page order."""
    pages: List[str] = []
    with pdfplumber.open(str(path)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
    logger.info("pdf_text_loaded", file=path.name, pages=len(pages))
    return "\n".join(pages)


def read_text(path: Path) -> str:
    if path.suffix.lower() == ".pdf":
        return read_pdf_text(path)
    return path.read_text(encoding="utf-8")
