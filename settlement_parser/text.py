"""Text normalization for spreadsheet cells and PDF-extracted text."""

from __future__ import annotations

import unicodedata
from typing import Any

__all__ = ["normalize_cell", "comparable", "normalize_document_text"]

# Map a few visually-similar punctuation marks to ASCII for stability
PUNCT_MAP = {
    "\u2018": "'", "\u2019": "'", "\u201B": "'",
    "\u201C": '"', "\u201D": '"',
    "\u2013": "-", "\u2014": "-", "\u2212": "-",  # en/em/minus sign
}

SPACE_CHARS = {
    "\u00A0",  # NBSP
    "\u2007",  # Figure space
    "\u202F",  # Narrow NBSP
    "\u2009",  # Thin space
    "\u2008",  # Punctuation space
    "\u200A",  # Hair space
}

ZERO_WIDTH = {"\u200B", "\u200C", "\u200D", "\uFEFF"}  # ZWSP/ZWNJ/ZWJ/BOM


def normalize_cell(value: Any) -> str:
    """Return the trimmed string form of a cell, ``''`` for missing values."""
    if value is None:
        return ""
    if isinstance(value, float) and value != value:  # NaN from pandas
        return ""
    return str(value).strip()


def comparable(value: Any) -> str:
    """Accent and case-insensitive key used only for comparisons.

    ``"Comissão"`` and ``"comissao"`` map to the same key.
    """
    decomposed = unicodedata.normalize("NFD", normalize_cell(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


def normalize_document_text(text: str) -> str:
    """Canonicalize PDF-extracted text before any pattern matching.

    Applies NFKC, drops zero-width characters, maps odd spaces and dashes to
    ASCII and collapses every whitespace run to one space.
    """
    if not text:
        return ""
    t = unicodedata.normalize("NFKC", text)

    for z in ZERO_WIDTH:
        t = t.replace(z, "")

    for s in SPACE_CHARS:
        t = t.replace(s, " ")

    t = "".join(PUNCT_MAP.get(ch, ch) for ch in t)

    return " ".join(t.split())
