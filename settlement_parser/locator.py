"""Locate header rows in spreadsheet rows and manager sections in PDF text.

Section grammar (PDF text, whitespace already collapsed)::

    <name> / Comissão R$ <amount>   opens a section
    Período: <date> a <date>        period of the enclosing section

A section spans from the end of its marker to the start of the next accepted
marker, or to the end of the document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence

from .logging import get_logger
from .numeral import to_money
from .schema import DEFAULT_SCHEMA, FieldSchema
from .text import comparable

logger = get_logger(__name__)

__all__ = [
    "AMOUNT",
    "CURRENCY_AMOUNT",
    "NAME_START",
    "NAME_WORD",
    "Section",
    "is_header_row",
    "find_header_row_index",
    "is_banner_text",
    "strip_index_token",
    "strip_banner_words",
    "find_section_markers",
    "iter_sections",
    "extract_period",
]

# 1.234,56 | 1234,56 | -12,00 | - 12,00; at most fifteen integer digits
AMOUNT = r"(?:- ?)?(?:\d{1,3}(?:\.\d{3}){1,4}|\d{1,12}),\d{2}"
CURRENCY_AMOUNT = rf"-?\s?R\$\s?(?:{AMOUNT})"

# Bounded name words keep the scan linear on long separator runs. A name is
# an optional numeric index followed by up to eight words starting with a letter.
NAME_WORD = r"[^\W\d_][\w.'&()-]{0,39}"
_INDEX = r"\d{1,4}[.)-]? "
# a name never starts inside a word or an amount
NAME_START = r"(?<![\w.,'&()-])"
SECTION_PATTERN = re.compile(
    rf"{NAME_START}(?P<name>(?:{_INDEX})?{NAME_WORD}(?: {NAME_WORD}){{0,7}})"
    rf" ?/ ?(?:commission|comiss[aã]o) ?:? ?R\$ ?(?P<amount>{AMOUNT})",
    re.IGNORECASE,
)

_DATE = r"\d{1,2}/\d{1,2}/\d{2,4}"
PERIOD_PATTERN = re.compile(
    rf"(?:period|per[ií]odo) ?: ?(?P<period>{_DATE}(?: ?(?:a|at[eé]|to|-) ?{_DATE})?)",
    re.IGNORECASE,
)

_INDEX_TOKEN = re.compile(r"^(?:\d+[.)-]?\s+)+")

# Column banner repeated at the top of every PDF page.
BANNER_BET_TOKENS = ("bets", "apostas", "qtd")
BANNER_COLLECTED_TOKENS = ("collected", "entradas", "apurado")

# Column titles that leak into a captured name when the banner precedes it.
BANNER_WORDS = frozenset(
    {
        "cambista", "vendedor", "seller",
        "apostas", "bets", "qtd",
        "entradas", "apurado", "collected",
        "saidas", "premios", "payouts",
        "lancamentos", "adjustments",
        "cartoes", "cards",
        "comissao", "commission",
        "parcial", "partial",
        "liquido", "net",
    }
)


def is_header_row(cells: Sequence[object], schema: FieldSchema = DEFAULT_SCHEMA) -> bool:
    """True when every required key has a cell starting with one of its aliases."""
    keys = [comparable(cell) for cell in cells]
    return all(any(entry.matches(key) for key in keys) for entry in schema.required)


def find_header_row_index(rows: Sequence[Sequence[object]], schema: FieldSchema = DEFAULT_SCHEMA) -> int:
    """Index of the first qualifying header row, ``-1`` when none qualifies."""
    for index, row in enumerate(rows):
        if is_header_row(_as_cells(row), schema):
            return index
    return -1


def _as_cells(row: object) -> Sequence[object]:
    if isinstance(row, (list, tuple)):
        return row
    return [row]


def strip_index_token(name: str) -> str:
    """Drop leading numeric index tokens such as ``'03 '`` or ``'1) '``."""
    return _INDEX_TOKEN.sub("", name.strip()).strip()


def strip_banner_words(raw: str) -> str:
    """Remove a leaked run of column titles in front of a name.

    A single leading title word is kept, since it can be part of a real name.
    """
    words = raw.split()
    leading = 0
    for word in words:
        if comparable(word) not in BANNER_WORDS:
            break
        leading += 1
    if leading >= 2:
        words = words[leading:]
    return " ".join(words)


def is_banner_text(name: str) -> bool:
    """True when ``name`` is the repeated column banner rather than a real name."""
    words = comparable(strip_index_token(name)).split()
    has_bets = any(word in BANNER_BET_TOKENS for word in words)
    has_collected = any(word in BANNER_COLLECTED_TOKENS for word in words)
    return has_bets and has_collected


@dataclass(slots=True, frozen=True)
class Section:
    """Manager section located in the flattened PDF text."""

    name: str
    commission: Decimal
    raw_commission: str
    start: int
    end: int
    period: str = ""


@dataclass(slots=True, frozen=True)
class _Marker:
    name: str
    amount: str
    start: int
    end: int


def find_section_markers(text: str) -> List[_Marker]:
    """Accepted section markers in document order."""
    markers: List[_Marker] = []
    for match in SECTION_PATTERN.finditer(text):
        raw_name = match.group("name")
        name = strip_banner_words(strip_index_token(raw_name))
        if not name or is_banner_text(name):
            logger.debug("banner_marker_skipped", name=raw_name, offset=match.start())
            continue
        markers.append(
            _Marker(name=name, amount=match.group("amount"), start=match.start(), end=match.end())
        )
    return markers


def extract_period(span: str) -> str:
    """First ``Período: <range>`` found in a section span, ``''`` otherwise."""
    match = PERIOD_PATTERN.search(span)
    if not match:
        return ""
    return match.group("period").strip()


def _close_section(marker: _Marker, text: str, end: int) -> Section:
    span = text[marker.end:end]
    section = Section(
        name=marker.name,
        commission=to_money(marker.amount),
        raw_commission=marker.amount,
        start=marker.end,
        end=end,
        period=extract_period(span),
    )
    logger.debug("section_opened", name=section.name, period=section.period, start=section.start, end=end)
    return section


def iter_sections(text: str) -> Iterator[Section]:
    """Yield each section in document order, confined to its own text span.

    Each accepted marker closes the section opened by the previous one; the
    last section runs to the end of the document.
    """
    previous: Optional[_Marker] = None
    for marker in find_section_markers(text):
        if previous is not None:
            yield _close_section(previous, text, marker.start)
        previous = marker

    if previous is not None:
        yield _close_section(previous, text, len(text))
