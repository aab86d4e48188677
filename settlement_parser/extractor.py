"""Row extraction for spreadsheet rows (positional) and PDF text (pattern)."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import ParserConfig
from .locator import (
    AMOUNT,
    CURRENCY_AMOUNT,
    NAME_START,
    NAME_WORD,
    Section,
    is_banner_text,
    is_header_row,
    strip_banner_words,
)
from .logging import get_logger
from .models import Diagnostic, Record
from .numeral import ZERO, to_money
from .resolver import HeaderDescriptor
from .schema import ADJUSTMENTS, AREA, COLLECTED, COMMISSION, DEFAULT_SCHEMA, NET, PAYOUTS, SELLER, FieldSchema
from .text import comparable, normalize_cell

logger = get_logger(__name__)

DEFAULT_AREA = "General"

# Seller row grammar: <name words> <bet count> R$ <amount> R$ <amount> ...
ROW_PATTERN = re.compile(
    rf"{NAME_START}(?P<name>{NAME_WORD}(?: {NAME_WORD}){{0,7}})"
    rf" (?P<bets>\d{{1,6}})"
    rf"(?P<amounts>(?: ?{CURRENCY_AMOUNT}){{1,12}})"
)
AMOUNT_TOKEN = re.compile(rf"(?P<sign>-)?\s?R\$\s?(?P<value>{AMOUNT})")

TOTAL_NAMES = frozenset({"total", "subtotal"})


class AmountArityError(ValueError):
    """Raised in strict mode when a row does not carry the expected amount count."""


# ---------------------------------------------------------------------------
# Positional strategy
# ---------------------------------------------------------------------------


def _cell(cells: Sequence[object], index: Optional[int]) -> object:
    if index is None or index < 0 or index >= len(cells):
        return None
    return cells[index]


def _amount(cells: Sequence[object], index: Optional[int]) -> Decimal:
    value = _cell(cells, index)
    if value is None or isinstance(value, str):
        return to_money(normalize_cell(value))
    if isinstance(value, float) and value != value:
        return ZERO
    return to_money(value)


def iter_positional_rows(
    rows: Sequence[Sequence[object]],
    header: HeaderDescriptor,
    schema: FieldSchema = DEFAULT_SCHEMA,
    config: Optional[ParserConfig] = None,
) -> Iterator[Tuple[str, Record]]:
    """Yield ``(area, record)`` for every data row after the header boundary."""
    config = config or ParserConfig()

    for index, row in enumerate(rows):
        cells = list(row) if isinstance(row, (list, tuple)) else [row]
        trimmed = [normalize_cell(cell) for cell in cells]
        if not any(trimmed):
            continue
        if header.found and index <= header.header_index:
            continue
        if is_header_row(trimmed, schema):
            continue

        name = normalize_cell(_cell(trimmed, header.column(SELLER)))
        if not name:
            continue

        area = normalize_cell(_cell(trimmed, header.column(AREA))) or DEFAULT_AREA
        net = _amount(cells, header.column(NET))
        adjustments = _amount(cells, header.column(ADJUSTMENTS))

        record = Record(
            name=name,
            collected=_amount(cells, header.column(COLLECTED)),
            commission=_amount(cells, header.column(COMMISSION)),
            payouts=_amount(cells, header.column(PAYOUTS)),
            net=net,
            adjustments=adjustments,
            partial=net + adjustments,
        )
        if config.debug:
            logger.debug("row_extracted", row=index, area=area, name=name)
        yield area, record


# ---------------------------------------------------------------------------
# Pattern strategy
# ---------------------------------------------------------------------------


def fit_arity(values: Sequence[str], arity: int) -> List[str]:
    """Pad with the last value or truncate so exactly ``arity`` values remain."""
    fitted = list(values[:arity])
    if not fitted:
        return ["0,00"] * arity
    while len(fitted) < arity:
        fitted.append(fitted[-1])
    return fitted


def _amount_values(block: str) -> List[str]:
    values = []
    for token in AMOUNT_TOKEN.finditer(block):
        value = token.group("value")
        if token.group("sign") and not value.startswith("-"):
            value = f"-{value}"
        values.append(value)
    return values


def extract_section_rows(
    span: str,
    section: Section,
    schema: FieldSchema = DEFAULT_SCHEMA,
    config: Optional[ParserConfig] = None,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> List[Record]:
    """Seller records found in one section's text span, in order."""
    config = config or ParserConfig()
    arity = schema.expected_arity
    records: List[Record] = []

    for match in ROW_PATTERN.finditer(span):
        name = strip_banner_words(match.group("name"))
        if not name or comparable(name) in TOTAL_NAMES or is_banner_text(name):
            continue

        captured = _amount_values(match.group("amounts"))
        if len(captured) != arity:
            if config.strict_amount_arity:
                raise AmountArityError(
                    f"row '{name}' in section '{section.name}' has {len(captured)} amounts, expected {arity}"
                )
            logger.debug(
                "amount_arity_recovered",
                section=section.name,
                name=name,
                captured=len(captured),
                expected=arity,
            )
            if diagnostics is not None:
                diagnostics.append(
                    Diagnostic(
                        kind="amount_arity",
                        subject=name,
                        period=section.period,
                        detail={"section": section.name, "captured": len(captured), "expected": arity},
                    )
                )

        amounts = dict(zip(schema.row_amounts, fit_arity(captured, arity)))
        record = Record(
            name=name,
            bet_count=int(match.group("bets")),
            **{key: to_money(value) for key, value in amounts.items()},
        )
        if config.debug:
            logger.debug("row_extracted", section=section.name, name=name, bets=record.bet_count)
        records.append(record)

    return records
