"""Declarative field schema for settlement reports.

A :class:`FieldSchema` lists the canonical keys of a seller record, the
column labels accepted for each key in spreadsheet exports and the fixed
column used by legacy exports without a header row. It also carries the
amount layout of a seller row in PDF text, whose length is the expected
arity of the pattern strategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .text import comparable

__all__ = [
    "FieldSpec",
    "FieldSchema",
    "SELLER",
    "COLLECTED",
    "COMMISSION",
    "PAYOUTS",
    "NET",
    "ADJUSTMENTS",
    "AREA",
    "SELLER_ROW_AMOUNTS",
    "DEFAULT_SCHEMA",
    "GRAMMAR_VERSION",
]

SELLER = "seller"
COLLECTED = "collected"
COMMISSION = "commission"
PAYOUTS = "payouts"
NET = "net"
ADJUSTMENTS = "adjustments"
AREA = "area"

# Bump when the section or row grammar of the PDF layout changes.
GRAMMAR_VERSION = "1"

# Order of the currency tokens following the bet count on a seller row.
SELLER_ROW_AMOUNTS: Tuple[str, ...] = (
    "collected",
    "payouts",
    "adjustments",
    "cards",
    "commission",
    "partial",
    "net",
)


@dataclass(slots=True, frozen=True)
class FieldSpec:
    """One canonical key with its accepted labels and fallback column."""

    key: str
    aliases: Tuple[str, ...]
    default_column: int
    required: bool = True

    def matches(self, cell_key: str) -> bool:
        """True when an already comparable cell starts with one of the aliases."""
        return any(cell_key.startswith(alias) for alias in self.aliases)


def _spec(key: str, aliases: Tuple[str, ...], default_column: int, required: bool = True) -> FieldSpec:
    return FieldSpec(
        key=key,
        aliases=tuple(comparable(alias) for alias in aliases),
        default_column=default_column,
        required=required,
    )


@dataclass(slots=True, frozen=True)
class FieldSchema:
    fields: Tuple[FieldSpec, ...]
    row_amounts: Tuple[str, ...] = SELLER_ROW_AMOUNTS
    grammar_version: str = GRAMMAR_VERSION

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    @property
    def expected_arity(self) -> int:
        return len(self.row_amounts)

    @property
    def required(self) -> Tuple[FieldSpec, ...]:
        return tuple(entry for entry in self.fields if entry.required)

    def get(self, key: str) -> Optional[FieldSpec]:
        for entry in self.fields:
            if entry.key == key:
                return entry
        return None

    def default_columns(self) -> Dict[str, int]:
        return {entry.key: entry.default_column for entry in self.fields}


# The English labels come first; the Portuguese labels used by the betting
# platform exports follow them.
DEFAULT_SCHEMA = FieldSchema(
    fields=(
        _spec(SELLER, ("seller", "user", "collaborator", "vendedor", "usuario", "colaborador", "cambista"), 2),
        _spec(COLLECTED, ("collected", "inflows", "apurado", "entradas"), 3),
        _spec(COMMISSION, ("commission", "comissão"), 4),
        _spec(PAYOUTS, ("payouts", "prize", "prizes", "prêmios", "prêmio", "premios", "premio"), 6),
        _spec(NET, ("net", "balance", "final_balance", "total", "líquido", "saldo_final"), 7, required=False),
        _spec(
            ADJUSTMENTS,
            ("adjustments", "entries", "corrections", "lançamentos", "lançamento", "ajustes", "ajuste", "acertos"),
            10,
            required=False,
        ),
        _spec(AREA, ("area", "region", "sector", "área", "região", "setor"), 1, required=False),
    ),
)
