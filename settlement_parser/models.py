"""Domain models for parsed settlement reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .numeral import ZERO, format_amount, to_money
from .schema import GRAMMAR_VERSION

AMOUNT_FIELDS: Tuple[str, ...] = (
    "collected",
    "commission",
    "payouts",
    "net",
    "adjustments",
    "partial",
    "cards",
)


@dataclass(slots=True, frozen=True)
class Record:
    """Seller-level line item of a settlement report."""

    name: str
    bet_count: int = 0
    collected: Decimal = ZERO
    commission: Decimal = ZERO
    payouts: Decimal = ZERO
    net: Decimal = ZERO
    adjustments: Decimal = ZERO
    partial: Decimal = ZERO
    cards: Decimal = ZERO

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("record name is required")
        if self.bet_count < 0:
            raise ValueError("bet count must not be negative")
        # frozen dataclass: normalize amounts through object.__setattr__
        for name in AMOUNT_FIELDS:
            object.__setattr__(self, name, to_money(getattr(self, name)))

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name, "betCount": str(self.bet_count)}
        for name in AMOUNT_FIELDS:
            data[name] = format_amount(getattr(self, name))
        return data


@dataclass(slots=True, frozen=True)
class GroupTotals:
    collected: Decimal
    payouts: Decimal
    commission: Decimal
    adjustments: Decimal
    cards: Decimal
    partial: Decimal
    bet_count: int
    record_count: int

    @property
    def net(self) -> Decimal:
        return self.partial - self.cards


@dataclass(slots=True, frozen=True)
class Group:
    """Manager or area aggregate holding records in source order."""

    name: str
    area: Optional[str] = None
    commission: Decimal = ZERO
    period: str = ""
    records: Tuple[Record, ...] = ()

    def __post_init__(self) -> None:
        if not self.area:
            object.__setattr__(self, "area", self.name)
        object.__setattr__(self, "commission", to_money(self.commission))
        object.__setattr__(self, "records", tuple(self.records))

    def totals(self) -> GroupTotals:
        """Summed figures across the group's records."""
        def _sum(name: str) -> Decimal:
            return sum((getattr(record, name) for record in self.records), ZERO)

        return GroupTotals(
            collected=_sum("collected"),
            payouts=_sum("payouts"),
            commission=_sum("commission"),
            adjustments=_sum("adjustments"),
            cards=_sum("cards"),
            partial=_sum("partial"),
            bet_count=sum(record.bet_count for record in self.records),
            record_count=len(self.records),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "area": self.area,
            "commission": format_amount(self.commission),
            "period": self.period,
            "records": [record.to_dict() for record in self.records],
        }


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """Non-fatal finding raised while parsing; never alters the records."""

    kind: str
    subject: str
    period: str = ""
    detail: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "subject": self.subject,
            "period": self.period,
            "detail": dict(self.detail),
        }


@dataclass(slots=True)
class ParseResult:
    strategy: str
    groups: List[Group] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    grammar_version: str = GRAMMAR_VERSION

    @property
    def record_count(self) -> int:
        return sum(len(group.records) for group in self.groups)

    @property
    def recognized(self) -> bool:
        # spreadsheets always yield at least the placeholder group, so they
        # count as recognized even without records
        return bool(self.groups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "grammarVersion": self.grammar_version,
            "groups": [group.to_dict() for group in self.groups],
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
        }
