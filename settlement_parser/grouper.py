"""Assemble extracted records into groups in first-encounter order."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Hashable, List, Optional

from .models import Group, Record
from .numeral import ZERO

PLACEHOLDER_GROUP_NAME = "General Report"
PLACEHOLDER_AREA = "General"


class Grouper:
    """Insertion-ordered mapping of group key to its records.

    Groups are never reordered. Spreadsheet rows are keyed by area name, so
    rows of one area share a group; PDF sections are keyed by their position,
    so two sections carrying the same manager name stay separate groups.
    """

    def __init__(self) -> None:
        self._records: Dict[Hashable, List[Record]] = {}
        self._meta: Dict[Hashable, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._records)

    def open(
        self,
        key: Hashable,
        *,
        name: Optional[str] = None,
        commission: Decimal = ZERO,
        period: Optional[str] = None,
    ) -> None:
        """Register a group before any record, keeping its reported figures."""
        self._records.setdefault(key, [])
        meta = self._meta.setdefault(key, {})
        meta.setdefault("name", name if name is not None else str(key))
        meta.setdefault("commission", commission)
        if period is not None:
            meta.setdefault("period", period)

    def add(self, key: Hashable, record: Record) -> None:
        if key not in self._records:
            self.open(key)
        self._records[key].append(record)

    def groups(self, period: str = "") -> List[Group]:
        """Ordered groups; ``period`` applies where a group carries none of its own."""
        result: List[Group] = []
        for key, records in self._records.items():
            meta = self._meta[key]
            result.append(
                Group(
                    name=meta["name"],
                    area=meta["name"],
                    commission=meta["commission"],
                    period=meta.get("period") or period,
                    records=tuple(records),
                )
            )
        return result


def placeholder_group(period: str = "") -> Group:
    """Empty group keeping a spreadsheet report structurally non-empty."""
    return Group(name=PLACEHOLDER_GROUP_NAME, area=PLACEHOLDER_AREA, period=period)
