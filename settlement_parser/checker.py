"""Cross-check reported partial/net figures against recomputed ones.

The checker only reports; it never changes a record.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional

from .config import DEFAULT_TOLERANCE
from .logging import get_logger
from .models import Diagnostic, Group, Record
from .numeral import format_amount

logger = get_logger(__name__)


def recompute(record: Record) -> tuple[Decimal, Decimal]:
    """Return ``(partial, net)`` derived from the record's component amounts."""
    partial = record.collected - record.payouts - record.commission
    net = partial + record.adjustments - record.cards
    return partial, net


def check_record(
    record: Record,
    period: str = "",
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> Optional[Diagnostic]:
    partial, net = recompute(record)
    partial_gap = abs(partial - record.partial)
    net_gap = abs(net - record.net)
    if partial_gap <= tolerance and net_gap <= tolerance:
        return None

    logger.warning(
        "consistency_divergence",
        name=record.name,
        period=period,
        reported_partial=format_amount(record.partial),
        computed_partial=format_amount(partial),
        reported_net=format_amount(record.net),
        computed_net=format_amount(net),
    )
    return Diagnostic(
        kind="consistency",
        subject=record.name,
        period=period,
        detail={
            "reported_partial": format_amount(record.partial),
            "computed_partial": format_amount(partial),
            "reported_net": format_amount(record.net),
            "computed_net": format_amount(net),
        },
    )


def check_groups(groups: Iterable[Group], tolerance: Decimal = DEFAULT_TOLERANCE) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for group in groups:
        for record in group.records:
            diagnostic = check_record(record, group.period, tolerance)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
    return diagnostics
