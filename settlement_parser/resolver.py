"""Resolve canonical field keys to spreadsheet column positions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from .locator import find_header_row_index
from .logging import get_logger
from .schema import DEFAULT_SCHEMA, FieldSchema
from .text import comparable

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class HeaderDescriptor:
    """Column index per canonical key plus where the header row was found.

    ``header_index`` is ``-1`` when no header row qualified; ``detected``
    lists the keys whose column came from the header rather than the
    schema's fixed default position.
    """

    columns: Dict[str, int]
    header_index: int = -1
    detected: frozenset = field(default_factory=frozenset)

    @property
    def found(self) -> bool:
        return self.header_index >= 0

    def column(self, key: str) -> Optional[int]:
        return self.columns.get(key)


def resolve_columns(cells: Sequence[object], schema: FieldSchema = DEFAULT_SCHEMA) -> Dict[str, int]:
    """Map each key to the first cell starting with one of its aliases.

    Keys without a matching cell are left out.
    """
    keys = [comparable(cell) for cell in cells]
    columns: Dict[str, int] = {}
    for entry in schema:
        for index, key in enumerate(keys):
            if entry.matches(key):
                columns[entry.key] = index
                break
    return columns


def detect_header(rows: Sequence[Sequence[object]], schema: FieldSchema = DEFAULT_SCHEMA) -> HeaderDescriptor:
    """Detected header columns layered over the schema's default positions."""
    columns = schema.default_columns()
    header_index = find_header_row_index(rows, schema)
    if header_index < 0:
        logger.info("header_not_found", rows=len(rows), fallback=columns)
        return HeaderDescriptor(columns=columns)

    row = rows[header_index]
    detected = resolve_columns(row if isinstance(row, (list, tuple)) else [row], schema)
    columns.update(detected)
    logger.info("header_detected", row=header_index, columns=columns)
    return HeaderDescriptor(columns=columns, header_index=header_index, detected=frozenset(detected))
