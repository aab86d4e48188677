"""Parse settlement reports into ordered manager/area groups.

Two strategies share one schema:

* ``tabular``: spreadsheet rows; columns come from a detected header row or
  the schema's fixed positions, records are grouped by area.
* ``textual``: PDF text; sections open at ``<name> / Comissão R$ <amount>``
  markers and seller rows are matched by the row grammar.

Both are pure functions of their input and configuration.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from .checker import check_groups
from .config import ParserConfig
from .extractor import extract_section_rows, iter_positional_rows
from .grouper import Grouper, placeholder_group
from .locator import extract_period, iter_sections
from .logging import get_logger
from .models import Diagnostic, Group, ParseResult
from .resolver import detect_header
from .schema import DEFAULT_SCHEMA, FieldSchema
from .text import normalize_document_text

logger = get_logger(__name__)

TABULAR = "tabular"
TEXTUAL = "textual"
STRATEGIES = (TABULAR, TEXTUAL)

Rows = Sequence[Sequence[object]]


class ReportNotRecognizedError(LookupError):
    """Raised when a report yields no data the caller can use."""


def parse_tabular(
    rows: Rows,
    period: str = "",
    config: Optional[ParserConfig] = None,
    schema: FieldSchema = DEFAULT_SCHEMA,
) -> List[Group]:
    """Group spreadsheet rows by area.

    Always returns at least one group: without any data row a single empty
    ``"General Report"`` group is returned.
    """
    config = config or ParserConfig()
    header = detect_header(rows, schema)

    grouper = Grouper()
    for area, record in iter_positional_rows(rows, header, schema, config):
        grouper.add(area, record)

    groups = grouper.groups(period=period)
    if not groups:
        logger.info("no_rows_recognized", rows=len(rows))
        groups = [placeholder_group(period)]
    return groups


def parse_textual(
    text: str,
    config: Optional[ParserConfig] = None,
    schema: FieldSchema = DEFAULT_SCHEMA,
    diagnostics: Optional[List[Diagnostic]] = None,
    period: str = "",
) -> List[Group]:
    """Group PDF text by manager section; an empty list means nothing was recognized.

    Each section takes the period printed inside it, else the first period
    printed in the document, else ``period``.
    """
    config = config or ParserConfig()
    normalized = normalize_document_text(text)
    document_period = extract_period(normalized) or period

    grouper = Grouper()
    for index, section in enumerate(iter_sections(normalized)):
        grouper.open(
            index,
            name=section.name,
            commission=section.commission,
            period=section.period or document_period,
        )
        span = normalized[section.start:section.end]
        for record in extract_section_rows(span, section, schema, config, diagnostics):
            grouper.add(index, record)

    return grouper.groups(period=document_period)


def parse_report(
    source: Union[str, Rows],
    strategy: str,
    period: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    schema: FieldSchema = DEFAULT_SCHEMA,
    require_groups: bool = False,
) -> ParseResult:
    """Run one strategy and collect its diagnostics.

    The consistency check only applies to PDF text, whose rows report their
    own partial and net figures.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy '{strategy}', expected one of {', '.join(STRATEGIES)}")
    config = config or ParserConfig()
    result = ParseResult(strategy=strategy, grammar_version=schema.grammar_version)

    if strategy == TABULAR:
        if isinstance(source, str):
            raise TypeError("tabular strategy expects a sequence of rows")
        result.groups = parse_tabular(source, period or "", config, schema)
    else:
        if not isinstance(source, str):
            raise TypeError("textual strategy expects a text string")
        result.groups = parse_textual(source, config, schema, result.diagnostics, period or "")
        if config.check_consistency:
            result.diagnostics.extend(check_groups(result.groups, config.consistency_tolerance))

    logger.info(
        "report_parsed",
        strategy=strategy,
        grammar_version=result.grammar_version,
        groups=len(result.groups),
        records=result.record_count,
        diagnostics=len(result.diagnostics),
    )
    if require_groups and not result.recognized:
        raise ReportNotRecognizedError("no manager or seller data recognized in the report")
    return result
