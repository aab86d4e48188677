import time
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest

from settlement_parser.config import ParserConfig
from settlement_parser.schema import DEFAULT_SCHEMA, GRAMMAR_VERSION
from settlement_parser.parser import (
    ReportNotRecognizedError,
    parse_report,
    parse_tabular,
    parse_textual,
)

FIXTURE = Path(__file__).parent / "fixtures" / "sample_report.txt"

HEADER = ["", "Área", "Vendedor", "Apurado", "Comissão", "Saldo Anterior", "Prêmios", "Total", "T. Prêmios", "F. Prêmio", "Lançamentos"]


def _row(area, name, collected, commission, payouts, net, adjustments=""):
    return ["", area, name, collected, commission, "", payouts, net, "", "", adjustments]


def test_parse_tabular_groups_by_area_in_source_order():
    rows = [
        ["Relatório semanal de acertos"],
        HEADER,
        _row("Norte", "Maria", "1.000,00", "100,00", "200,00", "700,00", "-50,00"),
        _row("Centro", "Bruno", "500,00", "50,00", "100,00", "350,00"),
        _row("", "", "", "", "", ""),
        _row("Norte", "Carla", "10,00", "1,00", "0,00", "9,00", "1,00"),
    ]
    groups = parse_tabular(rows, "01/09/2025 a 07/09/2025")

    assert [group.name for group in groups] == ["Norte", "Centro"]
    norte = groups[0]
    assert norte.area == "Norte"
    assert norte.period == "01/09/2025 a 07/09/2025"
    assert norte.commission == Decimal("0.00")
    assert [record.name for record in norte.records] == ["Maria", "Carla"]
    assert norte.records[0].partial == Decimal("650.00")
    assert norte.records[1].partial == Decimal("10.00")


def test_parse_tabular_without_header_uses_fixed_columns():
    rows = [_row("Centro", "Maria", "1.000,00", "100,00", "200,00", "700,00", "50,00")]
    (group,) = parse_tabular(rows, "P1")

    assert group.name == "Centro"
    (record,) = group.records
    assert record.collected == Decimal("1000.00")
    assert record.commission == Decimal("100.00")
    assert record.payouts == Decimal("200.00")
    assert record.net == Decimal("700.00")
    assert record.adjustments == Decimal("50.00")
    assert record.partial == Decimal("750.00")


def test_parse_tabular_without_data_returns_placeholder_group():
    for rows in ([], [["Relatório sem dados"], ["", ""]]):
        groups = parse_tabular(rows, "P1")
        assert len(groups) == 1
        assert groups[0].name == "General Report"
        assert groups[0].records == ()
        assert groups[0].period == "P1"


def test_parse_textual_reads_sections_and_rows():
    groups = parse_textual(FIXTURE.read_text(encoding="utf-8"))

    assert [group.name for group in groups] == ["João Silva", "Ana Costa"]
    joao, ana = groups
    assert joao.commission == Decimal("1234.56")
    assert joao.period == "01/09/2025 a 07/09/2025"
    assert ana.commission == Decimal("300.00")
    assert ana.period == "08/09/2025 a 14/09/2025"

    assert [record.name for record in joao.records] == ["Maria Souza", "Pedro Alves"]
    assert [record.name for record in ana.records] == ["Carlos Lima"]

    maria = joao.records[0]
    assert maria.bet_count == 12
    assert maria.collected == Decimal("1000.00")
    assert maria.partial == Decimal("700.00")

    totals = joao.totals()
    assert totals.collected == Decimal("1500.00")
    assert totals.adjustments == Decimal("-50.00")
    assert totals.cards == Decimal("20.00")
    assert totals.partial == Decimal("1050.00")
    assert totals.net == Decimal("1030.00")
    assert totals.bet_count == 17
    assert totals.record_count == 2


def test_parse_textual_without_markers_returns_empty_list():
    assert parse_textual("Relatório semanal Maria 3 R$ 10,00 R$ 1,00") == []
    assert parse_textual("") == []


def test_sections_with_the_same_name_are_not_merged():
    row = "R$ 1,00 R$ 0,00 R$ 0,00 R$ 0,00 R$ 0,00 R$ 1,00 R$ 1,00"
    text = f"João / Comissão R$ 1,00 Maria 1 {row} João / Comissão R$ 2,00 Pedro 1 {row}"
    groups = parse_textual(text)

    assert [(group.name, group.commission) for group in groups] == [
        ("João", Decimal("1.00")),
        ("João", Decimal("2.00")),
    ]
    assert [group.records[0].name for group in groups] == ["Maria", "Pedro"]


def test_parse_report_collects_consistency_diagnostics():
    result = parse_report(FIXTURE.read_text(encoding="utf-8"), "textual")

    assert result.recognized
    assert result.record_count == 3
    consistency = [d for d in result.diagnostics if d.kind == "consistency"]
    assert [d.subject for d in consistency] == ["Carlos Lima"]
    assert consistency[0].detail["reported_net"] == "145,00"
    assert consistency[0].detail["computed_net"] == "140,00"


def test_parse_report_can_skip_consistency_check():
    config = ParserConfig(check_consistency=False)
    result = parse_report(FIXTURE.read_text(encoding="utf-8"), "textual", config=config)
    assert result.diagnostics == []


def test_parse_report_empty_results_follow_strategy():
    with pytest.raises(ReportNotRecognizedError):
        parse_report("nothing to see", "textual", require_groups=True)

    result = parse_report([["nothing"]], "tabular", period="P1", require_groups=True)
    assert [group.name for group in result.groups] == ["General Report"]


def test_parse_report_rejects_unknown_strategy_and_mismatched_source():
    with pytest.raises(ValueError):
        parse_report("text", "ocr")
    with pytest.raises(TypeError):
        parse_report("text", "tabular")
    with pytest.raises(TypeError):
        parse_report([["a"]], "textual")


def test_output_contract_uses_formatted_strings():
    result = parse_report(FIXTURE.read_text(encoding="utf-8"), "textual", config=ParserConfig(check_consistency=False))
    payload = result.to_dict()

    joao = payload["groups"][0]
    assert joao["name"] == "João Silva"
    assert joao["area"] == "João Silva"
    assert joao["commission"] == "1.234,56"
    assert joao["period"] == "01/09/2025 a 07/09/2025"
    assert joao["records"][0] == {
        "name": "Maria Souza",
        "betCount": "12",
        "collected": "1.000,00",
        "commission": "100,00",
        "payouts": "200,00",
        "net": "700,00",
        "adjustments": "0,00",
        "partial": "700,00",
        "cards": "0,00",
    }


def test_tabular_result_counts_as_recognized_without_records():
    result = parse_report([["nada"]], "tabular", period="P1")

    assert result.recognized
    assert result.record_count == 0
    assert [group.name for group in result.groups] == ["General Report"]
    assert not parse_report("nada", "textual").recognized


def test_oversized_amounts_in_text_do_not_abort_parsing():
    huge = "1.000.000.000.000.000.000.000.000.000.000,00"
    text = f"João / Comissão R$ 1,00 Maria 1 R$ {huge} R$ 2,00 Pedro 2 R$ 3,00 R$ {huge}"
    (group,) = parse_textual(text)

    assert group.name == "João"
    assert [record.name for record in group.records] == ["Pedro"]
    assert group.records[0].collected == Decimal("3.00")


def test_long_name_like_runs_parse_quickly():
    started = time.perf_counter()
    (group,) = parse_textual(("a " * 20000) + "/ Comissão R$ 1,00")
    assert group.name.split() == ["a"] * 8
    assert group.records == ()

    (group,) = parse_textual("João / Comissão R$ 1,00 " + ("Maria " * 20000) + "1 R$ 1,00")
    assert [record.bet_count for record in group.records] == [1]

    assert parse_textual("- / " * 10000) == []
    assert time.perf_counter() - started < 5


def test_grammar_version_is_reported():
    result = parse_report(FIXTURE.read_text(encoding="utf-8"), "textual")
    assert result.to_dict()["grammarVersion"] == GRAMMAR_VERSION

    schema = replace(DEFAULT_SCHEMA, grammar_version="2")
    assert parse_report("nada", "textual", schema=schema).to_dict()["grammarVersion"] == "2"
