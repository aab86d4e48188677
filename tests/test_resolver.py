from itertools import permutations

from settlement_parser.resolver import detect_header, resolve_columns
from settlement_parser.schema import DEFAULT_SCHEMA

REQUIRED = {
    "seller": "Vendedor",
    "collected": "Apurado",
    "commission": "Comissão",
    "payouts": "Prêmios",
}


def test_resolution_is_independent_of_column_order():
    for order in permutations(REQUIRED):
        header = [REQUIRED[key] for key in order]
        columns = resolve_columns(header)
        assert {key: columns[key] for key in REQUIRED} == {key: order.index(key) for key in REQUIRED}


def test_accented_and_plain_labels_resolve_identically():
    accented = resolve_columns(["Vendedor", "Apurado", "Comissão", "Prêmios"])
    plain = resolve_columns(["vendedor", "apurado", "comissao", "premios"])
    assert accented == plain
    assert accented["commission"] == 2


def test_english_aliases_resolve():
    columns = resolve_columns(["Region", "User", "Inflows", "Commission", "Prizes", "Final_Balance", "Corrections"])
    assert columns == {
        "area": 0,
        "seller": 1,
        "collected": 2,
        "commission": 3,
        "payouts": 4,
        "net": 5,
        "adjustments": 6,
    }


def test_detected_columns_override_defaults():
    rows = [
        ["Relatório semanal"],
        ["Área", "Vendedor", "Apurado", "Comissão", "Prêmios"],
        ["Centro", "Maria", "10,00", "1,00", "2,00"],
    ]
    header = detect_header(rows)

    assert header.found
    assert header.header_index == 1
    assert header.detected == {"area", "seller", "collected", "commission", "payouts"}
    assert header.column("seller") == 1
    assert header.column("payouts") == 4
    # optional keys missing from the header keep their fixed position
    assert header.column("net") == 7
    assert header.column("adjustments") == 10


def test_missing_header_falls_back_to_default_positions():
    header = detect_header([["", "Centro", "Maria", "10,00"]])

    assert not header.found
    assert header.header_index == -1
    assert header.columns == DEFAULT_SCHEMA.default_columns()
    assert header.column("seller") == 2
