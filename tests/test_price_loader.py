"""
Tests for the price workbook converter.

Workbooks are built in tmp_path with pandas so the real read path
(openpyxl engine, header rows, column positions) is exercised.
"""

import json
from datetime import datetime

import pandas as pd
import pytest

from price_loader import (
    HEADER_ROWS, PRICE_COLUMNS, TEXT_COLUMNS, clean_text, convert_rows, convert_workbook,
    find_price_date, main, safe_num,
)

WIDTH = 28


def header_rows(date_text):
    rows = [[None] * WIDTH for _ in range(HEADER_ROWS)]
    rows[0][0] = date_text
    rows[1][0] = "LG전자 구독 가격표"
    rows[2][0] = "단위: 원"
    for name, idx in {**TEXT_COLUMNS, **PRICE_COLUMNS}.items():
        rows[3][idx] = name
    return rows


def data_row(model, care_type, care_detail=None, visit_cycle=None, product="청소기", **prices):
    row = [None] * WIDTH
    row[TEXT_COLUMNS["product"]] = product
    row[TEXT_COLUMNS["modelFull"]] = model
    row[TEXT_COLUMNS["careType"]] = care_type
    row[TEXT_COLUMNS["careDetail"]] = care_detail
    row[TEXT_COLUMNS["visitCycle"]] = visit_cycle
    row[TEXT_COLUMNS["careCombined"]] = " ".join(p for p in (care_type, care_detail, visit_cycle) if p)
    for name, value in prices.items():
        row[PRICE_COLUMNS[name]] = value
    return row


@pytest.fixture
def workbook(tmp_path):
    path = tmp_path / "price.xlsx"
    sheets = {
        "전자랜드-업데이트": header_rows("2026.01.05 기준") + [
            data_row("A720WA.AKOR", "방문관리", "스탠다드", "6개월", price3y=42900, price6y=32900,
                     prepay30_lump=710000, prepay30_monthly=23000),
            data_row("A720WA.AKOR", "자가관리", price3y=35900),
            data_row(None, "자가관리", price3y=1),
        ],
        "이마트-업데이트": header_rows("이마트 가격표") + [
            data_row("A720WA.AKOR", "자가관리", price3y=99999),
            data_row("OLED55B4KW.AKRG", "자가관리", product="올레드 TV", price3y=69900),
        ],
        "메모": [["무시되는 시트"]],
    }
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return path


# === CELL HELPERS ===

class TestCellHelpers:

    def test_safe_num_rounds(self):
        assert safe_num(39900.4) == 39900

    def test_safe_num_numeric_text(self):
        assert safe_num("35900") == 35900

    @pytest.mark.parametrize("value", [None, "", 0, "없음"])
    def test_safe_num_blank(self, value):
        assert safe_num(value) is None

    def test_clean_text_whole_float(self):
        assert clean_text(6.0) == "6"

    def test_clean_text_strips(self):
        assert clean_text(" 자가관리 ") == "자가관리"

    def test_clean_text_none(self):
        assert clean_text(None) == ""


class TestFindPriceDate:

    def test_dotted_text(self):
        assert find_price_date([["2026.01.05 기준"]]) == "2026-01-05"

    def test_korean_text(self):
        assert find_price_date([[None, "2026년 1월 5일 기준"]]) == "2026-01-05"

    def test_date_cell(self):
        assert find_price_date([[datetime(2026, 1, 5)]]) == "2026-01-05"

    def test_no_date(self):
        assert find_price_date([["가격표"], [None]]) == ""


# === CONVERSION ===

class TestConvertRows:

    def test_row_fields(self):
        items = convert_rows([data_row("A720WA.AKOR", "자가관리", price3y=35900)], set())
        assert items == [{
            "product": "청소기",
            "modelFull": "A720WA.AKOR",
            "careType": "자가관리",
            "careDetail": "",
            "visitCycle": "",
            "careCombined": "자가관리",
            "price3y": 35900,
            "price4y": None,
            "price5y": None,
            "price6y": None,
            "prepay30_lump": None,
            "prepay30_monthly": None,
            "prepay50_lump": None,
            "prepay50_monthly": None,
            "activation": None,
        }]

    def test_seen_pairs_skipped(self):
        seen = {("A720WA.AKOR", "자가관리")}
        assert convert_rows([data_row("A720WA.AKOR", "자가관리")], seen) == []

    def test_activation_column(self):
        row = data_row("A720WA.AKOR", "자가관리")
        row[11] = 100000
        assert convert_rows([row], set(), activation_column=11)[0]["activation"] == 100000

    def test_short_row(self):
        items = convert_rows([[None, None, None, "청소기", "A720WA.AKOR"]], set())
        assert items[0]["careCombined"] == ""
        assert items[0]["price3y"] is None


class TestConvertWorkbook:
    """Whole-workbook conversion."""

    def test_price_date_from_header(self, workbook):
        assert convert_workbook(str(workbook))["priceDate"] == "2026-01-05"

    def test_price_date_override(self, workbook):
        assert convert_workbook(str(workbook), price_date="2026-02-01")["priceDate"] == "2026-02-01"

    def test_first_sheet_wins_duplicates(self, workbook):
        items = convert_workbook(str(workbook))["items"]
        assert [(i["modelFull"], i["careCombined"]) for i in items] == [
            ("A720WA.AKOR", "방문관리 스탠다드 6개월"),
            ("A720WA.AKOR", "자가관리"),
            ("OLED55B4KW.AKRG", "자가관리"),
        ]
        assert items[1]["price3y"] == 35900

    def test_prices_converted(self, workbook):
        first = convert_workbook(str(workbook))["items"][0]
        assert first["price6y"] == 32900
        assert first["prepay30_lump"] == 710000
        assert first["prepay50_lump"] is None

    def test_selected_sheets(self, workbook):
        items = convert_workbook(str(workbook), sheets=["이마트-업데이트"])["items"]
        assert [i["price3y"] for i in items] == [99999, 69900]


class TestMain:

    def test_writes_json(self, workbook, tmp_path, capsys):
        output = tmp_path / "out" / "price-data.json"
        assert main([str(workbook), str(output)]) == 0

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["priceDate"] == "2026-01-05"
        assert len(data["items"]) == 3
        assert "Saved to" in capsys.readouterr().out

    def test_missing_workbook(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.xlsx"), str(tmp_path / "out.json")]) == 1
        assert "Error" in capsys.readouterr().err
