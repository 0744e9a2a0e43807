"""
Price workbook loader for Care-Bot.

Converts the retailer price workbook (one sheet per retailer, four header
rows, one row per model and care plan) into data/price-data.json:

    {"priceDate": "2026-01-05", "items": [{"modelFull": ..., ...}, ...]}

Usage:
    python price_loader.py data/price.xlsx data/price-data.json
    python price_loader.py data/price.xlsx data/price-data.json --price-date 2026-01-05
"""

import argparse
import json
import re
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pandas as pd


# =============================================================================
# SHEET LAYOUT
# =============================================================================

PRICE_SHEETS = ['전자랜드-업데이트', '홈플러스-업데이트', '이마트-업데이트']

HEADER_ROWS = 4

# 0-based column positions in every retailer sheet
TEXT_COLUMNS = {
    'product': 3,
    'modelFull': 4,
    'careType': 7,
    'careDetail': 8,
    'visitCycle': 9,
    'careCombined': 10,
}

PRICE_COLUMNS = {
    'price3y': 12,
    'price4y': 13,
    'price5y': 16,
    'price6y': 19,
    'prepay30_lump': 22,
    'prepay30_monthly': 23,
    'prepay50_lump': 26,
    'prepay50_monthly': 27,
}

DATE_PATTERN = re.compile(r'(\d{4})\s*[.\-/년]\s*(\d{1,2})\s*[.\-/월]\s*(\d{1,2})')


# =============================================================================
# CELL HELPERS
# =============================================================================

def _cell(row: List[Any], idx: Optional[int]) -> Any:
    """Cell value at idx, or None for missing / NaN cells."""
    if idx is None or idx >= len(row):
        return None
    value = row[idx]
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


def clean_text(value: Any) -> str:
    """Text cell as a stripped string ('' when blank)."""
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def safe_num(value: Any) -> Optional[int]:
    """
    Price cell as a rounded int.

    Blank, zero and non-numeric cells become None.

    Examples:
        >>> safe_num(39900.4)
        39900
        >>> safe_num("없음")
        None
        >>> safe_num(0)
        None
    """
    if value is None or value == '':
        return None
    number = pd.to_numeric(value, errors='coerce')
    if pd.isna(number) or number == 0:
        return None
    return int(round(float(number)))


def find_price_date(rows: List[List[Any]]) -> str:
    """
    First date found in the header rows, as YYYY-MM-DD ('' when none).

    Accepts real date cells and text such as "2026.01.05 기준" or
    "2026년 1월 5일".
    """
    for row in rows:
        for value in row:
            if value is None:
                continue
            if isinstance(value, (datetime, date)):
                return value.strftime('%Y-%m-%d')
            if isinstance(value, str):
                match = DATE_PATTERN.search(value)
                if match:
                    year, month, day = (int(part) for part in match.groups())
                    return f"{year:04d}-{month:02d}-{day:02d}"
    return ''


# =============================================================================
# CONVERSION
# =============================================================================

def convert_rows(
    rows: List[List[Any]],
    seen: Set[Tuple[str, str]],
    activation_column: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Convert the data rows of one sheet.

    Rows without a model code are skipped. A (modelFull, careCombined) pair
    already in `seen` is skipped, so the first sheet listing a plan wins.

    Args:
        rows: Sheet rows below the header rows
        seen: Pairs already written (updated in place)
        activation_column: Column holding the activation fee, if the sheet has one
    """
    items = []
    for row in rows:
        model_full = clean_text(_cell(row, TEXT_COLUMNS['modelFull']))
        if not model_full:
            continue

        care_combined = clean_text(_cell(row, TEXT_COLUMNS['careCombined']))
        key = (model_full, care_combined)
        if key in seen:
            continue
        seen.add(key)

        item = {name: clean_text(_cell(row, idx)) for name, idx in TEXT_COLUMNS.items()}
        item.update({name: safe_num(_cell(row, idx)) for name, idx in PRICE_COLUMNS.items()})
        item['activation'] = safe_num(_cell(row, activation_column))
        items.append(item)
    return items


def convert_workbook(
    excel_path: str,
    sheets: Optional[List[str]] = None,
    price_date: Optional[str] = None,
    activation_column: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Convert a price workbook to the price-data.json structure.

    Args:
        excel_path: Path to the .xlsx workbook
        sheets: Sheet names to read, in priority order (missing ones are skipped)
        price_date: "As of" date; read from the header rows when omitted
        activation_column: 0-based column of the activation fee, if any

    Returns:
        {"priceDate": str, "items": [dict, ...]}
    """
    sheets = sheets or PRICE_SHEETS
    print(f"Loading price workbook: {excel_path}")

    workbook = pd.read_excel(excel_path, sheet_name=None, header=None, dtype=object, engine='openpyxl')

    items: List[Dict[str, Any]] = []
    seen: Set[Tuple[str, str]] = set()
    found_date = ''

    for sheet_name in sheets:
        df = workbook.get(sheet_name)
        if df is None:
            print(f"  - Sheet not found, skipping: {sheet_name}")
            continue

        rows = df.astype(object).where(pd.notna(df), None).values.tolist()
        if not found_date:
            found_date = find_price_date(rows[:HEADER_ROWS])

        sheet_items = convert_rows(rows[HEADER_ROWS:], seen, activation_column)
        print(f"  - {sheet_name}: {len(sheet_items)} rows")
        items.extend(sheet_items)

    print(f"Converted {len(items)} price rows")
    return {'priceDate': price_date or found_date, 'items': items}


def write_price_json(data: Dict[str, Any], output_path: str) -> None:
    """Write converted price data as UTF-8 JSON."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Convert the price workbook to price-data.json")
    parser.add_argument('workbook', help="Price workbook (.xlsx)")
    parser.add_argument('output', help="Output JSON path")
    parser.add_argument('--price-date', help="'As of' date shown with every price answer")
    parser.add_argument('--sheet', action='append', dest='sheets',
                        help="Sheet to read (repeatable, default: the three retailer sheets)")
    parser.add_argument('--activation-column', type=int,
                        help="0-based column holding the activation fee")
    args = parser.parse_args(argv)

    try:
        data = convert_workbook(
            args.workbook,
            sheets=args.sheets,
            price_date=args.price_date,
            activation_column=args.activation_column,
        )
    except (OSError, ValueError) as e:
        print(f"Error: could not read {args.workbook}: {e}", file=sys.stderr)
        return 1

    write_price_json(data, args.output)
    if data['priceDate']:
        print(f"Price date: {data['priceDate']}")
    print(f"Saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
