# storefront/core/spreadsheet.py
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet


def build_workbook(sheet_name: str, rows: list[dict[str, Any]]) -> bytes:
    """
    Render rows into a single-sheet .xlsx file and return its bytes.

    The header row is the union of all row keys in first-seen order, so a
    column that only some rows carry (e.g. "Special Data") still gets a
    header; rows without it leave the cell empty.
    """
    headers: list[str] = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name

    if headers:
        _append_text(sheet, headers)
    for row in rows:
        _append_text(sheet, [row.get(h) for h in headers])

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _append_text(sheet: Worksheet, values: list[Any]) -> None:
    """
    Append one row, keeping every str as a literal string cell.

    openpyxl would otherwise store text starting with "=" as a formula.
    """
    sheet.append(values)
    row = sheet.max_row
    for column, value in enumerate(values, start=1):
        if isinstance(value, str):
            sheet.cell(row=row, column=column).data_type = "s"
