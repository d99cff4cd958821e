"""
Excel workbooks for the register exports.

Every export has a detailed sheet (one row per record, French column
headers) and, for most registers, a "Résumé statistique" sheet with
totals.  Rows are built by the register services; this module only lays
them out with openpyxl and wraps the workbook in a download response.
"""
from __future__ import annotations

import datetime as dt
import io
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from records.services import localtime

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
SUMMARY_SHEET = 'Résumé statistique'
MIN_COLUMN_WIDTH = 10
EMPTY = localtime.EMPTY

# leading characters spreadsheet applications read as the start of a formula
FORMULA_PREFIXES = ('=', '+', '-', '@')

DATETIME_FMT = '%d/%m/%Y %H:%M'
AUDIT_FMT = '%d/%m/%Y %H:%M:%S'


def text(value: Any) -> Any:
    """Cell value with empty strings and ``None`` shown as a dash."""
    if value is None or value == '':
        return EMPTY
    return value


def yes_no(value: Optional[bool]) -> str:
    if value is None:
        return EMPTY
    return 'Oui' if value else 'Non'


def count(value: Optional[int]) -> int:
    return value or 0


def when(value, fmt: str = DATETIME_FMT) -> str:
    return localtime.format_local(value, fmt)


def audit_cells(obj) -> dict:
    return {
        'Date création': when(obj.created_at, AUDIT_FMT),
        'Dernière modification': when(obj.updated_at, AUDIT_FMT),
    }


def export_filename(base: str, start: Optional[dt.date] = None, end: Optional[dt.date] = None,
                    today: Optional[dt.date] = None) -> str:
    """``<base>_<dd-mm-YYYY>_au_<dd-mm-YYYY>.xlsx`` or ``<base>_<today>.xlsx``."""
    if start and end:
        return f"{base}_{start.strftime('%d-%m-%Y')}_au_{end.strftime('%d-%m-%Y')}.xlsx"
    today = today or localtime.local_today()
    return f"{base}_{today.strftime('%d-%m-%Y')}.xlsx"


def append_row(ws, values: Sequence[Any]) -> None:
    """Append ``values`` keeping every string a literal.

    openpyxl turns strings starting with ``=`` into formulas; recorded
    text is forced back to a string cell and quote-prefixed so that the
    spreadsheet never evaluates it.
    """
    values = list(values)
    ws.append(values)
    if not values:
        return
    for cell in ws[ws.max_row]:
        if isinstance(cell.value, str) and cell.value.startswith(FORMULA_PREFIXES):
            cell.data_type = 's'
            cell.quotePrefix = True


def fill_detail_sheet(ws, headers: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> None:
    """Write a header row then one row per mapping.

    All columns share one width: the longest value rendered, but never
    narrower than ten characters.
    """
    append_row(ws, headers)
    width = MIN_COLUMN_WIDTH
    for row in rows:
        values = [row.get(h, EMPTY) for h in headers]
        append_row(ws, values)
        width = max([width] + [len(str(v)) for v in values])
    for idx in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def fill_summary_sheet(ws, lines: List[list], widths: Sequence[int]) -> None:
    for line in lines:
        append_row(ws, line)
    for idx, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = w


def build_workbook(detail_title: str, headers: Sequence[str], rows: Iterable[Mapping[str, Any]],
                   summary: Optional[List[list]] = None, summary_widths: Sequence[int] = (30, 15)) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = detail_title
    fill_detail_sheet(ws, headers, rows)
    if summary is not None:
        fill_summary_sheet(wb.create_sheet(SUMMARY_SHEET), summary, summary_widths)
    return wb


def workbook_response(wb: Workbook, filename: str) -> HttpResponse:
    bio = io.BytesIO()
    wb.save(bio)
    resp = HttpResponse(bio.getvalue(), content_type=XLSX_CONTENT_TYPE)
    resp['Content-Disposition'] = f'attachment; filename="{filename}"'
    return resp
