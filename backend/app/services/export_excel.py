"""Excel export functions for sales reports using openpyxl."""
from __future__ import annotations

import io
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from backend.app.core.config import settings
from backend.app.services.export_i18n import t
from backend.app.services.reports import LedgerSummary, SaleRow, format_rupiah

# ── Shared styling constants ────────────────────────────────────────────────

_HEADER_FONT = Font(name="Calibri", bold=True, color="FFFFFF", size=11)
_HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
_LABEL_FONT = Font(name="Calibri", bold=True, size=10)
_CURRENCY_FMT = "#,##0"
_RIGHT = Alignment(horizontal="right")
_LEFT = Alignment(horizontal="left")
_CENTER = Alignment(horizontal="center")

_COLUMN_ALIGN = [_LEFT, _LEFT, _CENTER, _RIGHT, _RIGHT, _LEFT, _LEFT]
_LEDGER_WIDTHS = [20, 28, 6, 14, 14, 18, 18]


def _columns(lang: str) -> list[str]:
    return [
        t(lang, "date"),
        t(lang, "item_name"),
        t(lang, "qty"),
        t(lang, "price"),
        t(lang, "total"),
        t(lang, "buyer"),
        t(lang, "status"),
    ]


def _auto_width(ws: Any, first_row: int = 1) -> None:
    """Auto-fit column widths based on content."""
    for col_idx in range(1, ws.max_column + 1):
        max_len = 0
        col_letter = get_column_letter(col_idx)
        for row in ws.iter_rows(min_row=first_row, min_col=col_idx, max_col=col_idx):
            cell = row[0]
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max_len + 4, 40)


def _write_header_row(ws: Any, row: int, values: list[str]) -> None:
    """Write a styled header row."""
    for col, val in enumerate(values, 1):
        cell = ws.cell(row=row, column=col, value=val)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _COLUMN_ALIGN[col - 1]


def _write_sale_rows(ws: Any, start_row: int, rows: list[SaleRow]) -> int:
    """Write one line per sale, return next available row."""
    row = start_row
    for sale in rows:
        values: list[Any] = [
            sale.date,
            sale.item_name,
            sale.qty,
            float(sale.unit_price),
            float(sale.total_price),
            sale.buyer,
            sale.status,
        ]
        for col, val in enumerate(values, 1):
            cell = ws.cell(row=row, column=col, value=val)
            cell.alignment = _COLUMN_ALIGN[col - 1]
            if col in (4, 5):
                cell.number_format = _CURRENCY_FMT
        row += 1
    return row


def _write_title(ws: Any, title: str, subtitle: str, span: int) -> int:
    """Write merged report title and subtitle, return next available row."""
    ws.cell(row=1, column=1, value=title).font = Font(name="Calibri", bold=True, size=14)
    ws.cell(row=1, column=1).alignment = _CENTER
    ws.cell(row=2, column=1, value=subtitle).font = Font(name="Calibri", bold=True, size=12)
    ws.cell(row=2, column=1).alignment = _CENTER
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=span)
    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=span)
    return 4


def _label(ws: Any, row: int, column: int, label: str, value: str) -> None:
    ws.cell(row=row, column=column, value=label).font = _LABEL_FONT
    ws.cell(row=row, column=column + 1, value=f": {value}")


def _to_workbook(wb: Workbook) -> io.BytesIO:
    """Finalize workbook and return as BytesIO."""
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


# ── 1. Income report ────────────────────────────────────────────────────────


def export_sales_excel(rows: list[SaleRow], lang: str = "id") -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = t(lang, "income_sheet")

    _write_header_row(ws, 1, _columns(lang))
    _write_sale_rows(ws, 2, rows)
    _auto_width(ws)
    return _to_workbook(wb)


# ── 2. Full ledger ──────────────────────────────────────────────────────────


def export_ledger_excel(
    summary: LedgerSummary, rows: list[SaleRow], lang: str = "id"
) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = t(lang, "ledger_sheet")
    columns = _columns(lang)

    row = _write_title(ws, settings.REPORT_TITLE, settings.REPORT_SUBTITLE, len(columns))

    # Left block: range and sales figures; right block: print stamp and costs
    _label(ws, row, 1, t(lang, "from_date"), summary.from_date.isoformat())
    _label(ws, row, 6, t(lang, "printed_at"), summary.printed_at.strftime("%d/%m/%Y %H:%M"))
    _label(ws, row + 1, 1, t(lang, "to_date"), summary.to_date.isoformat())
    row += 3

    _label(
        ws, row, 1, t(lang, "transaction_count"),
        f"{summary.transaction_count} {t(lang, 'transactions')}",
    )
    _label(ws, row, 6, t(lang, "expenses"), format_rupiah(summary.total_expenses))
    _label(ws, row + 1, 1, t(lang, "revenue"), format_rupiah(summary.total_revenue))
    _label(ws, row + 2, 1, t(lang, "capital"), format_rupiah(summary.total_capital))
    _label(ws, row + 2, 6, t(lang, "net_income"), format_rupiah(summary.net_income))
    row += 4

    _write_header_row(ws, row, columns)
    _write_sale_rows(ws, row + 1, rows)

    for idx, width in enumerate(_LEDGER_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    return _to_workbook(wb)
