"""Render a ranged sales report to a downloadable file."""
from __future__ import annotations

import io
from datetime import date

from backend.app.services.export_excel import export_ledger_excel, export_sales_excel
from backend.app.services.export_pdf import export_ledger_pdf, export_sales_pdf
from backend.app.services.reports import (
    INCOME,
    LEDGER,
    build_ledger_summary,
    build_sale_rows,
    export_filename,
)
from backend.app.services.snapshot import Snapshot
from backend.app.services.transactions import filter_by_range

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIME = "application/pdf"

MEDIA_TYPES = {"excel": XLSX_MIME, "pdf": PDF_MIME}


def render_report(
    snapshot: Snapshot,
    fmt: str,
    from_date: date,
    to_date: date,
    variant: str = LEDGER,
    lang: str = "id",
) -> tuple[io.BytesIO, str, str]:
    """Return ``(buffer, filename, media_type)`` for the sales in range."""
    if fmt not in MEDIA_TYPES:
        raise ValueError(f"Unknown export format: {fmt}")
    if variant not in (INCOME, LEDGER):
        raise ValueError(f"Unknown report variant: {variant}")

    sales = filter_by_range(snapshot.sales, from_date, to_date)
    rows = build_sale_rows(sales, lang)

    if variant == LEDGER:
        expenses = filter_by_range(snapshot.expenses, from_date, to_date)
        summary = build_ledger_summary(sales, expenses, from_date, to_date)
        if fmt == "excel":
            buf = export_ledger_excel(summary, rows, lang)
        else:
            buf = export_ledger_pdf(summary, rows, lang)
    elif fmt == "excel":
        buf = export_sales_excel(rows, lang)
    else:
        buf = export_sales_pdf(rows, from_date.isoformat(), to_date.isoformat(), lang)

    return buf, export_filename(variant, fmt, from_date, to_date), MEDIA_TYPES[fmt]
