"""PDF export functions for sales reports using fpdf2."""
from __future__ import annotations

import io

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from backend.app.core.config import settings
from backend.app.services.export_i18n import t
from backend.app.services.reports import LedgerSummary, SaleRow, format_rupiah


# ── Shared helpers ──────────────────────────────────────────────────────────

_COL_BG = (31, 78, 121)   # dark blue header
_ALT_BG = (245, 245, 245)  # zebra rows
_LINE_H = 7
_FONT = "Helvetica"

# Landscape A4 leaves 277mm between the default margins
_WIDTHS = [38, 70, 16, 38, 38, 45, 32]
_ALIGNS = ["L", "L", "C", "R", "R", "L", "L"]


def _safe_text(text: str) -> str:
    """Replace non-latin-1 characters for PDF built-in fonts."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _new_pdf() -> FPDF:
    pdf = FPDF(orientation="L", format="A4")
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()
    return pdf


def _title(pdf: FPDF, title: str, subtitle: str | None = None) -> None:
    pdf.set_font(_FONT, "B", 14)
    pdf.cell(0, 8, _safe_text(title), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    if subtitle:
        pdf.set_font(_FONT, "B", 12)
        pdf.cell(0, 7, _safe_text(subtitle), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)


def _header_row(pdf: FPDF, headers: list[str]) -> None:
    """Draw a colored header row."""
    pdf.set_fill_color(*_COL_BG)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(_FONT, "B", 9)
    for h, w, align in zip(headers, _WIDTHS, _ALIGNS):
        pdf.cell(w, _LINE_H, _safe_text(h), border=1, fill=True, align=align)
    pdf.ln()
    pdf.set_text_color(0, 0, 0)


def _data_row(pdf: FPDF, values: list[str], shaded: bool) -> None:
    """Draw a data row."""
    pdf.set_font(_FONT, "", 8)
    pdf.set_fill_color(*_ALT_BG)
    for v, w, align in zip(values, _WIDTHS, _ALIGNS):
        pdf.cell(w, _LINE_H, _safe_text(v), border="B", fill=shaded, align=align)
    pdf.ln()


def _sales_table(pdf: FPDF, rows: list[SaleRow], lang: str) -> None:
    """Sale table whose header row is repeated on every page."""
    headers = [
        t(lang, "date"),
        t(lang, "item_name"),
        t(lang, "qty"),
        t(lang, "price"),
        t(lang, "total"),
        t(lang, "buyer"),
        t(lang, "status"),
    ]
    _header_row(pdf, headers)
    for idx, sale in enumerate(rows):
        if pdf.will_page_break(_LINE_H):
            pdf.add_page()
            _header_row(pdf, headers)
        _data_row(
            pdf,
            [
                sale.date,
                sale.item_name,
                str(sale.qty),
                format_rupiah(sale.unit_price),
                format_rupiah(sale.total_price),
                sale.buyer,
                sale.status,
            ],
            shaded=idx % 2 == 1,
        )


def _info_line(pdf: FPDF, left: tuple[str, str] | None, right: tuple[str, str] | None = None) -> None:
    pdf.set_font(_FONT, "", 9)
    label_w, value_w = 35, 100
    if left:
        pdf.cell(label_w, 6, _safe_text(left[0]))
        pdf.cell(value_w, 6, _safe_text(f": {left[1]}"))
    else:
        pdf.cell(label_w + value_w, 6, "")
    if right:
        pdf.cell(label_w, 6, _safe_text(right[0]))
        pdf.cell(value_w, 6, _safe_text(f": {right[1]}"))
    pdf.ln()


def _to_bytes(pdf: FPDF) -> io.BytesIO:
    """Output PDF to BytesIO."""
    buf = io.BytesIO()
    pdf.output(buf)
    buf.seek(0)
    return buf


# ── 1. Income report ────────────────────────────────────────────────────────


def export_sales_pdf(
    rows: list[SaleRow], from_date: str, to_date: str, lang: str = "id"
) -> io.BytesIO:
    pdf = _new_pdf()
    _title(pdf, f"{t(lang, 'income_report')} {from_date} - {to_date}")
    _sales_table(pdf, rows, lang)
    return _to_bytes(pdf)


# ── 2. Full ledger ──────────────────────────────────────────────────────────


def export_ledger_pdf(
    summary: LedgerSummary, rows: list[SaleRow], lang: str = "id"
) -> io.BytesIO:
    pdf = _new_pdf()
    _title(pdf, settings.REPORT_TITLE, settings.REPORT_SUBTITLE)

    _info_line(
        pdf,
        (t(lang, "from_date"), summary.from_date.isoformat()),
        (t(lang, "printed_at"), summary.printed_at.strftime("%d/%m/%Y %H:%M")),
    )
    _info_line(pdf, (t(lang, "to_date"), summary.to_date.isoformat()))
    pdf.ln(3)
    _info_line(
        pdf,
        (t(lang, "transaction_count"), f"{summary.transaction_count} {t(lang, 'transactions')}"),
        (t(lang, "expenses"), format_rupiah(summary.total_expenses)),
    )
    _info_line(pdf, (t(lang, "revenue"), format_rupiah(summary.total_revenue)))
    _info_line(pdf, (t(lang, "capital"), format_rupiah(summary.total_capital)))
    _info_line(pdf, (t(lang, "net_income"), format_rupiah(summary.net_income)))
    pdf.ln(4)

    _sales_table(pdf, rows, lang)
    return _to_bytes(pdf)
