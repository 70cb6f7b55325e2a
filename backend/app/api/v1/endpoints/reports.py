from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from backend.app.api.deps import get_language, get_snapshot, require_store, store_warning
from backend.app.core.i18n import translate
from backend.app.schemas.reports import (
    ExportJobOut,
    LedgerSummaryOut,
    MetricsOut,
    TransactionOut,
    TransactionReportOut,
)
from backend.app.services.metrics import compute_metrics
from backend.app.services.periods import local_now
from backend.app.services.record_store import RecordStore
from backend.app.services.report_export import MEDIA_TYPES, render_report
from backend.app.services.reports import INCOME, LEDGER, build_ledger_summary, export_filename
from backend.app.services.snapshot import Snapshot
from backend.app.services.transactions import (
    StatusFilter,
    filter_by_range,
    filter_transactions,
    merge_transactions,
)

router = APIRouter()


def _default_dates(
    from_date: date | None, to_date: date | None,
) -> tuple[date, date]:
    today = local_now().date()
    if from_date is None:
        from_date = today - timedelta(days=29)
    if to_date is None:
        to_date = today
    return from_date, to_date


def _check_format(fmt: str, variant: str) -> None:
    if fmt not in MEDIA_TYPES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown export format: {fmt}")
    if variant not in (INCOME, LEDGER):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown report variant: {variant}")


def _export_response(
    buf: object, media_type: str, filename: str,
) -> StreamingResponse:
    return StreamingResponse(
        buf,  # type: ignore[arg-type]
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── Transaction feed ────────────────────────────────────────────────────────


@router.get("/transactions", response_model=TransactionReportOut)
def transactions_report(
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    status_filter: str = Query("all", alias="status"),
    search: str | None = Query(None),
    snapshot: Snapshot = Depends(get_snapshot),
    lang: str = Depends(get_language),
) -> TransactionReportOut:
    fd, td = _default_dates(from_date, to_date)
    try:
        wanted = StatusFilter.parse(status_filter)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    sales = filter_by_range(snapshot.sales, fd, td)
    expenses = filter_by_range(snapshot.expenses, fd, td)
    feed = filter_transactions(merge_transactions(sales, expenses), wanted, search)

    return TransactionReportOut(
        configured=snapshot.configured,
        warning=store_warning(snapshot, lang),
        from_date=fd,
        to_date=td,
        status=wanted.value,
        search=search,
        metrics=MetricsOut.model_validate(compute_metrics(sales, expenses)),
        summary=LedgerSummaryOut.model_validate(build_ledger_summary(sales, expenses, fd, td)),
        transactions=[TransactionOut.model_validate(t) for t in feed],
    )


# ── Exports ─────────────────────────────────────────────────────────────────


@router.get("/export/{fmt}")
def export_report(
    fmt: str,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    variant: str = Query(LEDGER),
    snapshot: Snapshot = Depends(get_snapshot),
    lang: str = Depends(get_language),
) -> StreamingResponse:
    _check_format(fmt, variant)
    fd, td = _default_dates(from_date, to_date)
    if fd > td:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(lang, "invalid_date_range"),
        )
    buf, filename, media_type = render_report(snapshot, fmt, fd, td, variant=variant, lang=lang)
    return _export_response(buf, media_type, filename)


@router.post("/export/{fmt}/async", response_model=ExportJobOut, status_code=status.HTTP_202_ACCEPTED)
def export_report_async(
    fmt: str,
    from_date: date | None = Query(None),
    to_date: date | None = Query(None),
    variant: str = Query(LEDGER),
    store: RecordStore = Depends(require_store),
    lang: str = Depends(get_language),
) -> ExportJobOut:
    from backend.app.workers.tasks.exports import generate_sales_report

    _check_format(fmt, variant)
    fd, td = _default_dates(from_date, to_date)
    if fd > td:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(lang, "invalid_date_range"),
        )
    result = generate_sales_report.delay(fmt, fd.isoformat(), td.isoformat(), variant, lang)
    return ExportJobOut(task_id=result.id, filename=export_filename(variant, fmt, fd, td))
