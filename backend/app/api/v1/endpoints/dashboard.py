from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.app.api.deps import get_language, get_snapshot, store_warning
from backend.app.core.config import settings
from backend.app.core.i18n import translate
from backend.app.schemas.reports import (
    DailyPointOut,
    DashboardOut,
    MetricsOut,
    SeriesOut,
    TransactionOut,
)
from backend.app.services.metrics import (
    DashboardWindow,
    MAX_SERIES_DAYS,
    build_daily_series,
    compute_metrics,
    low_stock_items,
    restrict_to_window,
)
from backend.app.services.snapshot import Snapshot
from backend.app.services.transactions import recent_transactions

router = APIRouter()


@router.get("/summary", response_model=DashboardOut)
def dashboard_summary(
    window: DashboardWindow = Query(DashboardWindow.ALL),
    snapshot: Snapshot = Depends(get_snapshot),
    lang: str = Depends(get_language),
) -> DashboardOut:
    sales, expenses = restrict_to_window(snapshot.sales, snapshot.expenses, window)
    return DashboardOut(
        configured=snapshot.configured,
        warning=store_warning(snapshot, lang),
        window=window.value,
        metrics=MetricsOut.model_validate(compute_metrics(sales, expenses)),
        series=[
            DailyPointOut.model_validate(p)
            for p in build_daily_series(snapshot.sales, settings.DAILY_SERIES_DAYS)
        ],
        low_stock=low_stock_items(snapshot.stock_items),
        recent_transactions=[
            TransactionOut.model_validate(t)
            for t in recent_transactions(snapshot.sales, snapshot.expenses)
        ],
    )


@router.get("/series", response_model=SeriesOut)
def dashboard_series(
    days: int = Query(settings.DAILY_SERIES_DAYS, le=MAX_SERIES_DAYS),
    snapshot: Snapshot = Depends(get_snapshot),
    lang: str = Depends(get_language),
) -> SeriesOut:
    try:
        series = build_daily_series(snapshot.sales, days)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(lang, "invalid_window_days"),
        )
    return SeriesOut(
        configured=snapshot.configured,
        days=days,
        series=[DailyPointOut.model_validate(p) for p in series],
    )
