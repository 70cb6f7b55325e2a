"""Async export tasks: render sales reports in the background."""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from backend.app.services.record_store import RecordStore
from backend.app.workers.celery_app import celery

logger = logging.getLogger(__name__)


def _build_store() -> RecordStore | None:
    from backend.app.core.database import SessionLocal
    from backend.app.services.file_service import AssetStore
    from backend.app.services.record_store import build_record_store

    return build_record_store(SessionLocal, AssetStore())


@celery.task(name="backend.app.workers.tasks.exports.generate_sales_report")
def generate_sales_report(
    fmt: str, from_date: str, to_date: str, variant: str = "ledger", lang: str = "id"
) -> dict:
    """Render a report and store it in the ``reports`` bucket.

    Returns ``{"status": "done", "file_path": ..., "url": ...}``.
    """
    from backend.app.services.file_service import REPORTS_BUCKET
    from backend.app.services.report_export import render_report
    from backend.app.services.snapshot import load_snapshot

    store = _build_store()
    if store is None:
        return {"status": "error", "detail": "store not configured"}

    try:
        snapshot = asyncio.run(load_snapshot(store))
        buf, filename, _ = render_report(
            snapshot,
            fmt,
            date.fromisoformat(from_date),
            date.fromisoformat(to_date),
            variant=variant,
            lang=lang,
        )
    except ValueError as exc:
        return {"status": "error", "detail": str(exc)}

    path = store.assets.save(f"{REPORTS_BUCKET}/{filename}", buf.getvalue())
    logger.info("Report %s written to %s", filename, path)
    return {
        "status": "done",
        "file_path": path,
        "url": store.assets.public_url(REPORTS_BUCKET, filename),
    }
