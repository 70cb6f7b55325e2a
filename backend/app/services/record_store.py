"""Record Store client.

One instance is built at application start and handed to every component
that reads or writes shop data. It owns the session factory, the change feed
and the asset store; nothing in the service layer reaches for a module-level
connection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import event, select
from sqlalchemy.orm import Session, sessionmaker

from backend.app.models.expense import Expense
from backend.app.models.sales import Sale
from backend.app.models.stock import StockItem
from backend.app.services.changes import ChangeFeed, LiveSnapshot
from backend.app.services.file_service import AssetStore

logger = logging.getLogger(__name__)

_TRACKED = {
    StockItem.__tablename__,
    Sale.__tablename__,
    Expense.__tablename__,
}


def _touched_tables(session: Session) -> set[str]:
    tables: set[str] = set()
    for obj in list(session.new) + list(session.dirty) + list(session.deleted):
        name = getattr(obj, "__tablename__", None)
        if name in _TRACKED:
            tables.add(name)
    return tables


class RecordStore:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        assets: AssetStore,
        feed: ChangeFeed | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.assets = assets
        self.feed = feed or ChangeFeed()
        self._live: LiveSnapshot | None = None

    @contextmanager
    def session(self, touches: tuple[str, ...] = ()) -> Iterator[Session]:
        """Unit of work: commit on success, roll back on error.

        After a successful commit one change event is published per touched
        collection. ORM changes are detected automatically; bulk statements
        must name their tables in *touches*.
        """
        db = self._session_factory()
        changed: set[str] = set(touches)

        @event.listens_for(db, "before_flush")
        def _collect(session: Session, _ctx: object, _instances: object) -> None:
            changed.update(_touched_tables(session))

        try:
            yield db
            changed.update(_touched_tables(db))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        for table in sorted(changed):
            self.feed.publish(table)

    def _fetch(self, stmt: Any) -> list[dict[str, Any]]:
        db = self._session_factory()
        try:
            return [dict(row) for row in db.execute(stmt).mappings().all()]
        finally:
            db.close()

    def fetch_stock_items(self) -> list[dict[str, Any]]:
        return self._fetch(
            select(
                StockItem.id,
                StockItem.name,
                StockItem.price,
                StockItem.stock,
                StockItem.image_url,
                StockItem.created_at,
            ).order_by(StockItem.created_at.desc(), StockItem.id.desc())
        )

    def fetch_sales(self) -> list[dict[str, Any]]:
        return self._fetch(
            select(
                Sale.id,
                Sale.sold_at,
                Sale.stock_item_id,
                Sale.item_name,
                Sale.unit_price,
                Sale.qty,
                Sale.total_price,
                Sale.buyer_name,
                Sale.status,
            ).order_by(Sale.sold_at.desc(), Sale.id.desc())
        )

    def fetch_expenses(self) -> list[dict[str, Any]]:
        return self._fetch(
            select(
                Expense.id,
                Expense.bought_at,
                Expense.description,
                Expense.total_cost,
            ).order_by(Expense.bought_at.desc(), Expense.id.desc())
        )

    @property
    def live(self) -> LiveSnapshot:
        """Snapshot cache that reloads on every change notification."""
        if self._live is None:
            self._live = LiveSnapshot(self)
        return self._live

    def close(self) -> None:
        if self._live is not None:
            self._live.close()
            self._live = None


def build_record_store(
    session_factory: sessionmaker[Session] | None,
    assets: AssetStore | None = None,
    feed: ChangeFeed | None = None,
) -> RecordStore | None:
    """Return a store client, or ``None`` when no database is configured."""
    if session_factory is None:
        logger.warning("DATABASE_URL is not set; running with an empty, read-only store")
        return None
    return RecordStore(session_factory, assets or AssetStore(), feed)
