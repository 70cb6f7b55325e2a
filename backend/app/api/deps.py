from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from backend.app.core.errors import LoadError, NotFound, SaleRejected, ValidationFailed
from backend.app.core.i18n import translate
from backend.app.services.record_store import RecordStore
from backend.app.services.snapshot import Snapshot, empty_snapshot

logger = logging.getLogger(__name__)


def get_language(request: Request) -> str:
    return getattr(request.state, "language", "id")


def get_store(request: Request) -> RecordStore | None:
    """The store client built at startup; ``None`` when unconfigured."""
    return getattr(request.app.state, "store", None)


def require_store(
    store: RecordStore | None = Depends(get_store),
    lang: str = Depends(get_language),
) -> RecordStore:
    """Write paths refuse to run without a configured store."""
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=translate(lang, "store_not_configured"),
        )
    return store


async def get_snapshot(store: RecordStore | None = Depends(get_store)) -> Snapshot:
    """Current snapshot; the empty one when no store is configured."""
    if store is None:
        return empty_snapshot()
    try:
        return await store.live.current()
    except LoadError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


def store_warning(snapshot: Snapshot, lang: str) -> str | None:
    return None if snapshot.configured else translate(lang, "store_not_configured")


@contextmanager
def service_errors(lang: str) -> Iterator[None]:
    """Translate service exceptions into HTTP errors for the current request."""
    try:
        yield
    except NotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=translate(lang, e.key, **e.params),
        )
    except ValidationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(lang, e.key, **e.params),
        )
    except SaleRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("Record store operation failed: %s", e)
        message = str(getattr(e, "orig", None) or e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=message)
