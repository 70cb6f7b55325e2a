import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend.app.api.v1.api import api_router
from backend.app.core.config import settings
from backend.app.core.database import SessionLocal
from backend.app.middleware.language import LanguageMiddleware
from backend.app.services.file_service import AssetStore
from backend.app.services.record_store import build_record_store

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # One store client per process, handed to endpoints via ``get_store``
    assets = AssetStore()
    app.state.assets = assets
    app.state.store = build_record_store(SessionLocal, assets)
    logger.info("Kikstshop API started (store configured: %s)", app.state.store is not None)
    try:
        yield
    finally:
        if app.state.store is not None:
            app.state.store.close()


app = FastAPI(title="Kikstshop POS & Bookkeeping", lifespan=lifespan)

# ─── CORS: restrict to configured origins ───────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Accept", "Accept-Language"],
    expose_headers=["Content-Disposition"],
)
app.add_middleware(LanguageMiddleware)

app.include_router(api_router)

# Item pictures, promo banners and generated reports
app.mount(
    settings.ASSET_BASE_URL,
    StaticFiles(directory=settings.FILE_STORAGE_PATH, check_dir=False),
    name="files",
)
