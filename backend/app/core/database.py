from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from backend.app.core.config import settings

engine = (
    create_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)
    if settings.DATABASE_URL
    else None
)

SessionLocal = (
    sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    if engine is not None
    else None
)


class Base(DeclarativeBase):
    pass
