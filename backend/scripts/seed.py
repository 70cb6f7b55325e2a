"""Seed the database with the capital anchor item and a demo catalog.

Usage:
    python -m backend.scripts.seed
"""

from __future__ import annotations

import sys
from decimal import Decimal

from backend.app.core.database import SessionLocal
from backend.app.models.stock import StockItem
from backend.app.services.stock import get_or_create_system_item

CATALOG: list[tuple[str, str, int]] = [
    ("Gantungan Kunci Akrilik", "15000", 24),
    ("Stiker Pack", "10000", 40),
    ("Kaos Sablon", "85000", 12),
    ("Tote Bag", "45000", 8),
    ("Pin Enamel", "20000", 3),
]


def seed() -> None:
    if SessionLocal is None:
        print("DATABASE_URL is not set; nothing to seed.")
        sys.exit(1)

    db = SessionLocal()
    try:
        # ── Capital anchor ─────────────────────────────────────────────
        anchor = get_or_create_system_item(db)
        print(f"Capital anchor item: #{anchor.id}")

        # ── Demo catalog ───────────────────────────────────────────────
        for name, price, stock in CATALOG:
            if db.query(StockItem).filter_by(name=name).first():
                continue
            db.add(StockItem(name=name, price=Decimal(price), stock=stock))
            print(f"Created item: {name}")

        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
