"""Database schema DDL definitions and initialization utilities.

Tables:
  - offers: kiosk offers shown per card type / category (OOH, OOD, Scratch Card...)
  - card_offers: membership card descriptions for the card selection screen
  - upsell_offers: fixed top-up tiers (Rb -> TIZO), also the converter rate table
  - custom_topup_upsell: suggested upsell amounts per custom top-up range
  - metadata: key/value store (schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

OFFERS_DDL = """
CREATE TABLE IF NOT EXISTS offers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    card_type TEXT NOT NULL, -- 'Red' | 'Blue' | 'Gold' | 'Platinum' | 'New User'
    category TEXT, -- 'OOH' | 'OOD' | 'Voucher' | 'Scratch Card' | NULL
    cost REAL NOT NULL,
    tizo_credit REAL NOT NULL,
    free_games TEXT,
    gift TEXT,
    gift_details TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    start_date TEXT, -- ISO date (YYYY-MM-DD)
    end_date TEXT -- ISO date (YYYY-MM-DD)
);
"""

CARD_OFFERS_DDL = """
CREATE TABLE IF NOT EXISTS card_offers (
    id TEXT PRIMARY KEY, -- lower-case card id ('red', 'gold', ...)
    name TEXT NOT NULL,
    description TEXT,
    min_topup INTEGER NOT NULL DEFAULT 0,
    bonus_percent INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1
);
"""

UPSELL_OFFERS_DDL = """
CREATE TABLE IF NOT EXISTS upsell_offers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    topup_rb INTEGER NOT NULL UNIQUE CHECK (topup_rb > 0),
    tizo_value INTEGER NOT NULL CHECK (tizo_value >= 0),
    label TEXT
);
"""

CUSTOM_TOPUP_UPSELL_DDL = """
CREATE TABLE IF NOT EXISTS custom_topup_upsell (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    range_min INTEGER NOT NULL,
    range_max INTEGER NOT NULL,
    upsell_box_1 INTEGER NOT NULL,
    upsell_box_2 INTEGER NOT NULL,
    CHECK (range_min <= range_max)
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

OFFERS_CARD_TYPE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_offers_card_type ON offers(card_type, is_active);"
)
OFFERS_CATEGORY_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_offers_category ON offers(category);"
)
CUSTOM_TOPUP_RANGE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_custom_topup_range "
    "ON custom_topup_upsell(range_min, range_max);"
)

DDL_ORDER: Sequence[str] = (
    OFFERS_DDL,
    CARD_OFFERS_DDL,
    UPSELL_OFFERS_DDL,
    CUSTOM_TOPUP_UPSELL_DDL,
    METADATA_DDL,
    OFFERS_CARD_TYPE_INDEX_DDL,
    OFFERS_CATEGORY_INDEX_DDL,
    CUSTOM_TOPUP_RANGE_INDEX_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
