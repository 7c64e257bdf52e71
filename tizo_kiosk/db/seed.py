"""Seeding helpers for a fresh kiosk database.

`seed_defaults` fills each offer table with the kiosk's baseline data when
that table is empty. Tables that already hold rows are left untouched so this
can be safely re-run against an operator-maintained database.
"""

from __future__ import annotations
from pathlib import Path
import sqlite3
from typing import Dict, Optional, Sequence, Tuple

from .schema import init_db

# (topup_rb, tizo_value, label)
DEFAULT_UPSELL_OFFERS: Sequence[Tuple[int, int, Optional[str]]] = (
    (40, 40, "Mini"),
    (100, 150, "Starter"),
    (150, 240, None),
    (200, 330, None),
    (250, 420, None),
    (300, 520, "Popular"),
    (350, 620, None),
    (400, 720, None),
    (450, 830, None),
    (500, 930, None),
    (550, 1020, None),
    (600, 1200, "Best Value"),
    (800, 1650, None),
    (1000, 2100, "Family"),
)

# (range_min, range_max, upsell_box_1, upsell_box_2)
DEFAULT_CUSTOM_TOPUP_UPSELL: Sequence[Tuple[int, int, int, int]] = (
    (1, 149, 150, 200),
    (150, 299, 300, 400),
    (300, 449, 450, 600),
    (450, 599, 600, 800),
    (600, 999, 1000, 1200),
    (1000, 1799, 1800, 2400),
    (1800, 2999, 3000, 3600),
)

# (id, name, description, min_topup, bonus_percent)
DEFAULT_CARD_OFFERS: Sequence[Tuple[str, str, str, int, int]] = (
    ("red", "Red Card", "Entry card for new members", 0, 0),
    ("blue", "Blue Card", "Bonus TIZO on every top-up", 200, 10),
    ("gold", "Gold Card", "Priority lanes and monthly gifts", 1000, 20),
    ("platinum", "Platinum Card", "All Gold benefits plus birthday bonus", 3000, 30),
)

DEFAULT_OFFERS: Sequence[Dict[str, object]] = (
    {"card_type": "Red", "category": None, "cost": 100000, "tizo_credit": 150},
    {"card_type": "Red", "category": None, "cost": 300000, "tizo_credit": 520},
    {"card_type": "Red", "category": None, "cost": 600000, "tizo_credit": 1200},
    {"card_type": "Gold", "category": None, "cost": 1000000, "tizo_credit": 2100,
     "free_games": "5", "gift": "Plush", "gift_details": "Choose any small plush"},
    {"card_type": "Gold", "category": "OOH", "cost": 500000, "tizo_credit": 1000},
    {"card_type": "Blue", "category": "OOD", "cost": 250000, "tizo_credit": 450},
    {"card_type": "New User", "category": "Scratch Card", "cost": 100000, "tizo_credit": 200},
)


def _is_empty(cur: sqlite3.Cursor, table: str) -> bool:
    cur.execute(f"SELECT COUNT(*) FROM {table}")
    return int(cur.fetchone()[0]) == 0


def seed_defaults(db_path: Path) -> Dict[str, int]:
    """Insert baseline rows into empty tables; return inserted counts per table."""
    init_db(db_path)  # ensure tables exist
    inserted: Dict[str, int] = {}
    with sqlite3.connect(db_path) as conn:
        cur = conn.cursor()
        if _is_empty(cur, "upsell_offers"):
            cur.executemany(
                "INSERT INTO upsell_offers (topup_rb, tizo_value, label) VALUES (?, ?, ?)",
                DEFAULT_UPSELL_OFFERS,
            )
            inserted["upsell_offers"] = len(DEFAULT_UPSELL_OFFERS)
        if _is_empty(cur, "custom_topup_upsell"):
            cur.executemany(
                """
                INSERT INTO custom_topup_upsell (range_min, range_max, upsell_box_1, upsell_box_2)
                VALUES (?, ?, ?, ?)
                """,
                DEFAULT_CUSTOM_TOPUP_UPSELL,
            )
            inserted["custom_topup_upsell"] = len(DEFAULT_CUSTOM_TOPUP_UPSELL)
        if _is_empty(cur, "card_offers"):
            cur.executemany(
                """
                INSERT INTO card_offers (id, name, description, min_topup, bonus_percent)
                VALUES (?, ?, ?, ?, ?)
                """,
                DEFAULT_CARD_OFFERS,
            )
            inserted["card_offers"] = len(DEFAULT_CARD_OFFERS)
        if _is_empty(cur, "offers"):
            for offer in DEFAULT_OFFERS:
                cur.execute(
                    """
                    INSERT INTO offers (
                        card_type, category, cost, tizo_credit, free_games, gift, gift_details
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        offer["card_type"],
                        offer["category"],
                        offer["cost"],
                        offer["tizo_credit"],
                        offer.get("free_games"),
                        offer.get("gift"),
                        offer.get("gift_details"),
                    ),
                )
            inserted["offers"] = len(DEFAULT_OFFERS)
        conn.commit()
    return inserted
