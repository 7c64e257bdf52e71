"""Data Access Layer for the kiosk offer tables.

Responsibilities
----------------
- Read-side queries behind the kiosk endpoints: currently valid offers per
  card type / category, scratch card offer, membership cards, upsell tiers and
  custom top-up ranges.
- Read-all of the TIZO tier table for the rate cache.
- Small write helpers used by seeding, operator scripts and tests.

"Currently valid" means active and inside the optional start/end date window,
evaluated against the kiosk's local date unless a date is passed explicitly.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
import sqlite3
from typing import Any, Dict, List, Optional

VALID_OFFER_SQL = """
is_active = 1
AND (start_date IS NULL OR start_date <= ?)
AND (end_date IS NULL OR end_date >= ?)
"""


class Database:
    def __init__(self, db_path: Path, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _today(today: Optional[date]) -> str:
        return (today or date.today()).isoformat()

    def ping(self) -> Dict[str, Any]:
        """Round-trip a trivial query; raises sqlite3.Error when unreachable."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT strftime('%Y-%m-%dT%H:%M:%fZ','now') AS time")
            row = cur.fetchone()
            return {"database": Path(self.db_path).name, "time": row["time"]}

    # ------------------------------------------------------------------
    # Offers
    def count_valid_offers(self, card_type: str, today: Optional[date] = None) -> int:
        day = self._today(today)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"SELECT COUNT(*) FROM offers WHERE card_type = ? AND {VALID_OFFER_SQL}",
                (card_type, day, day),
            )
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def list_valid_offers(
        self,
        category: Optional[str] = None,
        card_type: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        day = self._today(today)
        clauses = [VALID_OFFER_SQL]
        params: List[Any] = [day, day]
        if category:
            clauses.append("category = ?")
            params.append(category)
        if card_type:
            clauses.append("card_type = ?")
            params.append(card_type)
        where = " WHERE " + " AND ".join(clauses)
        sql = f"SELECT * FROM offers{where} ORDER BY cost DESC, id ASC"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [dict(r) for r in cur.fetchall()]

    def get_offer(self, offer_id: int) -> Optional[Dict[str, Any]]:
        """Fetch one offer by id regardless of its active flag or date window."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM offers WHERE id = ?", (offer_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def get_scratch_card_offer(
        self, card_type: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        query = "SELECT * FROM offers WHERE category = 'Scratch Card'"
        params: List[Any] = []
        if card_type:
            query += " AND card_type = ?"
            params.append(card_type)
        query += " ORDER BY cost DESC, id ASC LIMIT 1"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(query, params)
            row = cur.fetchone()
            return dict(row) if row else None

    def insert_offer(
        self,
        card_type: str,
        cost: float,
        tizo_credit: float,
        category: Optional[str] = None,
        free_games: Optional[str] = None,
        gift: Optional[str] = None,
        gift_details: Optional[str] = None,
        is_active: bool = True,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO offers (
                    card_type, category, cost, tizo_credit, free_games, gift,
                    gift_details, is_active, start_date, end_date
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    card_type,
                    category,
                    cost,
                    tizo_credit,
                    free_games,
                    gift,
                    gift_details,
                    1 if is_active else 0,
                    start_date.isoformat() if start_date else None,
                    end_date.isoformat() if end_date else None,
                ),
            )
            conn.commit()
            return int(cur.lastrowid)

    # ------------------------------------------------------------------
    # Membership cards
    def list_card_offers(self, card_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = "SELECT * FROM card_offers WHERE is_active = 1"
        params: List[Any] = []
        if card_id:
            query += " AND id = ?"
            params.append(card_id.lower())
        query += " ORDER BY id"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(query, params)
            return [dict(r) for r in cur.fetchall()]

    def upsert_card_offer(
        self,
        card_id: str,
        name: str,
        description: Optional[str] = None,
        min_topup: int = 0,
        bonus_percent: int = 0,
        is_active: bool = True,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO card_offers (id, name, description, min_topup, bonus_percent, is_active)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    description = excluded.description,
                    min_topup = excluded.min_topup,
                    bonus_percent = excluded.bonus_percent,
                    is_active = excluded.is_active
                """,
                (
                    card_id.lower(),
                    name,
                    description,
                    min_topup,
                    bonus_percent,
                    1 if is_active else 0,
                ),
            )
            conn.commit()

    # ------------------------------------------------------------------
    # Upsell tiers (TIZO rate table)
    def list_upsell_offers(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM upsell_offers ORDER BY topup_rb")
            return [dict(r) for r in cur.fetchall()]

    def fetch_rate_rows(self) -> List[Dict[str, Any]]:
        """Read-all of the tier table in the shape the rate cache consumes."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT topup_rb, tizo_value FROM upsell_offers ORDER BY topup_rb")
            return [dict(r) for r in cur.fetchall()]

    def get_upsell_offer(self, topup_rb: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM upsell_offers WHERE topup_rb = ?", (topup_rb,))
            row = cur.fetchone()
            return dict(row) if row else None

    def next_upsell_offers(self, topup_rb: int, limit: int = 2) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT * FROM upsell_offers
                WHERE topup_rb > ?
                ORDER BY topup_rb ASC
                LIMIT ?
                """,
                (topup_rb, limit),
            )
            return [dict(r) for r in cur.fetchall()]

    def upsert_upsell_offer(
        self, topup_rb: int, tizo_value: int, label: Optional[str] = None
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO upsell_offers (topup_rb, tizo_value, label)
                VALUES (?, ?, ?)
                ON CONFLICT(topup_rb) DO UPDATE SET
                    tizo_value = excluded.tizo_value,
                    label = excluded.label
                """,
                (topup_rb, tizo_value, label),
            )
            conn.commit()

    def delete_upsell_offer(self, topup_rb: int) -> bool:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM upsell_offers WHERE topup_rb = ?", (topup_rb,))
            conn.commit()
            return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Custom top-up upsell ranges
    def find_custom_topup_range(self, amount_rb: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT * FROM custom_topup_upsell
                WHERE ? BETWEEN range_min AND range_max
                ORDER BY range_min ASC, id ASC
                LIMIT 1
                """,
                (amount_rb,),
            )
            row = cur.fetchone()
            return dict(row) if row else None

    def insert_custom_topup_range(
        self, range_min: int, range_max: int, upsell_box_1: int, upsell_box_2: int
    ) -> int:
        if range_min > range_max:
            raise ValueError("range_min must be <= range_max")
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO custom_topup_upsell (range_min, range_max, upsell_box_1, upsell_box_2)
                VALUES (?, ?, ?, ?)
                """,
                (range_min, range_max, upsell_box_1, upsell_box_2),
            )
            conn.commit()
            return int(cur.lastrowid)
