from __future__ import annotations

"""Concrete rate sources and factory.

'database' reads the upsell_offers table with a bounded retry policy; 'static'
serves a built-in tier table for offline kiosks and tests.
"""
import logging
import sqlite3
import time
from typing import Any, Callable, Dict, List, Mapping, Sequence

from tizo_kiosk.core.config import Settings
from tizo_kiosk.core.errors import SourceUnavailable
from tizo_kiosk.db.dal import Database
from .base import RateSource

logger = logging.getLogger("tizo_kiosk.rates")

_STATIC_TIERS: Sequence[Dict[str, int]] = (
    {"topup_rb": 40, "tizo_value": 40},
    {"topup_rb": 100, "tizo_value": 150},
    {"topup_rb": 200, "tizo_value": 330},
    {"topup_rb": 300, "tizo_value": 520},
    {"topup_rb": 400, "tizo_value": 720},
    {"topup_rb": 500, "tizo_value": 930},
    {"topup_rb": 550, "tizo_value": 1020},
    {"topup_rb": 600, "tizo_value": 1200},
)


class StaticRateSource(RateSource):
    name = "static"

    def __init__(self, rows: Sequence[Mapping[str, Any]] | None = None):
        self._rows = list(rows if rows is not None else _STATIC_TIERS)

    def fetch_rate_rows(self) -> List[Mapping[str, Any]]:  # type: ignore[override]
        return [dict(r) for r in self._rows]


class DatabaseRateSource(RateSource):
    """Read-all of upsell_offers with limited retries and exponential backoff."""

    name = "database"

    def __init__(
        self,
        db: Database,
        *,
        retries: int = 2,
        backoff: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._db = db
        self._retries = retries
        self._backoff = backoff
        self._sleep = sleep

    def fetch_rate_rows(self) -> List[Mapping[str, Any]]:  # type: ignore[override]
        last_err: Exception | None = None
        for attempt in range(self._retries + 1):
            try:
                return self._db.fetch_rate_rows()
            except sqlite3.Error as e:
                last_err = e
                logger.warning(
                    "rate table read failed (attempt %d/%d): %s",
                    attempt + 1,
                    self._retries + 1,
                    e,
                )
                if attempt == self._retries:
                    break
                self._sleep(self._backoff * (2**attempt))
        raise SourceUnavailable(f"Failed to read TIZO rate table: {last_err}")


_SOURCE_REGISTRY: Dict[str, Callable[[Settings], RateSource]] = {
    "database": lambda s: DatabaseRateSource(
        Database(s.db_path, timeout=s.db_timeout_seconds),  # type: ignore[arg-type]
        retries=s.source_retries,
        backoff=s.source_retry_backoff_seconds,
    ),
    "static": lambda s: StaticRateSource(),
}


def make_rate_source(settings: Settings) -> RateSource:
    factory = _SOURCE_REGISTRY.get(settings.rate_source)
    if not factory:
        raise ValueError(f"Unknown rate source kind '{settings.rate_source}'")
    return factory(settings)
