from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import ValidationError

from tizo_kiosk.core.errors import SourceUnavailable
from tizo_kiosk.models.rates import RateTableEntry
from .base import RateSource

"""In-memory TIZO rate cache.

Purpose:
    Hold the tier table (`upsell_offers`) used by the custom top-up converter so
    conversions never touch the database mid-request.

Design:
    - One RateCache per process, created by the application factory and passed
      to whoever needs it (routers read it from app.state).
    - load() reads every row from the configured RateSource, validates it into
      immutable RateTableEntry objects, sorts ascending by topup_unit, and
      publishes the result with a single reference assignment. Readers calling
      snapshot() or status() see the old state or the new one, never a mix.
    - A failed load() keeps the previous snapshot and raises SourceUnavailable.
      Base-unit and 1:1 tiers keep working with a stale or empty table.
    - Entries, load time and the last error live in one immutable CacheState.
      Writers publish under a lock so a failure is never recorded against a
      newer snapshot. Readers take no lock.
"""

logger = logging.getLogger("tizo_kiosk.rates")

Snapshot = Tuple[RateTableEntry, ...]


@dataclass(frozen=True)
class CacheState:
    entries: Snapshot
    loaded_at: Optional[datetime]
    last_error: Optional[str] = None


class RateCache:
    def __init__(self, source: RateSource):
        self._source = source
        self._state = CacheState(entries=(), loaded_at=None)
        self._write_lock = threading.Lock()

    # Internal --------------------------------------------------
    @staticmethod
    def _parse_rows(rows) -> Snapshot:  # type: ignore[no-untyped-def]
        try:
            entries = [RateTableEntry.from_row(r) for r in rows]
        except (ValidationError, KeyError, TypeError, IndexError) as e:
            raise SourceUnavailable(f"Malformed TIZO rate row: {e}") from e
        entries.sort(key=lambda e: e.topup_unit)
        units = [e.topup_unit for e in entries]
        if len(units) != len(set(units)):
            logger.warning(
                "duplicate topup_rb values in rate table; higher tizo_value wins"
            )
        return tuple(entries)

    # Public API -----------------------------------------------
    @property
    def source_name(self) -> str:
        return self._source.name

    @property
    def loaded_at(self) -> Optional[datetime]:
        return self._state.loaded_at

    @property
    def last_error(self) -> Optional[str]:
        return self._state.last_error

    @property
    def is_loaded(self) -> bool:
        return self._state.loaded_at is not None

    def load(self) -> None:
        with self._write_lock:
            try:
                rows = self._source.fetch_rate_rows()
                entries = self._parse_rows(rows)
            except SourceUnavailable as e:
                self._state = replace(self._state, last_error=str(e))
                logger.error(
                    "failed to load TIZO rates; keeping %d cached tiers: %s",
                    len(self._state.entries),
                    e,
                )
                raise
            self._state = CacheState(
                entries=entries, loaded_at=datetime.now(timezone.utc)
            )
        logger.info(
            "loaded TIZO rates",
            extra={"count": len(entries), "source": self._source.name},
        )

    def snapshot(self) -> Snapshot:
        return self._state.entries

    def status(self) -> CacheState:
        """Entries, load time and last error as one consistent value."""
        return self._state


class RateCacheRefresher:
    """Daemon thread reloading a RateCache every `interval_seconds`.

    Failed reloads are logged and the loop carries on with the stale snapshot.
    """

    def __init__(self, cache: RateCache, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("refresh interval must be positive seconds")
        self._cache = cache
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._cache.load()
            except SourceUnavailable:
                continue
            except Exception:
                logger.exception("unexpected error refreshing TIZO rates")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="tizo-rate-refresher", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
