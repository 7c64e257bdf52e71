from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from tizo_kiosk.core.errors import InvalidAmount
from tizo_kiosk.models.constants import BASE_CREDIT, BASE_UNIT
from tizo_kiosk.models.rates import RateTableEntry
from .base import SupportsSnapshot

"""Custom top-up TIZO calculator.

Amounts are in Rb (1 Rb = 1,000 Rp). Three tiers, applied in order:

    1. Every full 600 Rb earns 1200 TIZO (100% bonus).
    2. The remainder (< 600) is paid out greedily from the rate table, largest
       tier first, using only tiers below 600 Rb.
    3. Whatever is left after the greedy pass converts 1:1.

Example, 1790 Rb with tiers {550: 1020, 40: 40}:
    2 x 600 -> 2400, remainder 590 -> 550 (1020) + 40 (40) -> 3460 TIZO.

The greedy pass is deliberately not an optimal change-making search; kiosk
screens and receipts are built around these exact numbers.
"""

_AMOUNT_RE = re.compile(r"^\+?(\d+)$")
# Amounts are bound as SQLite INTEGER (signed 64-bit)
MAX_AMOUNT = 2**63 - 1


def parse_amount(raw: str) -> int:
    """Parse an Rb amount from request text; whole, non-negative numbers only."""
    text = (raw or "").strip()
    match = _AMOUNT_RE.match(text)
    if not match:
        raise InvalidAmount(f"amount must be a non-negative whole number of Rb, got {raw!r}")
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_AMOUNT)) or int(digits) > MAX_AMOUNT:
        raise InvalidAmount(f"amount must be at most {MAX_AMOUNT} Rb")
    return int(digits)


def _validate_amount(amount) -> int:  # type: ignore[no-untyped-def]
    if isinstance(amount, bool):
        raise InvalidAmount("amount must be a number, not a boolean")
    if isinstance(amount, float):
        if not amount.is_integer():
            raise InvalidAmount(f"amount must be a whole number of Rb, got {amount}")
        amount = int(amount)
    if not isinstance(amount, int):
        raise InvalidAmount(f"amount must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"amount must be >= 0, got {amount}")
    return amount


def sub_base_tiers(snapshot: Iterable[RateTableEntry]) -> List[RateTableEntry]:
    """Tiers eligible for the greedy pass, largest unit first.

    Equal units: higher credit first, then snapshot order (sort is stable).
    """
    eligible = [e for e in snapshot if e.topup_unit < BASE_UNIT]
    return sorted(eligible, key=lambda e: (-e.topup_unit, -e.credit_value))


def convert(amount: int, snapshot: Sequence[RateTableEntry] = ()) -> int:
    """Return the TIZO credit awarded for a custom top-up of `amount` Rb."""
    remaining = _validate_amount(amount)
    total = 0

    base_count, remaining = divmod(remaining, BASE_UNIT)
    total += base_count * BASE_CREDIT

    if remaining > 0 and snapshot:
        for entry in sub_base_tiers(snapshot):
            while remaining >= entry.topup_unit:
                total += entry.credit_value
                remaining -= entry.topup_unit

    # No tier fits what is left (e.g. under the smallest tier): 1 Rb -> 1 TIZO
    if remaining > 0:
        total += remaining

    return total


class TizoConverter:
    """Binds `convert` to a rate cache; one snapshot per call."""

    def __init__(self, cache: SupportsSnapshot):
        self._cache = cache

    def convert(self, amount: int) -> int:
        return convert(amount, self._cache.snapshot())

    def convert_many(self, *amounts: int) -> List[int]:
        snapshot = self._cache.snapshot()
        return [convert(a, snapshot) for a in amounts]
