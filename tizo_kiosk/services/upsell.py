"""Upsell helpers behind the kiosk's top-up screens.

Keeps the screen rules (layout by offer count, scratch card default, custom
amount upsell boxes) out of the routers so they can be tested without HTTP.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from tizo_kiosk.db.dal import Database
from tizo_kiosk.models.constants import (
    DEFAULT_SCRATCH_CARD_COST,
    DEFAULT_SCRATCH_CARD_TIZO,
    FALLBACK_UPSELL_STEP,
    SCRATCH_CARD_CATEGORY,
)
from tizo_kiosk.models.offers import CustomTopupQuote, TopupRange, UpsellBox
from tizo_kiosk.services.rates.conversion import TizoConverter


def layout_for_count(count: int) -> int:
    """Offer grid layout: 3 slots up to 3 offers, 4 for exactly 4, else 5."""
    if count <= 3:
        return 3
    if count == 4:
        return 4
    return 5


def default_scratch_card(card_type: Optional[str]) -> Dict[str, Any]:
    return {
        "id": None,
        "cost": DEFAULT_SCRATCH_CARD_COST,
        "tizo_credit": DEFAULT_SCRATCH_CARD_TIZO,
        "card_type": card_type or "default",
        "category": SCRATCH_CARD_CATEGORY,
        "free_games": None,
        "gift": None,
        "gift_details": None,
    }


def round_up_to_step(amount: int, step: int = FALLBACK_UPSELL_STEP) -> int:
    return -(-amount // step) * step


def quote_custom_topup(
    amount_rb: int, db: Database, converter: TizoConverter
) -> CustomTopupQuote:
    """Convert a custom amount and pick the two upsell amounts shown beside it.

    Upsell amounts come from the custom_topup_upsell range containing the
    amount; outside every range they are the amount rounded up to the next
    50 Rb and that plus 50.
    """
    row = db.find_custom_topup_range(amount_rb)
    if row:
        box1, box2 = int(row["upsell_box_1"]), int(row["upsell_box_2"])
    else:
        box1 = round_up_to_step(amount_rb)
        box2 = box1 + FALLBACK_UPSELL_STEP

    custom_tizo, tizo1, tizo2 = converter.convert_many(amount_rb, box1, box2)
    quote = CustomTopupQuote(
        customAmount=amount_rb,
        customTizo=custom_tizo,
        upsellBox1=UpsellBox(rb=box1, tizo=tizo1),
        upsellBox2=UpsellBox(rb=box2, tizo=tizo2),
    )
    if row:
        quote.range = TopupRange(min=row["range_min"], max=row["range_max"])
    else:
        quote.isFallback = True
        quote.message = "Using calculated fallback values"
    return quote
