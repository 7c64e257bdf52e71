"""Domain constants and lookup tables for the kiosk.

MVP keeps these lightweight; could evolve to Enum classes if needed.
"""

from typing import Dict

# Base-unit tier of the custom top-up conversion: every 600 Rb earns a flat
# 1200 TIZO (100% bonus). Policy constants, not read from the rate table.
BASE_UNIT: int = 600
BASE_CREDIT: int = 1200

# Kiosk page card names -> offers.card_type values
CARD_TYPE_MAP: Dict[str, str] = {
    "red": "Red",
    "blue": "Blue",
    "gold": "Gold",
    "silver": "Platinum",
    "platinum": "Platinum",
    "new_user": "New User",
}

# Screensaver / scratch card category names -> offers.category values
CATEGORY_MAP: Dict[str, str] = {
    "ooh": "OOH",
    "ood": "OOD",
    "voucher": "Voucher",
    "scratch card": "Scratch Card",
}

SCRATCH_CARD_CATEGORY = "Scratch Card"
DEFAULT_SCRATCH_CARD_COST = 100000  # Rp (100 RIBU)
DEFAULT_SCRATCH_CARD_TIZO = 200

# Custom amounts outside every configured range get upsell boxes rounded up
# to the next multiple of this step.
FALLBACK_UPSELL_STEP = 50


def map_card_type(card_type: str) -> str:
    return CARD_TYPE_MAP.get(card_type.lower(), card_type)


def map_category(category: str) -> str:
    return CATEGORY_MAP.get(category.lower(), category)
