"""Pydantic domain models for the TIZO kiosk API."""

from .constants import (
    BASE_UNIT,
    BASE_CREDIT,
    CARD_TYPE_MAP,
    CATEGORY_MAP,
)  # re-export
from .offers import (
    CardOffer,
    CustomTopupQuote,
    Offer,
    OffersOut,
    TopupRange,
    UpsellBox,
    UpsellOffer,
    UpsellOffersOut,
)
from .rates import RateTableEntry

__all__ = [
    "BASE_UNIT",
    "BASE_CREDIT",
    "CARD_TYPE_MAP",
    "CATEGORY_MAP",
    "CardOffer",
    "CustomTopupQuote",
    "Offer",
    "OffersOut",
    "TopupRange",
    "UpsellBox",
    "UpsellOffer",
    "UpsellOffersOut",
    "RateTableEntry",
]
