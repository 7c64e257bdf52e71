from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field


class Offer(BaseModel):
    id: Optional[int] = None
    card_type: str
    category: Optional[str] = None
    cost: float
    tizo_credit: float
    free_games: Optional[str] = None
    gift: Optional[str] = None
    gift_details: Optional[str] = None
    is_active: bool = True
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CardOffer(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    min_topup: int = 0
    bonus_percent: int = 0
    is_active: bool = True


class UpsellOffer(BaseModel):
    id: Optional[int] = None
    topup_rb: int = Field(..., gt=0)
    tizo_value: int = Field(..., ge=0)
    label: Optional[str] = None


class UpsellBox(BaseModel):
    rb: int
    tizo: int


class TopupRange(BaseModel):
    min: int
    max: int


class CustomTopupQuote(BaseModel):
    """Custom amount conversion plus the two upsell suggestions shown next to it."""

    success: bool = True
    customAmount: int
    customTizo: int
    upsellBox1: UpsellBox
    upsellBox2: UpsellBox
    range: Optional[TopupRange] = None
    isFallback: bool = False
    message: Optional[str] = None


class OffersOut(BaseModel):
    success: bool = True
    offers: List[Offer]
    count: int


class UpsellOffersOut(BaseModel):
    success: bool = True
    offers: List[UpsellOffer]
    count: int
