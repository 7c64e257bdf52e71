from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from tizo_kiosk.core.deps import get_converter, get_db
from tizo_kiosk.db.dal import Database
from tizo_kiosk.models.offers import CustomTopupQuote, UpsellOffer, UpsellOffersOut
from tizo_kiosk.services.rates.conversion import TizoConverter, parse_amount
from tizo_kiosk.services.upsell import quote_custom_topup

"""Upsell router: fixed top-up tiers and custom amount quotes.

Every `rb` value is an amount in Rb (1 Rb = 1,000 Rp), e.g. rb=1790 for
1,790,000 Rp. Non-numeric, negative or out-of-range (above 2**63 - 1) values
are rejected with 400.
"""

router = APIRouter(prefix="/api", tags=["upsell"])


def require_rb(rb: Optional[str] = Query(None, description="Amount in Rb")) -> int:
    if rb is None or rb == "":
        raise HTTPException(status_code=400, detail="rb parameter is required")
    return parse_amount(rb)


@router.get(
    "/upsell-offers-all",
    response_model=UpsellOffersOut,
    summary="All fixed top-up tiers ordered by Rb",
)
async def list_upsell_offers(db: Database = Depends(get_db)):
    offers = [UpsellOffer(**r) for r in db.list_upsell_offers()]
    return UpsellOffersOut(offers=offers, count=len(offers))


@router.get("/upsell-offer", summary="Fixed top-up tier for an exact Rb value")
async def get_upsell_offer(
    rb: int = Depends(require_rb),
    db: Database = Depends(get_db),
):
    row = db.get_upsell_offer(rb)
    if not row:
        raise HTTPException(
            status_code=404, detail="No upsell offer found for this RB value"
        )
    return {"success": True, "offer": UpsellOffer(**row)}


@router.get("/next-upsell-offers", summary="Next two tiers above an Rb value")
async def next_upsell_offers(
    rb: int = Depends(require_rb),
    db: Database = Depends(get_db),
):
    offers = [UpsellOffer(**r) for r in db.next_upsell_offers(rb, limit=2)]
    return {"success": True, "offers": offers, "count": len(offers), "baseRb": rb}


@router.get(
    "/custom-topup-upsell",
    response_model=CustomTopupQuote,
    response_model_exclude_none=True,
    summary="TIZO for a custom amount plus two upsell suggestions",
)
async def custom_topup_upsell(
    rb: int = Depends(require_rb),
    db: Database = Depends(get_db),
    converter: TizoConverter = Depends(get_converter),
):
    return quote_custom_topup(rb, db, converter)
