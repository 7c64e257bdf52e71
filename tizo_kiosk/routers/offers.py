from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from tizo_kiosk.core.deps import get_db
from tizo_kiosk.db.dal import Database
from tizo_kiosk.models.constants import map_card_type, map_category
from tizo_kiosk.models.offers import CardOffer, Offer, OffersOut
from tizo_kiosk.services.upsell import default_scratch_card, layout_for_count

router = APIRouter(prefix="/api", tags=["offers"])


@router.get("/layout-config", summary="Offer grid layout for a card type")
async def layout_config(
    cardType: Optional[str] = Query(None, description="Card name (red, gold, new_user...)"),
    db: Database = Depends(get_db),
):
    if not cardType:
        raise HTTPException(status_code=400, detail="cardType parameter is required")
    db_card_type = map_card_type(cardType)
    count = db.count_valid_offers(db_card_type)
    layout = layout_for_count(count)
    return {
        "success": True,
        "layout": layout,
        "count": count,
        "cardType": db_card_type,
        "message": f"Found {count} {db_card_type} cards, using layout {layout}",
    }


@router.get("/scratch-card", summary="Scratch card offer for a card type")
async def scratch_card(
    cardType: Optional[str] = Query(None, description="Card name (defaults to any)"),
    db: Database = Depends(get_db),
):
    db_card_type = map_card_type(cardType) if cardType else None
    row = db.get_scratch_card_offer(db_card_type)
    if row:
        offer = Offer(**row)
        return {
            "success": True,
            "offer": offer.model_dump(
                include={
                    "id",
                    "cost",
                    "tizo_credit",
                    "card_type",
                    "category",
                    "free_games",
                    "gift",
                    "gift_details",
                }
            ),
            "message": f"Scratch card offer for {db_card_type or 'default'}",
        }
    return {
        "success": True,
        "offer": default_scratch_card(db_card_type),
        "isDefault": True,
        "message": "Using default scratch card values (100 RIBU -> 200 TIZO)",
    }


@router.get("/card-info", summary="Membership card descriptions")
async def card_info(
    cardId: Optional[str] = Query(None, description="Card id (red, blue, gold...)"),
    db: Database = Depends(get_db),
):
    rows = db.list_card_offers(cardId)
    cards = [CardOffer(**r) for r in rows]
    if cardId and cards:
        return {"success": True, "card": cards[0]}
    return {"success": True, "cards": cards, "count": len(cards)}


@router.get(
    "/offers",
    response_model=OffersOut,
    summary="Currently valid offers by card type and/or category, or one offer by id",
)
async def list_offers(
    cardType: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description="OOH, OOD, Voucher, Scratch Card"),
    offerId: Optional[int] = Query(None, description="Fetch a single offer by id"),
    db: Database = Depends(get_db),
):
    if offerId is not None:
        row = db.get_offer(offerId)
        rows = [row] if row else []
    else:
        rows = db.list_valid_offers(
            category=map_category(category) if category else None,
            card_type=map_card_type(cardType) if cardType else None,
        )
    offers = [Offer(**r) for r in rows]
    return OffersOut(offers=offers, count=len(offers))
