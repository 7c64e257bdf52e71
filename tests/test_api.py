import sqlite3
from datetime import date, timedelta

from fastapi.testclient import TestClient

from tizo_kiosk.db.dal import Database
from tizo_kiosk.db.seed import DEFAULT_UPSELL_OFFERS
from tizo_kiosk.main import create_app


def test_root(client):
    body = client.get("/").json()
    assert body["message"] == "TIZO Kiosk API"


def test_health_reports_database_and_cache(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["status"] == "connected"
    assert body["database"] == "kiosk.sqlite3"
    assert body["ratesLoaded"] is True
    assert body["ratesLoadedAt"]


def test_api_responses_are_not_cached(client):
    resp = client.get("/api/upsell-offers-all")
    assert "no-store" in resp.headers["cache-control"]
    assert resp.headers["pragma"] == "no-cache"
    assert resp.headers["expires"] == "0"
    assert resp.headers["x-request-id"]


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_server_errors_are_not_cached(app):
    @app.get("/api/explode")
    async def explode():
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/api/explode")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "An unexpected error occurred."}
    assert "no-store" in resp.headers["cache-control"]
    assert resp.headers["pragma"] == "no-cache"
    assert resp.headers["expires"] == "0"


# ---------------------------------------------------------------- layout config
def test_layout_config_requires_card_type(client):
    resp = client.get("/api/layout-config")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "cardType parameter is required"}


def test_layout_config_counts_only_valid_offers(client, db):
    body = client.get("/api/layout-config", params={"cardType": "red"}).json()
    assert (body["count"], body["layout"], body["cardType"]) == (3, 3, "Red")

    db.insert_offer("Red", 700000, 1400)
    db.insert_offer("Red", 50000, 60, is_active=False)
    db.insert_offer("Red", 50000, 60, end_date=date.today() - timedelta(days=1))
    db.insert_offer("Red", 50000, 60, start_date=date.today() + timedelta(days=1))
    body = client.get("/api/layout-config", params={"cardType": "RED"}).json()
    assert (body["count"], body["layout"]) == (4, 4)

    db.insert_offer("Red", 800000, 1700, end_date=date.today())
    body = client.get("/api/layout-config", params={"cardType": "red"}).json()
    assert (body["count"], body["layout"]) == (5, 5)


def test_layout_config_maps_silver_to_platinum(client):
    body = client.get("/api/layout-config", params={"cardType": "silver"}).json()
    assert body["cardType"] == "Platinum"
    assert body["count"] == 0
    assert body["layout"] == 3


# ---------------------------------------------------------------- scratch card
def test_scratch_card_for_new_user(client):
    body = client.get("/api/scratch-card", params={"cardType": "new_user"}).json()
    assert body["success"] is True
    assert "isDefault" not in body
    assert body["offer"]["card_type"] == "New User"
    assert body["offer"]["cost"] == 100000
    assert body["offer"]["tizo_credit"] == 200


def test_scratch_card_picks_highest_cost(client, db):
    db.insert_offer("New User", 250000, 500, category="Scratch Card")
    body = client.get("/api/scratch-card", params={"cardType": "new_user"}).json()
    assert body["offer"]["cost"] == 250000


def test_scratch_card_default_when_missing(client):
    body = client.get("/api/scratch-card", params={"cardType": "gold"}).json()
    assert body["isDefault"] is True
    assert body["offer"]["id"] is None
    assert body["offer"]["card_type"] == "Gold"
    assert body["offer"]["cost"] == 100000
    assert body["offer"]["tizo_credit"] == 200


# ---------------------------------------------------------------- card info
def test_card_info_lists_active_cards(client, db):
    db.upsert_card_offer("retired", "Retired Card", is_active=False)
    body = client.get("/api/card-info").json()
    assert body["count"] == 4
    assert [c["id"] for c in body["cards"]] == ["blue", "gold", "platinum", "red"]


def test_card_info_single_card(client):
    body = client.get("/api/card-info", params={"cardId": "GOLD"}).json()
    assert body["card"]["id"] == "gold"
    assert body["card"]["bonus_percent"] == 20


def test_card_info_unknown_card_returns_empty_list(client):
    body = client.get("/api/card-info", params={"cardId": "diamond"}).json()
    assert body == {"success": True, "cards": [], "count": 0}


# ---------------------------------------------------------------- offers
def test_offers_by_card_type_ordered_by_cost(client):
    body = client.get("/api/offers", params={"cardType": "red"}).json()
    assert body["count"] == 3
    assert [o["cost"] for o in body["offers"]] == [600000, 300000, 100000]


def test_offers_by_category(client):
    body = client.get("/api/offers", params={"category": "ooh"}).json()
    assert body["count"] == 1
    assert body["offers"][0]["category"] == "OOH"
    assert body["offers"][0]["card_type"] == "Gold"


def test_offers_by_category_and_card_type(client):
    body = client.get("/api/offers", params={"category": "ood", "cardType": "gold"}).json()
    assert body["count"] == 0


def test_offer_by_id_ignores_validity_window(client, db):
    future = db.insert_offer(
        "Gold", 900000, 2000, category="OOD", start_date=date.today() + timedelta(days=7)
    )
    listed = client.get("/api/offers", params={"category": "ood"}).json()
    assert future not in [o["id"] for o in listed["offers"]]

    body = client.get("/api/offers", params={"offerId": future, "category": "ooh"}).json()
    assert body["count"] == 1
    assert body["offers"][0]["id"] == future


def test_offer_by_unknown_id(client):
    body = client.get("/api/offers", params={"offerId": 9999}).json()
    assert body == {"success": True, "offers": [], "count": 0}


# ---------------------------------------------------------------- upsell tiers
def test_upsell_offers_all(client):
    body = client.get("/api/upsell-offers-all").json()
    assert body["count"] == len(DEFAULT_UPSELL_OFFERS)
    rbs = [o["topup_rb"] for o in body["offers"]]
    assert rbs == sorted(rbs)


def test_upsell_offer_exact_lookup(client):
    body = client.get("/api/upsell-offer", params={"rb": "550"}).json()
    assert body["offer"]["tizo_value"] == 1020


def test_upsell_offer_not_found(client):
    resp = client.get("/api/upsell-offer", params={"rb": "123"})
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "No upsell offer found for this RB value",
    }


def test_rb_is_required(client):
    for path in ("/api/upsell-offer", "/api/next-upsell-offers", "/api/custom-topup-upsell"):
        resp = client.get(path)
        assert resp.status_code == 400
        assert resp.json()["error"] == "rb parameter is required"


def test_rb_must_be_a_whole_non_negative_number(client):
    for raw in ("abc", "-5", "12.5"):
        resp = client.get("/api/custom-topup-upsell", params={"rb": raw})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_amount"


def test_rb_too_large_for_the_database_is_rejected(client):
    for raw in ("99999999999999999999", "9" * 5000):
        for path in (
            "/api/upsell-offer",
            "/api/next-upsell-offers",
            "/api/custom-topup-upsell",
        ):
            resp = client.get(path, params={"rb": raw})
            assert resp.status_code == 400, (path, len(raw))
            assert resp.json()["error"] == "invalid_amount"


def test_rb_at_the_integer_limit_is_served(client):
    rb = str(2**63 - 1)
    assert client.get("/api/upsell-offer", params={"rb": rb}).status_code == 404
    body = client.get("/api/next-upsell-offers", params={"rb": rb}).json()
    assert body["count"] == 0
    body = client.get("/api/custom-topup-upsell", params={"rb": rb}).json()
    assert body["customAmount"] == 2**63 - 1
    assert body["isFallback"] is True


def test_next_upsell_offers(client):
    body = client.get("/api/next-upsell-offers", params={"rb": "550"}).json()
    assert body["baseRb"] == 550
    assert [o["topup_rb"] for o in body["offers"]] == [600, 800]


def test_next_upsell_offers_past_the_top_tier(client):
    body = client.get("/api/next-upsell-offers", params={"rb": "1000"}).json()
    assert body["count"] == 0


# ---------------------------------------------------------------- custom top-up
def test_custom_topup_documented_example(client):
    body = client.get("/api/custom-topup-upsell", params={"rb": "1790"}).json()
    assert body["success"] is True
    assert body["customAmount"] == 1790
    assert body["customTizo"] == 3460
    assert body["upsellBox1"] == {"rb": 1800, "tizo": 3600}
    assert body["upsellBox2"] == {"rb": 2400, "tizo": 4800}
    assert body["range"] == {"min": 1000, "max": 1799}
    assert body["isFallback"] is False


def test_custom_topup_fallback_outside_ranges(client):
    body = client.get("/api/custom-topup-upsell", params={"rb": "3010"}).json()
    assert body["isFallback"] is True
    assert "range" not in body
    assert body["customTizo"] == 6000 + 10
    assert body["upsellBox1"] == {"rb": 3050, "tizo": 6000 + 40 + 10}
    assert body["upsellBox2"] == {"rb": 3100, "tizo": 6000 + 150}


def test_custom_topup_zero(client):
    body = client.get("/api/custom-topup-upsell", params={"rb": "0"}).json()
    assert body["customTizo"] == 0
    assert body["isFallback"] is True
    assert body["upsellBox1"] == {"rb": 0, "tizo": 0}
    assert body["upsellBox2"] == {"rb": 50, "tizo": 50}


def test_custom_topup_uses_cache_until_reload(client, db):
    assert client.get("/api/custom-topup-upsell", params={"rb": "590"}).json()["customTizo"] == 1060

    db.upsert_upsell_offer(590, 1100)
    # new tier is in the table but not in the cache yet
    assert client.get("/api/custom-topup-upsell", params={"rb": "590"}).json()["customTizo"] == 1060

    assert client.post("/api/rates/reload").status_code == 200
    assert client.get("/api/custom-topup-upsell", params={"rb": "590"}).json()["customTizo"] == 1100


# ---------------------------------------------------------------- rates
def test_rates_snapshot(client):
    body = client.get("/api/rates").json()
    assert body["source"] == "database"
    assert body["count"] == len(DEFAULT_UPSELL_OFFERS)
    assert body["rates"][0] == {"topup_rb": 40, "tizo_value": 40}
    assert body["lastError"] is None


def test_failed_reload_keeps_serving_stale_rates(client, settings):
    conn = sqlite3.connect(settings.db_path)
    conn.execute("DROP TABLE upsell_offers")
    conn.commit()
    conn.close()

    resp = client.post("/api/rates/reload")
    assert resp.status_code == 503
    assert resp.json()["success"] is False

    body = client.get("/api/rates").json()
    assert body["count"] == len(DEFAULT_UPSELL_OFFERS)
    assert body["lastError"]
    assert client.get("/api/custom-topup-upsell", params={"rb": "1790"}).json()["customTizo"] == 3460


def test_startup_with_invalid_rate_table_serves_base_and_one_to_one(settings):
    create_app(settings)  # seed
    Database(settings.db_path).upsert_upsell_offer(100, 50)  # awards less than paid

    client = TestClient(create_app(settings))
    rates = client.get("/api/rates").json()
    assert rates["count"] == 0
    assert rates["lastError"]

    body = client.get("/api/custom-topup-upsell", params={"rb": "590"}).json()
    assert body["customTizo"] == 590
    assert body["upsellBox1"] == {"rb": 600, "tizo": 1200}
    assert body["upsellBox2"] == {"rb": 800, "tizo": 1400}


def test_static_rate_source(settings):
    settings.rate_source = "static"
    client = TestClient(create_app(settings))
    body = client.get("/api/rates").json()
    assert body["source"] == "static"
    assert client.get("/api/custom-topup-upsell", params={"rb": "1790"}).json()["customTizo"] == 3460
