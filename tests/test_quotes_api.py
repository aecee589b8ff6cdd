"""
Pricing and quote API tests: calculate, save, list, fetch, delete, PDF.
"""

import pytest

from kitchen_quoting.pdf_generator import _safe, generate_quote_pdf, paginate_items, truncate_name


def _config():
    return {
        "handle_type": "Handles",
        "cabinets": [{"name": "BASE", "linear_feet": 5, "price_level": 0}],
        "surfaces": [{"name": "COUNTER TOP", "area": "kitchen-surfaces", "material": "laminate", "square_feet": 10}],
        "addons": [{"name": "LED LIGHTING", "linear_feet": 7}],
    }


def _quote_payload(**overrides):
    payload = {
        "customer_name": "Dana Reyes",
        "customer_email": "dana@example.com",
        "customer_phone": "555-0100",
        "config": _config(),
    }
    payload.update(overrides)
    return payload


# ============================================================
# POST /api/pricing/calculate
# ============================================================

def test_calculate_against_seeded_catalog(seeded_client):
    response = seeded_client.post("/api/pricing/calculate", json={"config": _config()})
    assert response.status_code == 200
    data = response.json()
    # BASE Handles level 0 $395 × 5, laminate $85 × 10, LED $28 × 7
    assert data["subtotal"] == pytest.approx(1975.0 + 850.0 + 196.0)
    assert data["total"] == pytest.approx(data["subtotal"] * 1.05 * 1.10)
    assert data["trade_price"] == pytest.approx(data["total"] * 1.4)

    led = next(i for i in data["items"] if i["name"] == "LED LIGHTING (KITCHEN)")
    assert led["dependents"][0]["name"] == "TRANSFORMER"
    assert led["dependents"][0]["quantity"] == 3.0


def test_calculate_with_custom_rates(seeded_client):
    response = seeded_client.post("/api/pricing/calculate", json={
        "config": _config(), "rates": {"contingency_rate": 0, "tariff_rate": 0},
    })
    data = response.json()
    assert data["total"] == data["subtotal"]


def test_calculate_empty_catalog_is_zero(client):
    data = client.post("/api/pricing/calculate", json={"config": _config()}).json()
    assert data["items"] == []
    assert data["total"] == 0.0


def test_calculate_rejects_negative_rates(client):
    response = client.post("/api/pricing/calculate", json={
        "config": _config(), "rates": {"contingency_rate": -1},
    })
    assert response.status_code == 422


# ============================================================
# Quotes
# ============================================================

def test_create_quote_prices_server_side(seeded_client):
    response = seeded_client.post("/api/quotes/", json=_quote_payload())
    assert response.status_code == 200
    quote = response.json()
    assert quote["quote_number"] == "KCQ-0001"
    assert quote["customer_name"] == "Dana Reyes"

    calculated = seeded_client.post("/api/pricing/calculate", json={"config": _config()}).json()
    assert quote["pricing"]["total"] == pytest.approx(calculated["total"])


def test_quote_snapshot_includes_resolved_dependents(seeded_client):
    quote = seeded_client.post("/api/quotes/", json=_quote_payload()).json()
    led = quote["configuration"]["addons"][0]
    assert led["dependents"][0]["name"] == "TRANSFORMER"
    assert led["dependents"][0]["quantity"] == 3.0


@pytest.mark.parametrize("field", ["customer_name", "customer_email"])
def test_quote_requires_name_and_email(client, field):
    response = client.post("/api/quotes/", json=_quote_payload(**{field: ""}))
    assert response.status_code == 422


def test_list_quotes_newest_first(seeded_client):
    for name in ["First", "Second", "Third"]:
        seeded_client.post("/api/quotes/", json=_quote_payload(customer_name=name))
    quotes = seeded_client.get("/api/quotes/").json()
    assert [q["customer_name"] for q in quotes] == ["Third", "Second", "First"]

    page = seeded_client.get("/api/quotes/?skip=1&limit=1").json()
    assert [q["customer_name"] for q in page] == ["Second"]


def test_get_quote(seeded_client):
    created = seeded_client.post("/api/quotes/", json=_quote_payload()).json()
    fetched = seeded_client.get(f"/api/quotes/{created['id']}").json()
    assert fetched == created


def test_get_missing_quote_404(client):
    assert client.get("/api/quotes/999").status_code == 404


def test_delete_quote(seeded_client):
    created = seeded_client.post("/api/quotes/", json=_quote_payload()).json()
    response = seeded_client.delete(f"/api/quotes/{created['id']}")
    assert response.status_code == 200
    assert seeded_client.get(f"/api/quotes/{created['id']}").status_code == 404
    assert seeded_client.delete(f"/api/quotes/{created['id']}").status_code == 404


def test_quotes_cannot_be_updated(seeded_client):
    created = seeded_client.post("/api/quotes/", json=_quote_payload()).json()
    response = seeded_client.patch(f"/api/quotes/{created['id']}", json={"customer_name": "X"})
    assert response.status_code == 405


# ============================================================
# PDF
# ============================================================

def test_quote_pdf_download(seeded_client):
    created = seeded_client.post("/api/quotes/", json=_quote_payload()).json()
    response = seeded_client.get(f"/api/quotes/{created['id']}/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="Quote-KCQ-0001.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_quote_pdf_missing_404(client):
    assert client.get("/api/quotes/42/pdf").status_code == 404


def test_paginate_items():
    assert paginate_items([]) == [[]]
    assert [len(p) for p in paginate_items(list(range(15)))] == [15]
    assert [len(p) for p in paginate_items(list(range(16)))] == [15, 1]
    assert [len(p) for p in paginate_items(list(range(66)))] == [15, 25, 25, 1]


def test_truncate_name():
    assert truncate_name("A" * 40) == "A" * 40
    long_name = truncate_name("B" * 41)
    assert long_name == "B" * 37 + "..."
    assert len(long_name) == 40


def test_generate_pdf_many_items_and_unicode():
    items = [
        {"name": f"Cabinet run {i} — “walnut” with a very long descriptive name", "price": 100.0 * i,
         "measurement": f"{i} LF"}
        for i in range(45)
    ]
    quote = {
        "quote_number": "KCQ-0007",
        "customer_name": "Zoë Łukasz",
        "customer_email": "zoe@example.com",
        "created_at": "2026-03-01T10:00:00",
        "pricing": {
            "items": items,
            "subtotal": 99000.0,
            "buffer": 4950.0,
            "tariff": 10395.0,
            "total": 114345.0,
            "trade_price": 160083.0,
            "retail_price_1": 228690.0,
            "retail_price_2": 285862.5,
            "contingency_rate": 0.05,
            "tariff_rate": 0.10,
        },
    }
    pdf_bytes = generate_quote_pdf(quote, {"company_name": "Test Kitchens"})
    assert isinstance(pdf_bytes, bytes)
    assert pdf_bytes.startswith(b"%PDF")


def test_safe_replaces_typographic_characters():
    assert _safe("Oak — “matte” • Ash’s") == 'Oak  -  "matte" - Ash\'s'
    assert _safe("Łukasz") == "?ukasz"
