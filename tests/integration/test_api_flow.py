"""End-to-end API flow over a real migrated database."""

from httpx import AsyncClient


async def test_delivery_note_round_trip(migrated_db, async_client: AsyncClient):
    """Create a product, ship part of it, cancel, and check the ledger agrees."""
    response = await async_client.post(
        "/api/products",
        json={
            "sku": "CHAIR-001",
            "name": "Terrace Chair",
            "category": "Furniture",
            "price": 250,
            "min_stock": 5,
            "initial_stock": 10,
        },
    )
    assert response.status_code == 201
    product_id = response.json()["id"]

    response = await async_client.post(
        "/api/documents/delivery_note",
        json={
            "date": "2026-03-10",
            "items": [
                {"product_id": product_id, "description": "Chair", "quantity": 6, "unit_price": 250}
            ],
        },
    )
    assert response.status_code == 201
    note = response.json()
    assert note["document_number"] == "DN-03/26/0001"
    assert note["warehouse_id"] == "marrakech"

    product = (await async_client.get(f"/api/products/{product_id}")).json()
    assert (product["stock"], product["status"]) == (4, "low_stock")
    response = await async_client.get(f"/api/inventory/{product_id}/warehouses")
    assert response.json() == [{"warehouse_id": "marrakech", "quantity": 4}]

    response = await async_client.post(
        f"/api/documents/delivery_note/{note['id']}/status", json={"status": "cancelled"}
    )
    assert response.status_code == 200
    assert response.json()["allowed_transitions"] == []

    response = await async_client.patch(
        f"/api/documents/delivery_note/{note['id']}",
        json={"items": [{"product_id": product_id, "description": "Chair", "quantity": 1, "unit_price": 250}]},
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "DOCUMENT_LOCKED"

    movements = (await async_client.get(f"/api/inventory/{product_id}/movements")).json()
    assert [m["movement_type"] for m in movements] == [
        "delivery_note_cancel",
        "delivery_note",
        "initial",
    ]

    verify = (await async_client.get(f"/api/inventory/{product_id}/verify")).json()
    assert verify["in_sync"] is True
    assert verify["cached_stock"] == 10
    assert verify["warehouses"] == [{"warehouse_id": "marrakech", "quantity": 10}]


async def test_invoice_flow_and_dashboard(migrated_db, async_client: AsyncClient):
    client = (
        await async_client.post(
            "/api/contacts", json={"name": "Hotel Atlas", "contact_type": "client"}
        )
    ).json()

    response = await async_client.post(
        "/api/documents/invoice",
        json={
            "contact_id": client["id"],
            "date": "2026-03-10",
            "items": [
                {"description": "Chair", "quantity": 2, "unit_price": 100},
                {"description": "Table", "quantity": 1, "unit_price": 150},
            ],
        },
    )
    invoice = response.json()
    assert (invoice["subtotal"], invoice["vat_amount"], invoice["total"]) == (350, 70, 420)

    response = await async_client.post(
        f"/api/documents/invoice/{invoice['id']}/status", json={"status": "paid"}
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "ILLEGAL_STATUS_TRANSITION"

    response = await async_client.patch(
        f"/api/documents/invoice/{invoice['id']}", json={"date": None}
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"
    stored = (await async_client.get(f"/api/documents/invoice/{invoice['id']}")).json()
    assert stored["date"] == "2026-03-10"

    summary = (
        await async_client.get("/api/dashboard/summary", params={"date": "2026-03-20"})
    ).json()
    assert summary["invoiced_this_month"] == 420
    assert summary["invoice_status_counts"] == {"draft": 1}
    assert summary["top_products"] == []
    assert [m["month"] for m in summary["sales_by_month"]][-1] == "2026-03-01"
    assert sum(m["revenue"] for m in summary["sales_by_month"]) == 0

    listing = (await async_client.get("/api/documents/invoice", params={"status": "draft"})).json()
    assert [d["document_number"] for d in listing["documents"]] == ["INV-03/26/0001"]

    response = await async_client.delete(
        f"/api/documents/invoice/{invoice['id']}", params={"confirm": "true"}
    )
    assert response.json()["deleted"] is True
    response = await async_client.get(f"/api/documents/invoice/{invoice['id']}")
    assert response.status_code == 404
