"""API tests for contact, warehouse and dashboard endpoints."""

from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from erp.api.dependencies import (
    get_create_contact_use_case,
    get_dashboard_use_case,
    get_get_contact_use_case,
    get_list_contacts_use_case,
    get_list_warehouses_use_case,
)
from erp.api.main import app
from erp.application.use_cases import (
    CreateContactUseCase,
    DashboardSummaryUseCase,
    GetContactUseCase,
    ListContactsUseCase,
    ListWarehousesUseCase,
)
from erp.core.entities.contact import Contact, ContactType
from erp.core.entities.document import MonthlySales, ProductSales
from erp.core.entities.inventory import CategoryStock, Warehouse
from erp.core.services.dashboard import DashboardSummary


@pytest.fixture
def contact_store():
    store = AsyncMock()
    store.create_contact.side_effect = lambda c: c
    store.get_contact.return_value = None
    store.list_contacts.return_value = [
        Contact(id="s-1", name="Sahara Supply", contact_type=ContactType.SUPPLIER)
    ]
    return store


@pytest.fixture
def dashboard_service():
    service = AsyncMock()
    service.summary.return_value = DashboardSummary(
        month_start=date(2026, 3, 1),
        invoiced_this_month=840,
        invoiced_last_month=420,
        invoiced_change_pct=100,
        invoice_status_counts={"draft": 2},
        stock_status_counts={"in_stock": 3, "low_stock": 1, "out_of_stock": 0},
        low_stock_count=1,
        inventory_value=4700,
        stock_by_category=[CategoryStock(category="Furniture", stock=12)],
        top_products=[
            ProductSales(
                product_id="p1", name="Terrace Chair", category="Furniture", quantity=4, revenue=1000
            )
        ],
        sales_by_month=[MonthlySales(month=date(2026, 3, 1), document_count=2, revenue=1000)],
    )
    return service


@pytest.fixture
async def contact_client(contact_store, dashboard_service):
    warehouse_store = AsyncMock()
    warehouse_store.list_warehouses.return_value = [
        Warehouse(id="marrakech", name="Marrakech", city="Marrakech")
    ]
    overrides = {
        get_create_contact_use_case: lambda: CreateContactUseCase(contact_store=contact_store),
        get_get_contact_use_case: lambda: GetContactUseCase(contact_store=contact_store),
        get_list_contacts_use_case: lambda: ListContactsUseCase(contact_store=contact_store),
        get_list_warehouses_use_case: lambda: ListWarehousesUseCase(
            warehouse_store=warehouse_store
        ),
        get_dashboard_use_case: lambda: DashboardSummaryUseCase(
            dashboard_service=dashboard_service
        ),
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)


class TestContactsAPI:
    async def test_create(self, contact_client: AsyncClient):
        response = await contact_client.post(
            "/api/contacts",
            json={"name": "Hotel Atlas", "contact_type": "client", "city": "Marrakech"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["contact_type"] == "client"

    async def test_invalid_type(self, contact_client: AsyncClient):
        response = await contact_client.post(
            "/api/contacts", json={"name": "Someone", "contact_type": "partner"}
        )
        assert response.status_code == 422

    async def test_list_by_type(self, contact_client: AsyncClient, contact_store):
        response = await contact_client.get("/api/contacts", params={"type": "supplier"})

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Sahara Supply"
        assert contact_store.list_contacts.call_args.kwargs["contact_type"] == (
            ContactType.SUPPLIER
        )

    async def test_get_missing(self, contact_client: AsyncClient):
        response = await contact_client.get("/api/contacts/nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "CONTACT_NOT_FOUND"

    async def test_warehouses(self, contact_client: AsyncClient):
        response = await contact_client.get("/api/warehouses")
        assert response.json() == [{"id": "marrakech", "name": "Marrakech", "city": "Marrakech"}]


class TestDashboardAPI:
    async def test_summary(self, contact_client: AsyncClient, dashboard_service):
        response = await contact_client.get("/api/dashboard/summary", params={"date": "2026-03-18"})

        assert response.status_code == 200
        data = response.json()
        assert data["month_start"] == "2026-03-01"
        assert data["invoiced_change_pct"] == 100
        assert data["stock_status_counts"]["low_stock"] == 1
        dashboard_service.summary.assert_awaited_once_with(date(2026, 3, 18))

    async def test_breakdowns(self, contact_client: AsyncClient):
        data = (await contact_client.get("/api/dashboard/summary")).json()

        assert data["stock_by_category"] == [{"category": "Furniture", "stock": 12}]
        assert data["top_products"][0]["name"] == "Terrace Chair"
        assert data["top_products"][0]["revenue"] == 1000
        assert data["sales_by_month"] == [
            {"month": "2026-03-01", "document_count": 2, "revenue": 1000}
        ]
