"""Tests for dashboard aggregation."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from erp.core.entities.document import (
    DocumentStatus,
    DocumentType,
    MonthlySales,
    ProductSales,
)
from erp.core.entities.inventory import CategoryStock
from erp.core.services.dashboard import (
    DashboardService,
    month_bounds,
    percent_change,
    shift_month,
)


class TestMonthBounds:
    def test_mid_year(self):
        assert month_bounds(date(2026, 3, 17)) == (
            date(2026, 2, 1),
            date(2026, 3, 1),
            date(2026, 4, 1),
        )

    def test_january(self):
        prev_start, this_start, _ = month_bounds(date(2026, 1, 31))
        assert prev_start == date(2025, 12, 1)
        assert this_start == date(2026, 1, 1)

    def test_december(self):
        _, _, next_start = month_bounds(date(2026, 12, 5))
        assert next_start == date(2027, 1, 1)

    def test_shift_across_years(self):
        assert shift_month(date(2026, 3, 1), -11) == date(2025, 4, 1)
        assert shift_month(date(2026, 11, 1), 14) == date(2028, 1, 1)


class TestPercentChange:
    @pytest.mark.parametrize(
        "current,previous,expected",
        [(150, 100, 50), (50, 100, -50), (100, 0, 0), (0, 0, 0), (100, 300, -67)],
    )
    def test_values(self, current, previous, expected):
        assert percent_change(current, previous) == expected


class TestDashboardService:
    @pytest.fixture
    def document_store(self):
        store = AsyncMock()
        store.sum_totals.side_effect = [1200.0, 800.0]
        store.count_by_status.return_value = {"draft": 2, "paid": 5}
        store.product_sales.return_value = [
            ProductSales(
                product_id="p1", name="Chair", category="Furniture", quantity=6, revenue=1500
            )
        ]
        store.monthly_sales.return_value = [
            MonthlySales(month=date(2025, 5, 1), document_count=1, revenue=300),
            MonthlySales(month=date(2026, 3, 1), document_count=2, revenue=900),
        ]
        return store

    @pytest.fixture
    def product_store(self):
        store = AsyncMock()
        store.count_by_status.return_value = {
            "in_stock": 4,
            "low_stock": 2,
            "out_of_stock": 1,
        }
        store.inventory_value.return_value = 10234.567
        store.stock_by_category.return_value = [CategoryStock(category="Furniture", stock=40)]
        return store

    async def test_summary(self, document_store, product_store):
        service = DashboardService(document_store, product_store)

        summary = await service.summary(date(2026, 3, 17))

        assert summary.month_start == date(2026, 3, 1)
        assert summary.invoiced_this_month == 1200.0
        assert summary.invoiced_last_month == 800.0
        assert summary.invoiced_change_pct == 50
        assert summary.low_stock_count == 3
        assert summary.inventory_value == 10234.57
        assert summary.invoice_status_counts == {"draft": 2, "paid": 5}

    async def test_cancelled_invoices_excluded(self, document_store, product_store):
        service = DashboardService(document_store, product_store)
        await service.summary(date(2026, 3, 17))

        first_call = document_store.sum_totals.call_args_list[0]
        assert first_call.args == (
            DocumentType.INVOICE,
            date(2026, 3, 1),
            date(2026, 4, 1),
            DocumentStatus.CANCELLED,
        )

    async def test_breakdowns(self, document_store, product_store):
        service = DashboardService(document_store, product_store)

        summary = await service.summary(date(2026, 3, 17))

        assert summary.stock_by_category == [CategoryStock(category="Furniture", stock=40)]
        assert [p.name for p in summary.top_products] == ["Chair"]
        document_store.product_sales.assert_awaited_once_with(
            DocumentType.INVOICE,
            date(2026, 3, 1),
            date(2026, 4, 1),
            DocumentStatus.PAID,
            limit=10,
        )

    async def test_sales_series_covers_twelve_months(self, document_store, product_store):
        service = DashboardService(document_store, product_store)

        summary = await service.summary(date(2026, 3, 17))

        series = summary.sales_by_month
        assert [m.month for m in series][:2] == [date(2025, 4, 1), date(2025, 5, 1)]
        assert len(series) == 12
        assert series[-1] == MonthlySales(month=date(2026, 3, 1), document_count=2, revenue=900)
        assert series[1].revenue == 300
        assert sum(m.document_count for m in series) == 3
        document_store.monthly_sales.assert_awaited_once_with(
            DocumentType.INVOICE, date(2025, 4, 1), date(2026, 4, 1), DocumentStatus.PAID
        )
