"""Dashboard Summary Use Case."""

from datetime import date

from erp.application.dto.responses import (
    CategoryStockResponse,
    DashboardSummaryResponse,
    MonthlySalesResponse,
    ProductSalesResponse,
)
from erp.core.services.dashboard import DashboardService, DashboardSummary


class DashboardSummaryUseCase:
    """Headline invoice and stock figures for the current month."""

    def __init__(self, dashboard_service: DashboardService | None = None):
        self._dashboard_service = dashboard_service

    async def _get_dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            from erp.application.services import get_dashboard_service

            self._dashboard_service = await get_dashboard_service()
        return self._dashboard_service

    async def execute(self, on_date: date | None = None) -> DashboardSummary:
        service = await self._get_dashboard_service()
        return await service.summary(on_date)

    def to_response(self, summary: DashboardSummary) -> DashboardSummaryResponse:
        return DashboardSummaryResponse(
            month_start=summary.month_start,
            invoiced_this_month=summary.invoiced_this_month,
            invoiced_last_month=summary.invoiced_last_month,
            invoiced_change_pct=summary.invoiced_change_pct,
            invoice_status_counts=summary.invoice_status_counts,
            stock_status_counts=summary.stock_status_counts,
            low_stock_count=summary.low_stock_count,
            inventory_value=summary.inventory_value,
            stock_by_category=[
                CategoryStockResponse(**row.model_dump()) for row in summary.stock_by_category
            ],
            top_products=[
                ProductSalesResponse(**row.model_dump()) for row in summary.top_products
            ],
            sales_by_month=[
                MonthlySalesResponse(**row.model_dump()) for row in summary.sales_by_month
            ],
        )
