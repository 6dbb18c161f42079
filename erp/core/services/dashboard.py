"""Dashboard KPI aggregation."""

from dataclasses import dataclass, field
from datetime import date

from erp.core.entities.document import (
    DocumentStatus,
    DocumentType,
    MonthlySales,
    ProductSales,
    money,
)
from erp.core.entities.inventory import CategoryStock
from erp.core.interfaces.document_store import IDocumentStore
from erp.core.interfaces.inventory_store import IProductStore

SALES_CHART_MONTHS = 12
TOP_PRODUCTS = 10


@dataclass
class DashboardSummary:
    """Headline figures for the current month."""

    month_start: date
    invoiced_this_month: float
    invoiced_last_month: float
    invoiced_change_pct: int
    invoice_status_counts: dict[str, int] = field(default_factory=dict)
    stock_status_counts: dict[str, int] = field(default_factory=dict)
    low_stock_count: int = 0
    inventory_value: float = 0.0
    stock_by_category: list[CategoryStock] = field(default_factory=list)
    top_products: list[ProductSales] = field(default_factory=list)
    # Oldest month first, one entry per month including empty ones
    sales_by_month: list[MonthlySales] = field(default_factory=list)


def shift_month(month_start: date, months: int) -> date:
    """First day of the month `months` away from month_start."""
    index = month_start.year * 12 + month_start.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def month_bounds(on_date: date) -> tuple[date, date, date]:
    """(previous month start, this month start, next month start)."""
    this_start = on_date.replace(day=1)
    return shift_month(this_start, -1), this_start, shift_month(this_start, 1)


def percent_change(current: float, previous: float) -> int:
    """Whole-percent change, 0 when there is nothing to compare with."""
    if not previous:
        return 0
    return round((current - previous) / previous * 100)


def fill_months(rows: list[MonthlySales], first: date, count: int) -> list[MonthlySales]:
    by_month = {row.month: row for row in rows}
    months = [shift_month(first, offset) for offset in range(count)]
    return [by_month.get(month) or MonthlySales(month=month) for month in months]


class DashboardService:
    """Aggregates invoice and stock figures for the dashboard tiles."""

    def __init__(self, document_store: IDocumentStore, product_store: IProductStore):
        self._documents = document_store
        self._products = product_store

    async def summary(self, on_date: date | None = None) -> DashboardSummary:
        prev_start, this_start, next_start = month_bounds(on_date or date.today())

        current = await self._documents.sum_totals(
            DocumentType.INVOICE, this_start, next_start, DocumentStatus.CANCELLED
        )
        previous = await self._documents.sum_totals(
            DocumentType.INVOICE, prev_start, this_start, DocumentStatus.CANCELLED
        )
        stock_counts = await self._products.count_by_status()

        return DashboardSummary(
            month_start=this_start,
            invoiced_this_month=money(current),
            invoiced_last_month=money(previous),
            invoiced_change_pct=percent_change(current, previous),
            invoice_status_counts=await self._documents.count_by_status(
                DocumentType.INVOICE
            ),
            stock_status_counts=stock_counts,
            low_stock_count=stock_counts.get("low_stock", 0)
            + stock_counts.get("out_of_stock", 0),
            inventory_value=money(await self._products.inventory_value()),
            stock_by_category=await self._products.stock_by_category(),
            top_products=await self._documents.product_sales(
                DocumentType.INVOICE,
                this_start,
                next_start,
                DocumentStatus.PAID,
                limit=TOP_PRODUCTS,
            ),
            sales_by_month=await self._sales_by_month(this_start, next_start),
        )

    async def _sales_by_month(self, this_start: date, next_start: date) -> list[MonthlySales]:
        """Paid invoices over the trailing months, ending with this one."""
        first = shift_month(this_start, 1 - SALES_CHART_MONTHS)
        rows = await self._documents.monthly_sales(
            DocumentType.INVOICE, first, next_start, DocumentStatus.PAID
        )
        return fill_months(rows, first, SALES_CHART_MONTHS)
