"""Dashboard endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from erp.api.dependencies import get_dashboard_use_case
from erp.application.dto.responses import DashboardSummaryResponse
from erp.application.use_cases import DashboardSummaryUseCase

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    on_date: date | None = Query(default=None, alias="date"),
    use_case: DashboardSummaryUseCase = Depends(get_dashboard_use_case),
) -> DashboardSummaryResponse:
    """Invoice totals for this and last month, stock breakdowns and the paid sales series."""
    summary = await use_case.execute(on_date)
    return use_case.to_response(summary)
