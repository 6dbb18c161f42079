"""Purge Orphaned Lines Use Case: maintenance for headerless stock lines."""

from erp.application.dto.responses import PurgeOrphansResponse
from erp.core.exceptions import ConfirmationRequiredError
from erp.core.services.document_lifecycle import DocumentLifecycleManager, PurgeResult


class PurgeOrphanedLinesUseCase:
    """Return stock held by lines whose document header is gone."""

    def __init__(self, lifecycle: DocumentLifecycleManager | None = None):
        self._lifecycle = lifecycle

    def _get_lifecycle(self) -> DocumentLifecycleManager:
        if self._lifecycle is None:
            from erp.application.services import get_lifecycle_manager

            self._lifecycle = get_lifecycle_manager()
        return self._lifecycle

    async def execute(self, confirm: bool = False) -> PurgeResult:
        if not confirm:
            raise ConfirmationRequiredError("purge orphaned lines")
        return await self._get_lifecycle().purge_orphaned_lines()

    def to_response(self, result: PurgeResult) -> PurgeOrphansResponse:
        return PurgeOrphansResponse(
            lines_removed=result.lines_removed,
            movements_recorded=result.movements_recorded,
        )
