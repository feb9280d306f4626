"""Application services orchestrating the reconciliation workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from recon_checker.application.dto import DateWindow, ReconciliationResponse
from recon_checker.application.filters import filter_batches_by_date, filter_internal_by_date
from recon_checker.domain.repositories import (
    ExternalBatchRepository,
    InternalRecordRepository,
)
from recon_checker.domain.services import Reconciler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationContext:
    internal_repository: InternalRecordRepository
    external_repositories: Sequence[ExternalBatchRepository]
    reconciler: Reconciler = field(default_factory=Reconciler)
    window: DateWindow | None = None


class ReconcileUseCase:
    def __init__(self, context: ReconciliationContext) -> None:
        self._context = context

    def execute(self) -> ReconciliationResponse:
        internal_records = self._context.internal_repository.list_records()
        batches = [repository.load_batch() for repository in self._context.external_repositories]

        window = self._context.window
        if window is not None:
            internal_records = filter_internal_by_date(internal_records, window)
            batches = filter_batches_by_date(batches, window)
            logger.info(
                "Window %s..%s keeps %d internal and %d bank records",
                window.start,
                window.end,
                len(internal_records),
                sum(len(batch) for batch in batches),
            )

        summary = self._context.reconciler.reconcile(internal_records, batches)
        return ReconciliationResponse(
            summary=summary,
            internal_records=tuple(internal_records),
            external_batches=tuple(batches),
        )
