"""Date-window filtering applied before matching."""
from __future__ import annotations

from typing import Sequence

from recon_checker.application.dto import DateWindow
from recon_checker.domain.models import ExternalBatch, InternalRecord


def filter_internal_by_date(records: Sequence[InternalRecord], window: DateWindow) -> list[InternalRecord]:
    # the calendar day is taken in the timestamp's own offset
    return [record for record in records if window.contains(record.timestamp.date())]


def filter_batches_by_date(batches: Sequence[ExternalBatch], window: DateWindow) -> list[ExternalBatch]:
    return [
        ExternalBatch(
            source_name=batch.source_name,
            records=tuple(record for record in batch if window.contains(record.date)),
        )
        for batch in batches
    ]
