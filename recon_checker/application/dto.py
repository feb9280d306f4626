"""Application-level DTOs for reconciliation runs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from recon_checker.domain.models import ExternalBatch, InternalRecord
from recon_checker.domain.results import Summary


@dataclass(slots=True, frozen=True)
class DateWindow:
    """Inclusive calendar-day range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"end date {self.end} is before start date {self.start}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(slots=True, frozen=True)
class ReconciliationResponse:
    summary: Summary
    internal_records: Sequence[InternalRecord]
    external_batches: Sequence[ExternalBatch]
