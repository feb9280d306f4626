"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import ExternalBatch, InternalRecord


class InternalRecordRepository(Protocol):
    """Provides validated rows of the internal system of record."""

    def list_records(self) -> Sequence[InternalRecord]:
        ...


class ExternalBatchRepository(Protocol):
    """Provides one validated bank statement feed."""

    def load_batch(self) -> ExternalBatch:
        ...
