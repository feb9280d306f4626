"""File-backed repositories for ledger and bank statement data."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Sequence

from recon_checker.domain.models import ExternalBatch, InternalRecord
from recon_checker.domain.repositories import (
    ExternalBatchRepository,
    InternalRecordRepository,
)
from recon_checker.infrastructure.parsing.bank_statement import bank_to_batch
from recon_checker.infrastructure.parsing.system_ledger import system_to_records
from recon_checker.infrastructure.parsing.utils import ensure_bytes, source_name_from_path


class SystemLedgerRepository(InternalRecordRepository):
    def __init__(self, source: BytesIO | Path | str | bytes, name: str | Path | None = None) -> None:
        if name is None and isinstance(source, (Path, str)):
            name = source
        self._source = ensure_bytes(source)
        self._name = name

    def list_records(self) -> Sequence[InternalRecord]:
        return system_to_records(self._source, name=self._name)


class BankStatementRepository(ExternalBatchRepository):
    def __init__(
        self,
        source: BytesIO | Path | str | bytes,
        source_name: str | None = None,
        name: str | Path | None = None,
    ) -> None:
        if name is None and isinstance(source, (Path, str)):
            name = source
        self._source = ensure_bytes(source)
        self._name = name
        self.source_name = source_name or source_name_from_path(name)

    def load_batch(self) -> ExternalBatch:
        return bank_to_batch(self._source, source_name=self.source_name, name=self._name)
