"""Reconcile an internal transaction ledger against bank statement feeds."""
from recon_checker.application.use_cases import ReconcileUseCase, ReconciliationContext
from recon_checker.domain.errors import (
    InvalidAmountFormat,
    MalformedRecord,
    ReconciliationError,
    UnknownTransactionType,
)
from recon_checker.domain.models import Direction, ExternalBatch, ExternalRecord, InternalRecord
from recon_checker.domain.money import normalize_amount, signed_amount
from recon_checker.domain.results import Summary
from recon_checker.domain.services import Reconciler, reconcile
from recon_checker.infrastructure.repositories.file_repositories import (
    BankStatementRepository,
    SystemLedgerRepository,
)

__all__ = [
    "ReconcileUseCase",
    "ReconciliationContext",
    "Reconciler",
    "reconcile",
    "Summary",
    "Direction",
    "InternalRecord",
    "ExternalRecord",
    "ExternalBatch",
    "normalize_amount",
    "signed_amount",
    "ReconciliationError",
    "InvalidAmountFormat",
    "UnknownTransactionType",
    "MalformedRecord",
    "SystemLedgerRepository",
    "BankStatementRepository",
]
