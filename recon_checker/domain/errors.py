"""Error kinds raised while turning raw rows into reconcilable records."""
from __future__ import annotations


class ReconciliationError(ValueError):
    """Base class for record-level validation failures.

    Any of these aborts the run: a reconciliation missing rows is worse than
    one that fails loudly.
    """


class InvalidAmountFormat(ReconciliationError):
    """A decimal amount string could not be normalized to minor units."""


class UnknownTransactionType(ReconciliationError):
    """A direction other than DEBIT or CREDIT was supplied."""


class MalformedRecord(ReconciliationError):
    """A row is structurally invalid (missing column, empty id, bad date)."""
