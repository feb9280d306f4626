"""Domain models for the reconciliation pipeline.

These dataclasses capture the canonical shape of internal ledger rows, bank
statement rows, and the per-identifier classification produced by matching.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator, Sequence

from .errors import MalformedRecord, UnknownTransactionType


class Direction(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    @classmethod
    def parse(cls, value: object) -> "Direction":
        if isinstance(value, cls):
            return value
        text = "" if value is None else str(value).strip().upper()
        try:
            return cls(text)
        except ValueError:
            raise UnknownTransactionType(f"unknown transaction type: {value!r}") from None

    def signed_amount(self, magnitude_minor: int) -> int:
        """Debits are non-positive, credits non-negative; only the wrong sign is flipped."""
        if self is Direction.DEBIT:
            return -magnitude_minor if magnitude_minor > 0 else magnitude_minor
        return -magnitude_minor if magnitude_minor < 0 else magnitude_minor


@dataclass(frozen=True)
class InternalRecord:
    """One row of the internal system of record."""

    identifier: str
    magnitude_minor: int
    direction: Direction
    timestamp: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.direction, Direction):
            raise UnknownTransactionType(f"unknown transaction type: {self.direction!r}")
        if not self.identifier:
            raise MalformedRecord("internal record has an empty identifier")

    def canonical_amount(self) -> int:
        return self.direction.signed_amount(self.magnitude_minor)


@dataclass(frozen=True)
class ExternalRecord:
    """One bank statement row; the amount is already signed by the bank."""

    identifier: str
    signed_amount_minor: int
    date: date
    source_name: str

    def __post_init__(self) -> None:
        if not self.identifier:
            raise MalformedRecord(f"{self.source_name}: bank record has an empty identifier")
        if isinstance(self.date, datetime):
            if self.date.time() != datetime.min.time():
                raise MalformedRecord(
                    f"{self.source_name}: bank record {self.identifier} carries a time of day ({self.date.isoformat()})"
                )
            object.__setattr__(self, "date", self.date.date())


@dataclass(frozen=True)
class ExternalBatch:
    """All rows of one bank feed, in file order."""

    source_name: str
    records: Sequence[ExternalRecord] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        records = tuple(self.records)
        for record in records:
            if record.source_name != self.source_name:
                raise MalformedRecord(
                    f"record {record.identifier} from {record.source_name!r} placed in batch {self.source_name!r}"
                )
        object.__setattr__(self, "records", records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ExternalRecord]:
        return iter(self.records)


@dataclass(frozen=True)
class Matched:
    identifier: str
    signed_amount_minor: int
    source_name: str


@dataclass(frozen=True)
class MatchedWithDiscrepancy:
    identifier: str
    system_signed_minor: int
    external_signed_minor: int
    abs_diff_minor: int
    source_name: str


@dataclass(frozen=True)
class MissingFromExternal:
    """Present in the ledger, absent from every bank feed."""

    identifier: str
    magnitude_minor: int
    direction: Direction


@dataclass(frozen=True)
class MissingFromInternal:
    """Present in a bank feed, absent from the ledger."""

    identifier: str
    signed_amount_minor: int
    source_name: str


@dataclass(frozen=True)
class DuplicateRecord:
    identifier: str
    source_names: tuple[str, ...]


Classification = Matched | MatchedWithDiscrepancy | MissingFromExternal | MissingFromInternal
