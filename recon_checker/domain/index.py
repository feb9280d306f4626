"""First-seen-wins lookup over one or more record batches."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Mapping, TypeVar

from .models import DuplicateRecord, ExternalBatch, ExternalRecord

T = TypeVar("T")


@dataclass(frozen=True)
class RecordIndex(Generic[T]):
    """Identifier -> first record seen, plus every identifier seen again.

    ``duplicates`` maps an identifier to the labels of all records carrying
    it (the retained one included), in first-appearance order.
    """

    records: Mapping[str, T]
    duplicates: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    total: int = 0

    @classmethod
    def build(
        cls,
        records: Iterable[T],
        key: Callable[[T], str],
        label: Callable[[T], str],
    ) -> "RecordIndex[T]":
        retained: dict[str, T] = {}
        duplicates: dict[str, list[str]] = {}
        total = 0
        for record in records:
            total += 1
            identifier = key(record)
            if identifier not in retained:
                retained[identifier] = record
                continue
            labels = duplicates.setdefault(identifier, [label(retained[identifier])])
            if label(record) not in labels:
                labels.append(label(record))
        return cls(
            records=retained,
            duplicates={identifier: tuple(labels) for identifier, labels in duplicates.items()},
            total=total,
        )

    @classmethod
    def from_batches(cls, batches: Iterable[ExternalBatch]) -> "RecordIndex[ExternalRecord]":
        """Fold every batch through one accumulator so duplicates span feeds."""
        return cls.build(
            (record for batch in batches for record in batch),
            key=lambda record: record.identifier,
            label=lambda record: record.source_name,
        )

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.records

    def __len__(self) -> int:
        return len(self.records)

    def get(self, identifier: str) -> T | None:
        return self.records.get(identifier)

    def duplicate_records(self) -> tuple[DuplicateRecord, ...]:
        return tuple(
            DuplicateRecord(identifier=identifier, source_names=tuple(sorted(self.duplicates[identifier])))
            for identifier in sorted(self.duplicates)
        )
