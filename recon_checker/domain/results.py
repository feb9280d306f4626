"""Domain-level results for reconciliation runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from operator import attrgetter
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .models import (
    Classification,
    DuplicateRecord,
    Matched,
    MatchedWithDiscrepancy,
    MissingFromExternal,
    MissingFromInternal,
)


@dataclass(frozen=True)
class Summary:
    total_processed: int
    total_matched: int
    total_unmatched: int
    total_amount_discrepancy_minor: int
    system_missing_in_bank: Sequence[MissingFromExternal] = field(default_factory=tuple)
    bank_missing_in_system: Mapping[str, Sequence[MissingFromInternal]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    matched_with_discrepancies: Sequence[MatchedWithDiscrepancy] = field(default_factory=tuple)
    notes: Sequence[str] = field(default_factory=tuple)
    duplicates: Sequence[DuplicateRecord] = field(default_factory=tuple)

    def has_issues(self) -> bool:
        return any(
            [
                self.total_unmatched,
                self.total_amount_discrepancy_minor,
                self.matched_with_discrepancies,
                self.duplicates,
            ]
        )

    def iter_bank_missing(self) -> Iterable[MissingFromInternal]:
        for source_name in sorted(self.bank_missing_in_system):
            yield from self.bank_missing_in_system[source_name]


def format_duplicate_note(duplicates: Sequence[DuplicateRecord]) -> str:
    """Render the duplicate note.

    Identifiers are sorted, and each one's source names are sorted and joined
    with ", ", so the note does not depend on the order the feeds were given.
    """
    parts = [
        f"{item.identifier} in banks=[{', '.join(sorted(item.source_names))}]"
        for item in sorted(duplicates, key=attrgetter("identifier"))
    ]
    return "duplicate bank IDs detected: " + "; ".join(parts)


class SummaryBuilder:
    """Folds classifications into an immutable, deterministically ordered Summary."""

    def __init__(self) -> None:
        self._matched: list[Matched] = []
        self._discrepancies: list[MatchedWithDiscrepancy] = []
        self._system_missing: list[MissingFromExternal] = []
        self._bank_missing: dict[str, list[MissingFromInternal]] = {}
        self._duplicates: list[DuplicateRecord] = []
        self._total_processed = 0

    def add(self, result: Classification) -> "SummaryBuilder":
        if isinstance(result, MatchedWithDiscrepancy):
            self._discrepancies.append(result)
        elif isinstance(result, Matched):
            self._matched.append(result)
        elif isinstance(result, MissingFromExternal):
            self._system_missing.append(result)
        elif isinstance(result, MissingFromInternal):
            self._bank_missing.setdefault(result.source_name, []).append(result)
        else:
            raise TypeError(f"Unsupported classification: {type(result)!r}")
        return self

    def extend(self, results: Iterable[Classification]) -> "SummaryBuilder":
        for result in results:
            self.add(result)
        return self

    def add_processed(self, count: int) -> "SummaryBuilder":
        self._total_processed += count
        return self

    def add_duplicates(self, duplicates: Iterable[DuplicateRecord]) -> "SummaryBuilder":
        self._duplicates.extend(duplicates)
        return self

    def build(self) -> Summary:
        by_id = attrgetter("identifier")
        discrepancies = tuple(sorted(self._discrepancies, key=by_id))
        system_missing = tuple(sorted(self._system_missing, key=by_id))
        bank_missing = MappingProxyType(
            {
                source_name: tuple(sorted(self._bank_missing[source_name], key=by_id))
                for source_name in sorted(self._bank_missing)
            }
        )
        duplicates = tuple(sorted(self._duplicates, key=by_id))
        notes = (format_duplicate_note(duplicates),) if duplicates else ()

        return Summary(
            total_processed=self._total_processed,
            total_matched=len(self._matched) + len(discrepancies),
            total_unmatched=len(system_missing) + sum(len(rows) for rows in bank_missing.values()),
            total_amount_discrepancy_minor=sum(item.abs_diff_minor for item in discrepancies),
            system_missing_in_bank=system_missing,
            bank_missing_in_system=bank_missing,
            matched_with_discrepancies=discrepancies,
            notes=notes,
            duplicates=duplicates,
        )
