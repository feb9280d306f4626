"""Domain services implementing the identity join between ledger and bank feeds."""
from __future__ import annotations

import logging
from typing import Iterator, Sequence

from .index import RecordIndex
from .models import (
    Classification,
    ExternalBatch,
    ExternalRecord,
    InternalRecord,
    Matched,
    MatchedWithDiscrepancy,
    MissingFromExternal,
    MissingFromInternal,
)
from .results import Summary, SummaryBuilder

logger = logging.getLogger(__name__)


class Reconciler:
    """Exact-identifier, zero-tolerance reconciliation.

    Holds no state between calls; each ``reconcile`` builds fresh indexes, so
    one instance may be shared across threads.
    """

    def reconcile(self, internal: Sequence[InternalRecord], batches: Sequence[ExternalBatch]) -> Summary:
        internal_index = RecordIndex.build(
            internal,
            key=lambda record: record.identifier,
            label=lambda record: "system",
        )
        if internal_index.duplicates:
            logger.warning(
                "Internal identifiers repeated, keeping first occurrence: %s",
                ", ".join(sorted(internal_index.duplicates)),
            )
        external_index = RecordIndex.from_batches(batches)
        if external_index.duplicates:
            logger.warning("Duplicate bank identifiers: %d", len(external_index.duplicates))

        builder = SummaryBuilder()
        builder.extend(self.classify(internal_index, external_index))
        builder.add_processed(internal_index.total + external_index.total)
        builder.add_duplicates(external_index.duplicate_records())
        summary = builder.build()

        logger.info(
            "Reconciled %d records: matched=%d unmatched=%d discrepancy_minor=%d",
            summary.total_processed,
            summary.total_matched,
            summary.total_unmatched,
            summary.total_amount_discrepancy_minor,
        )
        return summary

    def classify(
        self,
        internal_index: RecordIndex[InternalRecord],
        external_index: RecordIndex[ExternalRecord],
    ) -> Iterator[Classification]:
        for identifier, record in internal_index.records.items():
            bank_record = external_index.get(identifier)
            if bank_record is None:
                yield MissingFromExternal(
                    identifier=identifier,
                    magnitude_minor=record.magnitude_minor,
                    direction=record.direction,
                )
                continue
            yield self._compare(record, bank_record)

        for identifier, bank_record in external_index.records.items():
            if identifier not in internal_index:
                yield MissingFromInternal(
                    identifier=identifier,
                    signed_amount_minor=bank_record.signed_amount_minor,
                    source_name=bank_record.source_name,
                )

    @staticmethod
    def _compare(record: InternalRecord, bank_record: ExternalRecord) -> Classification:
        system_signed = record.canonical_amount()
        external_signed = bank_record.signed_amount_minor
        diff = abs(system_signed - external_signed)
        if diff == 0:
            return Matched(
                identifier=record.identifier,
                signed_amount_minor=system_signed,
                source_name=bank_record.source_name,
            )
        return MatchedWithDiscrepancy(
            identifier=record.identifier,
            system_signed_minor=system_signed,
            external_signed_minor=external_signed,
            abs_diff_minor=diff,
            source_name=bank_record.source_name,
        )


def reconcile(internal: Sequence[InternalRecord], batches: Sequence[ExternalBatch]) -> Summary:
    return Reconciler().reconcile(internal, batches)
