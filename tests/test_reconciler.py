from datetime import date, datetime, timezone

import pytest

from recon_checker.domain.errors import MalformedRecord, UnknownTransactionType
from recon_checker.domain.models import (
    Direction,
    ExternalBatch,
    ExternalRecord,
    InternalRecord,
    MissingFromExternal,
)
from recon_checker.domain.services import Reconciler, reconcile
from recon_checker.presentation.summary_report import render_json


def make_internal(identifier: str, magnitude: int, direction: Direction = Direction.CREDIT) -> InternalRecord:
    return InternalRecord(
        identifier=identifier,
        magnitude_minor=magnitude,
        direction=direction,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def make_batch(source: str, *rows: tuple[str, int]) -> ExternalBatch:
    return ExternalBatch(
        source_name=source,
        records=[
            ExternalRecord(identifier=i, signed_amount_minor=a, date=date(2024, 1, 1), source_name=source)
            for i, a in rows
        ],
    )


def test_matched_and_missing_in_system():
    internal = [make_internal("SAME-1", 10000, Direction.CREDIT)]
    batches = [make_batch("bank_a", ("SAME-1", 10000), ("ONLY-A", 12345))]

    summary = Reconciler().reconcile(internal, batches)

    assert summary.total_matched == 1
    assert summary.total_amount_discrepancy_minor == 0
    assert [(m.identifier, m.signed_amount_minor) for m in summary.bank_missing_in_system["bank_a"]] == [
        ("ONLY-A", 12345)
    ]
    assert summary.system_missing_in_bank == ()
    assert summary.total_unmatched == 1
    assert summary.total_processed == 3


def test_debit_discrepancy():
    internal = [make_internal("S3", 50000, Direction.DEBIT)]
    batches = [make_batch("bank_bca", ("S3", -49500))]

    summary = reconcile(internal, batches)

    assert summary.total_matched == 1
    (diff,) = summary.matched_with_discrepancies
    assert diff.identifier == "S3"
    assert diff.system_signed_minor == -50000
    assert diff.external_signed_minor == -49500
    assert diff.abs_diff_minor == 500
    assert diff.source_name == "bank_bca"
    assert summary.total_amount_discrepancy_minor == 500


def test_sign_handling_and_grouping():
    internal = [
        make_internal("SAME-1", 10000, Direction.CREDIT),
        make_internal("SAME-2", 25000, Direction.DEBIT),
    ]
    batches = [
        make_batch("bank_a", ("SAME-1", 10000), ("ONLY-A", 12345)),
        make_batch("bank_b", ("SAME-2", -25000), ("ONLY-B", -1)),
    ]

    summary = reconcile(internal, batches)

    assert summary.total_matched == 2
    assert summary.total_amount_discrepancy_minor == 0
    assert len(summary.bank_missing_in_system["bank_a"]) == 1
    assert len(summary.bank_missing_in_system["bank_b"]) == 1
    assert summary.system_missing_in_bank == ()


def test_missing_from_external_keeps_stored_magnitude():
    internal = [make_internal("S4", 7525, Direction.DEBIT)]

    summary = reconcile(internal, [make_batch("bank_a")])

    assert summary.system_missing_in_bank == (
        MissingFromExternal(identifier="S4", magnitude_minor=7525, direction=Direction.DEBIT),
    )
    assert summary.total_unmatched == 1
    assert dict(summary.bank_missing_in_system) == {}


def test_duplicates_across_batches():
    internal = [make_internal("X", 100)]
    batches = [make_batch("bank_a", ("X", 100)), make_batch("bank_b", ("X", 700))]

    summary = reconcile(internal, batches)

    assert summary.total_processed == 3
    assert summary.total_matched == 1
    assert summary.matched_with_discrepancies == ()
    assert summary.notes == ("duplicate bank IDs detected: X in banks=[bank_a, bank_b]",)
    assert summary.duplicates[0].source_names == ("bank_a", "bank_b")


def test_duplicate_only_in_bank_is_reported_once_as_missing():
    batches = [make_batch("bank_a", ("DUP-100", 4200), ("DUP-100", 4200))]

    summary = reconcile([], batches)

    assert summary.total_processed == 2
    assert summary.total_unmatched == 1
    assert [m.identifier for m in summary.bank_missing_in_system["bank_a"]] == ["DUP-100"]
    assert "DUP-100 in banks=[bank_a]" in summary.notes[0]


def test_no_notes_without_duplicates():
    summary = reconcile([make_internal("A", 1)], [make_batch("bank_a", ("A", 1))])

    assert summary.notes == ()
    assert not summary.has_issues()


def test_completeness_over_distinct_identifiers():
    internal = [make_internal(i, 100) for i in ("A", "B", "C", "D")]
    batches = [
        make_batch("bank_b", ("C", 100), ("E", 1), ("A", 90)),
        make_batch("bank_a", ("F", 5), ("C", 100), ("B", 100)),
    ]

    summary = reconcile(internal, batches)

    distinct = {"A", "B", "C", "D", "E", "F"}
    assert summary.total_matched + summary.total_unmatched == len(distinct)
    assert summary.total_processed == 10


def test_lists_sorted_by_identifier():
    internal = [make_internal(i, 100) for i in ("m", "b", "z", "a")]
    batches = [
        make_batch("bank_b", ("z", 1), ("y", 1), ("m", 2)),
        make_batch("bank_a", ("x", 1), ("c", 1)),
    ]

    summary = reconcile(internal, batches)

    assert [d.identifier for d in summary.matched_with_discrepancies] == ["m", "z"]
    assert [m.identifier for m in summary.system_missing_in_bank] == ["a", "b"]
    assert list(summary.bank_missing_in_system) == ["bank_a", "bank_b"]
    assert [m.identifier for m in summary.bank_missing_in_system["bank_a"]] == ["c", "x"]


def test_output_independent_of_input_order():
    internal = [make_internal(i, 100) for i in ("A", "B", "C")]
    batches = [make_batch("bank_a", ("C", 90), ("Q", 1)), make_batch("bank_b", ("R", 2), ("A", 100))]

    first = render_json(reconcile(internal, batches))
    again = render_json(reconcile(internal, batches))
    shuffled = render_json(
        reconcile(
            list(reversed(internal)),
            [
                make_batch("bank_b", ("A", 100), ("R", 2)),
                make_batch("bank_a", ("Q", 1), ("C", 90)),
            ],
        )
    )

    assert first == again == shuffled


def test_internal_duplicates_keep_first_occurrence():
    internal = [make_internal("A", 100), make_internal("A", 999)]

    summary = reconcile(internal, [make_batch("bank_a", ("A", 100))])

    assert summary.total_processed == 3
    assert summary.total_matched == 1
    assert summary.matched_with_discrepancies == ()
    assert summary.notes == ()


def test_invalid_records_never_reach_matching():
    with pytest.raises(UnknownTransactionType):
        InternalRecord(identifier="A", magnitude_minor=1, direction="TRANSFER", timestamp=datetime(2024, 1, 1))
    with pytest.raises(MalformedRecord):
        InternalRecord(identifier="", magnitude_minor=1, direction=Direction.DEBIT, timestamp=datetime(2024, 1, 1))


def test_external_record_date_must_be_calendar_day():
    record = ExternalRecord(identifier="A", signed_amount_minor=1, date=datetime(2024, 1, 2), source_name="b")
    assert record.date == date(2024, 1, 2)
    assert type(record.date) is date
    with pytest.raises(MalformedRecord):
        ExternalRecord(identifier="A", signed_amount_minor=1, date=datetime(2024, 1, 2, 10, 30), source_name="b")


def test_batch_rejects_foreign_source_name():
    record = ExternalRecord(identifier="A", signed_amount_minor=1, date=date(2024, 1, 1), source_name="bank_b")
    with pytest.raises(MalformedRecord):
        ExternalBatch(source_name="bank_a", records=[record])
