"""Bank statement parser producing one external batch per file."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import pandas as pd

from recon_checker.domain.errors import InvalidAmountFormat, MalformedRecord
from recon_checker.domain.models import ExternalBatch, ExternalRecord
from recon_checker.domain.money import normalize_amount
from recon_checker.infrastructure.parsing.utils import (
    ensure_bytes,
    is_excel,
    parse_calendar_date,
    read_table,
    resolve_columns,
    source_name_from_path,
)

logger = logging.getLogger(__name__)

BANK_COLUMNS = {
    "identifier": ("unique_identifier", "identifier"),
    "amount": ("amount",),
    "date": ("date",),
}


def frame_to_batch(df: pd.DataFrame, source_name: str) -> ExternalBatch:
    columns = resolve_columns(df, BANK_COLUMNS, source_name)
    rows: list[ExternalRecord] = []
    for position, (_, row) in enumerate(df.iterrows()):
        line = position + 2
        identifier = str(row.get(columns["identifier"], "")).strip()
        if not identifier:
            raise MalformedRecord(f"{source_name} line {line}: empty {columns['identifier']}")
        context = f"{source_name} line {line} uid={identifier}"
        try:
            amount = normalize_amount(row.get(columns["amount"]))
        except InvalidAmountFormat as exc:
            raise InvalidAmountFormat(f"{context}: {exc}") from exc
        try:
            statement_date = parse_calendar_date(row.get(columns["date"]))
        except ValueError as exc:
            raise MalformedRecord(f"{context}: {exc}") from exc
        rows.append(
            ExternalRecord(
                identifier=identifier,
                signed_amount_minor=amount,
                date=statement_date,
                source_name=source_name,
            )
        )
    return ExternalBatch(source_name=source_name, records=rows)


def bank_to_batch(
    source: BytesIO | Path | str | bytes,
    source_name: str | None = None,
    name: str | Path | None = None,
) -> ExternalBatch:
    if name is None and isinstance(source, (Path, str)):
        name = source
    source_name = source_name or source_name_from_path(name)
    raw_bytes = ensure_bytes(source)
    frame = read_table(raw_bytes, excel=is_excel(name), label=source_name)
    batch = frame_to_batch(frame, source_name)
    logger.info("Loaded %d bank rows for %s", len(batch), source_name)
    return batch
