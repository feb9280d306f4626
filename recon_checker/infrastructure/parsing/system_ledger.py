"""Internal ledger parser producing canonical internal records."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd

from recon_checker.domain.errors import MalformedRecord, ReconciliationError
from recon_checker.domain.models import Direction, InternalRecord
from recon_checker.domain.money import normalize_amount
from recon_checker.infrastructure.parsing.utils import (
    ensure_bytes,
    is_excel,
    parse_timestamp,
    read_table,
    resolve_columns,
)

logger = logging.getLogger(__name__)

SYSTEM_COLUMNS = {
    "identifier": ("trxID", "identifier"),
    "amount": ("amount",),
    "direction": ("type", "direction"),
    "timestamp": ("transactionTime", "timestamp"),
}


def frame_to_internal_records(df: pd.DataFrame, label: str = "system") -> list[InternalRecord]:
    columns = resolve_columns(df, SYSTEM_COLUMNS, label)
    records: list[InternalRecord] = []
    for position, (_, row) in enumerate(df.iterrows()):
        line = position + 2
        identifier = str(row.get(columns["identifier"], "")).strip()
        if not identifier:
            raise MalformedRecord(f"{label} line {line}: empty {columns['identifier']}")
        context = f"{label} line {line} trxID={identifier}"
        try:
            magnitude = normalize_amount(row.get(columns["amount"]))
            direction = Direction.parse(row.get(columns["direction"]))
        except ReconciliationError as exc:
            raise type(exc)(f"{context}: {exc}") from exc
        try:
            timestamp = parse_timestamp(row.get(columns["timestamp"]))
        except ValueError as exc:
            raise MalformedRecord(f"{context}: {exc}") from exc
        records.append(
            InternalRecord(
                identifier=identifier,
                magnitude_minor=magnitude,
                direction=direction,
                timestamp=timestamp,
            )
        )
    return records


def system_to_records(
    source: BytesIO | Path | str | bytes,
    name: str | Path | None = None,
) -> Sequence[InternalRecord]:
    if name is None and isinstance(source, (Path, str)):
        name = source
    raw_bytes = ensure_bytes(source)
    label = Path(str(name)).name if name is not None else "system"
    frame = read_table(raw_bytes, excel=is_excel(name), label=label)
    records = frame_to_internal_records(frame, label=label)
    logger.info("Loaded %d internal records from %s", len(records), label)
    return records
