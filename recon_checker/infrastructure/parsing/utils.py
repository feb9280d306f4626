"""Shared parsing utilities for tabular ingestion."""
from __future__ import annotations

import re
from datetime import date, datetime
from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd

from recon_checker.config import SETTINGS
from recon_checker.domain.errors import MalformedRecord

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}

_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")
_CALENDAR_DATE = re.compile(r"\d{4}-\d{2}-\d{2}(?:[ T]00:00:00)?")


def ensure_bytes(source: BytesIO | Path | str | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, (Path, str)):
        return Path(source).read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def is_excel(name: str | Path | None) -> bool:
    return name is not None and Path(str(name)).suffix.lower() in EXCEL_SUFFIXES


def read_table(data: bytes, excel: bool = False, label: str = "input") -> pd.DataFrame:
    """Load every cell as text; blank cells stay empty strings."""
    try:
        if excel:
            frame = pd.read_excel(BytesIO(data), sheet_name=0, engine="openpyxl", dtype=str, keep_default_na=False)
        else:
            frame = pd.read_csv(BytesIO(data), dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise MalformedRecord(f"{label}: unreadable table: {exc}") from exc
    frame.columns = [str(col).strip() for col in frame.columns]
    return frame


def resolve_columns(
    frame: pd.DataFrame,
    required: dict[str, Sequence[str]],
    label: str,
) -> dict[str, str]:
    """Map each canonical field to the first header alias present."""
    resolved: dict[str, str] = {}
    missing: list[str] = []
    for name, aliases in required.items():
        found = next((alias for alias in aliases if alias in frame.columns), None)
        if found is None:
            missing.append(name)
        else:
            resolved[name] = found
    if missing:
        raise MalformedRecord(f"{label}: missing column(s): {', '.join(missing)}")
    return resolved


def parse_timestamp(value: object) -> datetime:
    text = "" if value is None else str(value).strip()
    if not _DATE_PREFIX.match(text):
        raise ValueError(f"invalid timestamp: {text!r}")
    try:
        parsed = pd.to_datetime(text, format="ISO8601")
    except ValueError:
        raise ValueError(f"invalid timestamp: {text!r}") from None
    result = parsed.to_pydatetime()
    if result.tzinfo is None:
        result = result.replace(tzinfo=SETTINGS.timezone)
    return result


def parse_calendar_date(value: object) -> date:
    """Read a statement day; spreadsheet cells may carry a midnight time."""
    text = "" if value is None else str(value).strip()
    if not _CALENDAR_DATE.fullmatch(text):
        raise ValueError(f"invalid date: {text!r}")
    try:
        return pd.to_datetime(text[:10], format="%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"invalid date: {text!r}") from None


def source_name_from_path(path: str | Path | None) -> str:
    if path is None:
        return SETTINGS.default_source_name
    name = Path(str(path)).name
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return stem or SETTINGS.default_source_name
