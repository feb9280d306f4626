"""Central configuration for the reconciliation package."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo


@dataclass(slots=True, frozen=True)
class Settings:
    timezone: tzinfo
    default_source_name: str
    log_level: str
    log_format: str


SETTINGS = Settings(
    timezone=timezone.utc,
    default_source_name="bank",
    log_level=os.getenv("RECON_LOG_LEVEL", "INFO").upper(),
    log_format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def setup_logging(level: str | None = None) -> int:
    """Configure root logging to stderr and return the numeric level in use."""
    name = (level or SETTINGS.log_level).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric, format=SETTINGS.log_format, force=True)
    return numeric
