"""Command-line entrypoint for bank reconciliation."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from recon_checker.application.dto import DateWindow
from recon_checker.application.use_cases import ReconcileUseCase, ReconciliationContext
from recon_checker.config import SETTINGS, setup_logging
from recon_checker.domain.errors import ReconciliationError
from recon_checker.domain.services import Reconciler
from recon_checker.infrastructure.repositories.file_repositories import (
    BankStatementRepository,
    SystemLedgerRepository,
)
from recon_checker.presentation.summary_report import render_json, render_text

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile internal transactions against bank statements")
    parser.add_argument("--system", required=True, help="Path to system transactions CSV")
    parser.add_argument(
        "--bank",
        required=True,
        action="append",
        help="Path to bank statement CSV (can be given multiple times)",
    )
    parser.add_argument("--start", required=True, type=_iso_date, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, type=_iso_date, help="End date (YYYY-MM-DD)")
    parser.add_argument("--format", choices=("json", "text"), default="json", help="Report format")
    parser.add_argument("--output", type=Path, help="Write the report here instead of stdout")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        default=SETTINGS.log_level,
        help="Logging level (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    if args.end < args.start:
        parser.error("end date must be on/after start date")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.log_level)

    try:
        context = ReconciliationContext(
            internal_repository=SystemLedgerRepository(Path(args.system)),
            external_repositories=[BankStatementRepository(Path(path)) for path in args.bank],
            reconciler=Reconciler(),
            window=DateWindow(start=args.start, end=args.end),
        )
        response = ReconcileUseCase(context).execute()
    except OSError as exc:
        logger.error("Cannot read input: %s", exc)
        return 1
    except ReconciliationError as exc:
        logger.error("Reconciliation aborted: %s", exc)
        return 1

    report = render_json(response.summary) if args.format == "json" else render_text(response.summary)
    if args.output:
        args.output.write_text(report, encoding="utf-8")
        logger.info("Report written to %s", args.output)
    else:
        sys.stdout.write(report)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
