"""Report renderers for reconciliation summaries."""
from __future__ import annotations

import csv
import html
import io
import json
from typing import Any

from recon_checker.domain.money import format_minor
from recon_checker.domain.results import Summary


def summary_to_dict(summary: Summary) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "totalProcessed": summary.total_processed,
        "totalMatched": summary.total_matched,
        "totalUnmatched": summary.total_unmatched,
        "totalAmountDiscrepancyMinor": summary.total_amount_discrepancy_minor,
        "systemMissingInBank": [
            {
                "trxID": item.identifier,
                "amountMinor": item.magnitude_minor,
                "type": item.direction.value,
            }
            for item in summary.system_missing_in_bank
        ],
        "bankMissingInSystem": {
            source_name: [
                {
                    "unique_identifier": item.identifier,
                    "amountMinor": item.signed_amount_minor,
                    "bank": item.source_name,
                }
                for item in summary.bank_missing_in_system[source_name]
            ]
            for source_name in sorted(summary.bank_missing_in_system)
        },
        "matchedWithDiscrepancies": [
            {
                "id": item.identifier,
                "systemAmountMinor": item.system_signed_minor,
                "bankAmountMinor": item.external_signed_minor,
                "absDiffMinor": item.abs_diff_minor,
                "bank": item.source_name,
            }
            for item in summary.matched_with_discrepancies
        ],
    }
    if summary.notes:
        payload["notes"] = list(summary.notes)
    return payload


def render_json(summary: Summary) -> str:
    return json.dumps(summary_to_dict(summary), indent=2, ensure_ascii=False) + "\n"


def render_text(summary: Summary) -> str:
    lines = [
        f"Total processed: {summary.total_processed}",
        f"Total matched: {summary.total_matched}",
        f"Total unmatched: {summary.total_unmatched}",
        f"Total amount discrepancy (minor): {summary.total_amount_discrepancy_minor}",
    ]
    if summary.matched_with_discrepancies:
        lines += ["", "Matched with amount differences:"]
        for item in summary.matched_with_discrepancies:
            lines.append(
                f"- {item.identifier} (bank={item.source_name}): system={item.system_signed_minor} "
                f"bank={item.external_signed_minor} diff={item.abs_diff_minor}"
            )
    if summary.system_missing_in_bank:
        lines += ["", "System missing in bank:"]
        for item in summary.system_missing_in_bank:
            lines.append(f"- {item.identifier} ({item.direction.value}) amountMinor={item.magnitude_minor}")
    if summary.bank_missing_in_system:
        lines += ["", "Bank missing in system:"]
        for source_name in sorted(summary.bank_missing_in_system):
            lines.append(f"  [{source_name}]")
            for item in summary.bank_missing_in_system[source_name]:
                lines.append(f"  - {item.identifier} amountMinor={item.signed_amount_minor}")
    if summary.notes:
        lines += ["", "Notes:"]
        lines += [f"- {note}" for note in summary.notes]
    return "\n".join(lines) + "\n"


def discrepancies_to_rows(summary: Summary) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for item in summary.matched_with_discrepancies:
        rows.append(
            {
                "id": item.identifier,
                "issue_type": "amount_mismatch",
                "bank": item.source_name,
                "system_amount": format_minor(item.system_signed_minor),
                "bank_amount": format_minor(item.external_signed_minor),
                "abs_diff": format_minor(item.abs_diff_minor),
            }
        )
    for item in summary.system_missing_in_bank:
        rows.append(
            {
                "id": item.identifier,
                "issue_type": "missing_in_bank",
                "bank": "",
                "system_amount": format_minor(item.direction.signed_amount(item.magnitude_minor)),
                "bank_amount": "",
                "abs_diff": "",
            }
        )
    for item in summary.iter_bank_missing():
        rows.append(
            {
                "id": item.identifier,
                "issue_type": "missing_in_system",
                "bank": item.source_name,
                "system_amount": "",
                "bank_amount": format_minor(item.signed_amount_minor),
                "abs_diff": "",
            }
        )
    return rows


def render_csv(summary: Summary) -> bytes:
    rows = discrepancies_to_rows(summary)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(summary: Summary) -> str:
    rows = discrepancies_to_rows(summary)
    if not rows:
        return "<p>No discrepancies detected.</p>"
    header = "".join(f"<th>{col}</th>" for col in rows[0].keys())
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{html.escape(value)}</td>" for value in row.values()) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"
