"""Streamlit front-end for the reconciliation pipeline."""
from __future__ import annotations

from datetime import date
from typing import Sequence

import pandas as pd
import streamlit as st

from recon_checker import (
    BankStatementRepository,
    ReconcileUseCase,
    ReconciliationContext,
    ReconciliationError,
    Reconciler,
    SystemLedgerRepository,
)
from recon_checker.application.dto import DateWindow, ReconciliationResponse
from recon_checker.domain.models import ExternalBatch, InternalRecord
from recon_checker.domain.results import Summary
from recon_checker.presentation.summary_report import (
    discrepancies_to_rows,
    render_csv,
    render_html,
    render_json,
)


st.set_page_config(page_title="Bank Reconciliation", layout="wide")
st.title("Bank Reconciliation Tool")


def internal_to_dataframe(records: Sequence[InternalRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "trxID": r.identifier,
                "amountMinor": r.magnitude_minor,
                "type": r.direction.value,
                "signedMinor": r.canonical_amount(),
                "transactionTime": r.timestamp.isoformat(),
            }
            for r in records
        ]
    )


def batches_to_dataframe(batches: Sequence[ExternalBatch]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "bank": r.source_name,
                "unique_identifier": r.identifier,
                "amountMinor": r.signed_amount_minor,
                "date": r.date.isoformat(),
            }
            for batch in batches
            for r in batch
        ]
    )


def run_reconciliation(system_file, bank_files, start: date, end: date) -> ReconciliationResponse:
    context = ReconciliationContext(
        internal_repository=SystemLedgerRepository(system_file.getvalue(), name=system_file.name),
        external_repositories=[
            BankStatementRepository(bank_file.getvalue(), name=bank_file.name) for bank_file in bank_files
        ],
        reconciler=Reconciler(),
        window=DateWindow(start=start, end=end),
    )
    return ReconcileUseCase(context).execute()


if "view" not in st.session_state:
    st.session_state["view"] = "reconcile"
if "result" not in st.session_state:
    st.session_state["result"] = None


if st.session_state["view"] == "reconcile":
    col1, col2 = st.columns(2)
    with col1:
        system_file = st.file_uploader("Upload system transactions", type=["csv", "xlsx"])
    with col2:
        bank_files = st.file_uploader("Upload bank statements", type=["csv", "xlsx"], accept_multiple_files=True)

    col3, col4 = st.columns(2)
    with col3:
        start = st.date_input("Start date", key="start_date")
    with col4:
        end = st.date_input("End date", key="end_date")

    run_btn = st.button("Run Reconciliation", disabled=not (system_file and bank_files))
    if run_btn and system_file and bank_files:
        if end < start:
            st.error("End date must be on or after start date")
        else:
            try:
                with st.spinner("Reconciling..."):
                    response = run_reconciliation(system_file, bank_files, start, end)
            except ReconciliationError as exc:
                st.error(f"Reconciliation aborted: {exc}")
            else:
                st.session_state["result"] = {
                    "response": response,
                    "json": render_json(response.summary),
                    "diff_csv": render_csv(response.summary),
                    "diff_html": render_html(response.summary),
                }
                st.session_state["view"] = "results"
                st.rerun()
else:
    back_clicked = st.button("← Back", key="back_to_reconcile")
    if back_clicked:
        st.session_state["view"] = "reconcile"
        st.session_state["result"] = None
        st.rerun()

    result = st.session_state.get("result")
    if not result:
        st.info("No results available. Upload files and run reconciliation first.")
    else:
        response: ReconciliationResponse = result["response"]
        summary: Summary = response.summary

        st.subheader("Summary")
        metric_cols = st.columns(4)
        metric_cols[0].metric("Processed", summary.total_processed)
        metric_cols[1].metric("Matched", summary.total_matched)
        metric_cols[2].metric("Unmatched", summary.total_unmatched)
        metric_cols[3].metric("Discrepancy (minor)", summary.total_amount_discrepancy_minor)
        for note in summary.notes:
            st.warning(note)

        tabs = st.tabs(["Diffs", "System", "Bank"])
        with tabs[0]:
            st.dataframe(pd.DataFrame(discrepancies_to_rows(summary)))
            st.download_button(
                "Download summary JSON",
                data=result["json"].encode("utf-8"),
                file_name="recon_summary.json",
                mime="application/json",
            )
            st.download_button(
                "Download diff CSV",
                data=result["diff_csv"],
                file_name="recon_diff.csv",
                mime="text/csv",
            )
            st.download_button(
                "Download diff HTML",
                data=result["diff_html"].encode("utf-8"),
                file_name="recon_diff.html",
                mime="text/html",
            )
        with tabs[1]:
            st.dataframe(internal_to_dataframe(response.internal_records))
        with tabs[2]:
            st.dataframe(batches_to_dataframe(response.external_batches))
