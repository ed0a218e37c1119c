"""Streamlit front-end for till closure reconciliation."""
from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Sequence

import pandas as pd
import streamlit as st

from closure_checker import ClosureBuilder, LabelNormalizer, ValidateClosuresUseCase, diff_closures
from closure_checker.domain.errors import ClosureValidationError
from closure_checker.domain.results import BatchReport
from closure_checker.infrastructure.parsing.spreadsheet import load_raw_closures
from closure_checker.infrastructure.storage import alias_store
from closure_checker.presentation.diff_report import (
    CLOSURE_COLUMNS,
    closures_to_rows,
    diff_to_rows,
    render_csv,
    render_html,
)


st.set_page_config(page_title="Closure Checker", layout="wide")
st.title("Till Closure Reconciliation")


def load_alias_dataframe() -> pd.DataFrame:
    aliases = alias_store.load_aliases()
    return pd.DataFrame(
        [{"label": label, "field": field} for label, field in sorted(aliases.items())],
        columns=["label", "field"],
    )


def run_validation(
    file_bytes: bytes,
    file_name: str,
    default_employee: str | None,
) -> tuple[BatchReport, Sequence[dict[str, Any]]]:
    normalizer = LabelNormalizer(alias_store.load_aliases())
    raw_closures = load_raw_closures(BytesIO(file_bytes), file_name=file_name, normalizer=normalizer)
    use_case = ValidateClosuresUseCase(ClosureBuilder(normalizer=normalizer))
    return use_case.execute(raw_closures, default_employee_name=default_employee), raw_closures


uploaded = st.file_uploader("Upload closure spreadsheet", type=["csv", "xls", "xlsx", "xlsm"])
default_employee = st.text_input("Default employee name", key="default_employee") or None

with st.expander("Label aliases"):
    alias_df = st.data_editor(
        load_alias_dataframe(),
        num_rows="dynamic",
        hide_index=True,
        key="alias_editor",
        use_container_width=True,
    )
    if st.button("Save aliases", key="save_aliases_btn"):
        cleaned = {
            str(row["label"]).strip(): str(row["field"]).strip()
            for _, row in alias_df.iterrows()
            if str(row["label"]).strip()
        }
        saved = alias_store.save_aliases(cleaned)
        st.success(f"Saved {len(saved)} aliases")

if uploaded is not None:
    report, raw_closures = run_validation(uploaded.getvalue(), uploaded.name, default_employee)

    st.subheader("Summary")
    summary = report.summary
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Closures", summary.total)
    col2.metric("Valid", summary.valid)
    col3.metric("Invalid", summary.invalid)
    col4.metric("With cash variance", summary.with_variance)

    tabs = st.tabs(["Reconciliation", "Errors", "Compare"])
    with tabs[0]:
        rows = closures_to_rows(report.iter_valid())
        st.dataframe(pd.DataFrame(rows))
        st.download_button(
            "Download reconciliation CSV",
            data=render_csv(rows, CLOSURE_COLUMNS),
            file_name="closures.csv",
            mime="text/csv",
        )
    with tabs[1]:
        invalid = [{"row": o.index + 1, "errors": " ".join(o.errors)} for o in report.iter_invalid()]
        if invalid:
            st.dataframe(pd.DataFrame(invalid))
        else:
            st.info("Every closure is valid.")
    with tabs[2]:
        if len(raw_closures) < 2:
            st.info("Upload a sheet with at least two closures to compare them.")
        else:
            options = list(range(1, len(raw_closures) + 1))
            col_a, col_b = st.columns(2)
            before_row = col_a.selectbox("Before", options, index=0)
            after_row = col_b.selectbox("After", options, index=1)
            now = datetime.now(timezone.utc)
            builder = ClosureBuilder(normalizer=LabelNormalizer(alias_store.load_aliases()), clock=lambda: now)
            try:
                before = builder.build(raw_closures[before_row - 1], default_employee_name=default_employee)
                after = builder.build(raw_closures[after_row - 1], default_employee_name=default_employee)
            except ClosureValidationError as exc:
                st.error(str(exc))
            else:
                changes = diff_closures(before, after)
                if changes:
                    st.dataframe(pd.DataFrame(diff_to_rows(changes)))
                else:
                    st.info("No changes detected.")
                st.download_button(
                    "Download diff HTML",
                    data=render_html(changes).encode("utf-8"),
                    file_name="closure_diff.html",
                    mime="text/html",
                )
