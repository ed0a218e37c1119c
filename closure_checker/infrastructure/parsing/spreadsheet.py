"""Spreadsheet reader producing raw closure submissions."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any

import pandas as pd

from closure_checker.domain.aliases import DEFAULT_NORMALIZER, LabelNormalizer
from closure_checker.domain.models import CANONICAL_FIELDS

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Fechamento"
LAYOUTS = ("auto", "rows", "form")


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def _excel_engine(file_name: str) -> str:
    return "xlrd" if file_name.lower().endswith(".xls") else "openpyxl"


def _csv_separator(raw_bytes: bytes) -> str:
    # pt-BR exports use ";" so that decimal commas survive.
    first_line = raw_bytes.decode("utf-8-sig", errors="replace").splitlines()[:1]
    return ";" if first_line and ";" in first_line[0] else ","


def _pick_sheet(sheets: list[str], preferred: str) -> str:
    if not sheets:
        raise ValueError("Workbook has no sheets")
    if preferred in sheets:
        return preferred
    lower_map = {name.lower(): name for name in sheets}
    if preferred.lower() in lower_map:
        return lower_map[preferred.lower()]
    for name in sheets:
        if preferred.lower() in name.lower():
            return name
    return sheets[0]


def read_sheet(source: BytesIO | Path | bytes, *, file_name: str, sheet_name: str | None = None) -> pd.DataFrame:
    """Load a CSV or Excel export with every cell kept as text."""
    raw_bytes = ensure_bytes(source)
    if file_name.lower().endswith(".csv"):
        return pd.read_csv(
            BytesIO(raw_bytes),
            sep=_csv_separator(raw_bytes),
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
        )
    engine = _excel_engine(file_name)
    xls = pd.ExcelFile(BytesIO(raw_bytes), engine=engine)
    chosen = _pick_sheet(list(xls.sheet_names), sheet_name or DEFAULT_SHEET_NAME)
    logger.debug("Reading sheet %r from %s", chosen, file_name)
    return pd.read_excel(xls, sheet_name=chosen, dtype=str, keep_default_na=False)


def _cell(value: Any) -> Any:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def detect_layout(df: pd.DataFrame, normalizer: LabelNormalizer = DEFAULT_NORMALIZER) -> str:
    """``form`` for a two-column label/value sheet, ``rows`` otherwise."""
    recognized = {normalizer.canonical_field(col) for col in df.columns} & CANONICAL_FIELDS
    if len(df.columns) == 2 and len(recognized) < 2:
        return "form"
    return "rows"


def rows_to_closures(df: pd.DataFrame) -> list[dict[str, Any]]:
    closures: list[dict[str, Any]] = []
    for idx, row in df.iterrows():
        record = {str(col): _cell(row[col]) for col in df.columns}
        if all(value is None for value in record.values()):
            logger.debug("Skipping empty row %s", idx)
            continue
        closures.append(record)
    return closures


def _is_placeholder(column: Any) -> bool:
    # pandas names blank header cells "Unnamed: N".
    return str(column).startswith("Unnamed")


def form_to_closure(df: pd.DataFrame) -> dict[str, Any]:
    label_col, value_col = df.columns[0], df.columns[1]
    # The header row of a form sheet is itself a label/value pair.
    record: dict[str, Any] = {}
    header_label = _cell(label_col)
    if header_label and not _is_placeholder(label_col):
        record[header_label] = None if _is_placeholder(value_col) else _cell(value_col)
    for _, row in df.iterrows():
        label = _cell(row[label_col])
        if label is None:
            continue
        record[label] = _cell(row[value_col])
    return record


def load_raw_closures(
    source: BytesIO | Path | bytes,
    *,
    file_name: str | None = None,
    sheet_name: str | None = None,
    layout: str = "auto",
    normalizer: LabelNormalizer = DEFAULT_NORMALIZER,
) -> list[dict[str, Any]]:
    if layout not in LAYOUTS:
        raise ValueError(f"Unknown layout {layout!r}; expected one of {', '.join(LAYOUTS)}")
    if file_name is None:
        if not isinstance(source, Path):
            raise ValueError("file_name is required when reading from memory")
        file_name = source.name

    df = read_sheet(source, file_name=file_name, sheet_name=sheet_name)
    if layout == "auto":
        layout = detect_layout(df, normalizer)
    logger.info("Loaded %s rows from %s using %s layout", len(df), file_name, layout)

    if layout == "form":
        if len(df.columns) < 2:
            raise ValueError("Form layout needs a label column and a value column")
        return [form_to_closure(df)]
    return rows_to_closures(df)
