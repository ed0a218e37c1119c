"""Report generators for closures and their audit diffs."""
from __future__ import annotations

import csv
import html
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from closure_checker.config import SETTINGS
from closure_checker.domain.models import FIELD_LABELS, CanonicalClosure, DiffEntry
from closure_checker.domain.parsing import round_currency
from closure_checker.domain.services import build_closure_response


def format_currency(value: Decimal | int | float | None) -> str:
    """``Decimal("1234.5")`` -> ``"R$ 1.234,50"``."""
    amount = round_currency(value or 0)
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{SETTINGS.currency_symbol} {text}"


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format_currency(value)
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return str(value)


CLOSURE_COLUMNS = ("date", "employee", "system_total", "drawer_cash_expected", "counted_cash", "cash_variance", "notes")
DIFF_COLUMNS = ("field", "label", "before", "after")


def closures_to_rows(closures: Iterable[CanonicalClosure]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for closure in closures:
        response = build_closure_response(closure)
        rows.append(
            {
                "date": format_value(response["operation_date"]),
                "employee": response["employee_name"] or "",
                "system_total": format_currency(response["system_total"]),
                "drawer_cash_expected": format_currency(response["drawer_cash_expected"]),
                "counted_cash": format_currency(response["counted_cash_amount"]),
                "cash_variance": format_currency(response["cash_variance"]),
                "notes": response["notes"] or "",
            }
        )
    return rows


def diff_to_rows(changes: Mapping[str, DiffEntry]) -> list[dict[str, str]]:
    return [
        {
            "field": name,
            "label": FIELD_LABELS.get(name, name),
            "before": format_value(entry.before),
            "after": format_value(entry.after),
        }
        for name, entry in changes.items()
    ]


def render_csv(rows: Sequence[dict[str, str]], fieldnames: Sequence[str] | None = None) -> bytes:
    """Columns follow ``fieldnames``, or the first row's keys when omitted."""
    buffer = io.StringIO()
    if fieldnames is None:
        fieldnames = list(rows[0].keys()) if rows else []
    writer = csv.DictWriter(buffer, fieldnames=list(fieldnames))
    if fieldnames:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(changes: Mapping[str, DiffEntry]) -> str:
    rows = diff_to_rows(changes)
    if not rows:
        return "<p>No changes detected.</p>"
    header = "".join(f"<th>{col}</th>" for col in DIFF_COLUMNS)
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{html.escape(row[col])}</td>" for col in DIFF_COLUMNS) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"
