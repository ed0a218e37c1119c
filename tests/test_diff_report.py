from datetime import datetime, timezone
from decimal import Decimal

from closure_checker.domain.models import DiffEntry
from closure_checker.domain.services import build_closure
from closure_checker.presentation.diff_report import (
    CLOSURE_COLUMNS,
    DIFF_COLUMNS,
    closures_to_rows,
    diff_to_rows,
    format_currency,
    render_csv,
    render_html,
)


def test_format_currency():
    assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_currency(Decimal("-5")) == "-R$ 5,00"
    assert format_currency(None) == "R$ 0,00"
    assert format_currency(1000000) == "R$ 1.000.000,00"


def test_diff_rows_use_labels_and_formatting():
    changes = {
        "operation_date": DiffEntry(
            before=datetime(2024, 2, 10, tzinfo=timezone.utc),
            after=datetime(2024, 2, 11, 9, 30, tzinfo=timezone.utc),
        ),
        "pix_amount": DiffEntry(before=Decimal("5.00"), after=Decimal("7.50")),
        "notes": DiffEntry(before=None, after="ok"),
    }

    rows = diff_to_rows(changes)

    assert rows == [
        {"field": "operation_date", "label": "Data da operação", "before": "10/02/2024 00:00", "after": "11/02/2024 09:30"},
        {"field": "pix_amount", "label": "PIX", "before": "R$ 5,00", "after": "R$ 7,50"},
        {"field": "notes", "label": "Informações", "before": "", "after": "ok"},
    ]


def test_closure_rows_include_drawer_cash_expected():
    closure = build_closure({"data": "2024-02-10", "abertura": "50", "dinheiro": "100", "totalCaixaDinheiro": "145"})

    rows = closures_to_rows([closure])

    assert rows[0]["drawer_cash_expected"] == "R$ 150,00"
    assert rows[0]["cash_variance"] == "R$ 5,00"
    assert rows[0]["date"] == "10/02/2024 00:00"


def test_render_csv_and_html():
    assert render_csv([]) == b""
    assert render_html({}) == "<p>No changes detected.</p>"

    html = render_html({"notes": DiffEntry(before=None, after="<b>sobra</b>")})
    assert "&lt;b&gt;sobra&lt;/b&gt;" in html
    assert "<th>label</th>" in html

    csv_bytes = render_csv(diff_to_rows({"pix_amount": DiffEntry(before=Decimal("1"), after=Decimal("2"))}))
    assert csv_bytes.decode("utf-8").splitlines()[0] == "field,label,before,after"


def test_render_csv_follows_given_columns():
    rows = diff_to_rows({"pix_amount": DiffEntry(before=Decimal("1"), after=Decimal("2"))})

    reordered = render_csv(rows, ("after", "before", "field", "label")).decode("utf-8").splitlines()
    assert reordered == ["after,before,field,label", '"R$ 2,00","R$ 1,00",pix_amount,PIX']

    assert render_csv([], DIFF_COLUMNS).decode("utf-8").splitlines() == ["field,label,before,after"]

    closure = build_closure({"data": "2024-02-10", "dinheiro": "10"})
    header = render_csv(closures_to_rows([closure]), CLOSURE_COLUMNS).decode("utf-8").splitlines()[0]
    assert header == ",".join(CLOSURE_COLUMNS)
