from decimal import Decimal
from types import SimpleNamespace

from closure_checker.domain.parsing import round_currency
from closure_checker.domain.reconciliation import (
    calculate_cash_variance,
    calculate_drawer_cash_expected,
    calculate_system_total,
)
from closure_checker.domain.services import build_closure


def test_system_total_sums_system_channels():
    total = calculate_system_total(
        {
            "cash_system_amount": 120.5,
            "credit_system_amount": 30,
            "debit_system_amount": 49.5,
            "online_payment_amount": 10,
            "pix_amount": 5,
        }
    )

    assert total == Decimal("215.00")


def test_cash_variance_accounts_for_float_reinforcement_expenses_and_deposit():
    variance = calculate_cash_variance(
        {
            "opening_float": 100,
            "reinforcement_amount": 25,
            "cash_system_amount": 80,
            "expenses_amount": 30,
            "deposit_amount": 40,
            "counted_cash_amount": 120,
        }
    )

    assert variance == Decimal("15.00")


def test_missing_fields_count_as_zero():
    assert calculate_system_total({}) == Decimal("0.00")
    assert calculate_drawer_cash_expected({"opening_float": None}) == Decimal("0.00")
    assert calculate_cash_variance({"counted_cash_amount": "12,50"}) == Decimal("-12.50")


def test_system_total_ignores_order_and_settlement_fields():
    base = {
        "pix_amount": Decimal("5.00"),
        "online_payment_amount": Decimal("10.00"),
        "debit_system_amount": Decimal("30.00"),
        "credit_system_amount": Decimal("20.00"),
        "cash_system_amount": Decimal("100.00"),
    }
    reordered = dict(reversed(list(base.items())))
    with_settlement = dict(
        base,
        credit_terminal_amount=Decimal("999.00"),
        debit_terminal_amount=Decimal("888.00"),
        card_delivery_count=4,
        popsicle_system_count=12,
    )

    assert calculate_system_total(base) == Decimal("165.00")
    assert calculate_system_total(reordered) == Decimal("165.00")
    assert calculate_system_total(with_settlement) == Decimal("165.00")


def test_calculators_accept_objects():
    record = SimpleNamespace(cash_system_amount=Decimal("1.10"), opening_float=Decimal("2.00"))

    assert calculate_system_total(record) == Decimal("1.10")
    assert calculate_drawer_cash_expected(record) == Decimal("3.10")


def test_float_inputs_do_not_leave_residue():
    assert calculate_system_total({"cash_system_amount": 0.1, "credit_system_amount": 0.2}) == Decimal("0.30")


def test_stored_variance_matches_recomputation():
    closure = build_closure(
        {
            "abertura": "50",
            "reforco": "10,55",
            "dinheiroSistema": "100,10",
            "gastos": "5,33",
            "deposito": "15",
            "totalCaixaDinheiro": "139,99",
        }
    )

    expected = calculate_drawer_cash_expected(closure)
    assert expected == Decimal("140.32")
    assert closure.cash_variance == round_currency(expected - closure.counted_cash_amount)
    assert closure.cash_variance == Decimal("0.33")
