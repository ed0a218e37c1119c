"""Reconciliation arithmetic over closure-like records.

Each calculator accepts a mapping or any object exposing the canonical field
names as attributes, so a partially filled form can be previewed without a
full validation pass.  Missing fields count as zero.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from .parsing import round_currency, to_decimal

SYSTEM_TOTAL_FIELDS = (
    "cash_system_amount",
    "credit_system_amount",
    "debit_system_amount",
    "online_payment_amount",
    "pix_amount",
)


def _amount(record: Any, field_name: str) -> Decimal:
    if isinstance(record, Mapping):
        value = record.get(field_name)
    else:
        value = getattr(record, field_name, None)
    if value is None:
        return Decimal(0)
    return to_decimal(value)


def calculate_system_total(record: Any) -> Decimal:
    """Sum of the payment channels reported by the point-of-sale system.

    Terminal card amounts and counts are settled elsewhere and stay out.
    """
    return round_currency(sum((_amount(record, name) for name in SYSTEM_TOTAL_FIELDS), Decimal(0)))


def calculate_drawer_cash_expected(record: Any) -> Decimal:
    """Cash that should be left in the till."""
    return round_currency(
        _amount(record, "opening_float")
        + _amount(record, "reinforcement_amount")
        + _amount(record, "cash_system_amount")
        - _amount(record, "expenses_amount")
        - _amount(record, "deposit_amount")
    )


def calculate_cash_variance(record: Any) -> Decimal:
    """Expected minus counted cash; positive is a shortage, negative a surplus."""
    expected = calculate_drawer_cash_expected(record)
    return round_currency(expected - _amount(record, "counted_cash_amount"))
