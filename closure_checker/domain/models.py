"""Domain models for till closure reconciliation.

These dataclasses capture the canonical schema for a validated closure and the
per-field entries produced when two closures are compared.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any

MONEY_FIELDS = (
    "cash_system_amount",
    "credit_system_amount",
    "debit_system_amount",
    "credit_terminal_amount",
    "debit_terminal_amount",
    "online_payment_amount",
    "pix_amount",
    "counted_cash_amount",
    "opening_float",
    "reinforcement_amount",
    "expenses_amount",
    "deposit_amount",
)

COUNT_FIELDS = (
    "card_delivery_count",
    "popsicle_system_count",
)

DERIVED_FIELDS = (
    "system_total",
    "cash_variance",
)

# Labels shown to operators in validation messages and reports.
FIELD_LABELS = {
    "operation_date": "Data da operação",
    "employee_name": "Funcionário",
    "cash_system_amount": "Dinheiro do sistema",
    "credit_system_amount": "Crédito (sistema)",
    "debit_system_amount": "Débito (sistema)",
    "credit_terminal_amount": "Crédito (máquina)",
    "debit_terminal_amount": "Débito (máquina)",
    "online_payment_amount": "Pagamentos on-line",
    "pix_amount": "PIX",
    "counted_cash_amount": "Total caixa (dinheiro)",
    "opening_float": "Abertura",
    "reinforcement_amount": "Reforço",
    "expenses_amount": "Gastos",
    "deposit_amount": "Valor para depósito",
    "card_delivery_count": "Entrega cartão",
    "popsicle_system_count": "Picolés sist",
    "notes": "Informações",
    "system_total": "Total sistema",
    "cash_variance": "Variável do caixa",
    "drawer_cash_expected": "Dinheiro em gaveta",
}


@dataclass(frozen=True)
class CanonicalClosure:
    """Validated end-of-shift report with derived totals."""

    operation_date: datetime
    employee_name: str | None
    cash_system_amount: Decimal
    credit_system_amount: Decimal
    debit_system_amount: Decimal
    credit_terminal_amount: Decimal
    debit_terminal_amount: Decimal
    online_payment_amount: Decimal
    pix_amount: Decimal
    counted_cash_amount: Decimal
    opening_float: Decimal
    reinforcement_amount: Decimal
    expenses_amount: Decimal
    deposit_amount: Decimal
    card_delivery_count: int
    popsicle_system_count: int
    notes: str | None
    system_total: Decimal
    cash_variance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


CLOSURE_FIELDS = tuple(f.name for f in fields(CanonicalClosure))
CANONICAL_FIELDS = frozenset(CLOSURE_FIELDS)


@dataclass(frozen=True)
class DiffEntry:
    """Before/after pair for a single field that changed."""

    before: Any
    after: Any

    def to_dict(self) -> dict[str, Any]:
        return {"before": self.before, "after": self.after}
