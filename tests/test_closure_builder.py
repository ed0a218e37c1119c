from datetime import datetime, timezone
from decimal import Decimal

import pytest

from closure_checker.domain.aliases import LabelNormalizer
from closure_checker.domain.errors import ClosureValidationError
from closure_checker.domain.models import CLOSURE_FIELDS
from closure_checker.domain.services import ClosureBuilder, build_closure

FIXED_NOW = datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)


def make_builder(**kwargs) -> ClosureBuilder:
    return ClosureBuilder(clock=lambda: FIXED_NOW, **kwargs)


def test_system_total_from_spreadsheet_values():
    closure = build_closure(
        {
            "dinheiroSistema": "100,00",
            "creditoSistema": "20",
            "debitoSistema": "30",
            "pagOnline": "10",
            "pix": "5",
        }
    )

    assert closure.system_total == Decimal("165.00")


def test_cash_variance_from_float_and_movements():
    closure = build_closure(
        {
            "abertura": 50,
            "reforco": 10,
            "dinheiroSistema": 100,
            "gastos": 5,
            "valorParaDeposito": 15,
            "totalCaixaDinheiro": 145,
        }
    )

    assert closure.cash_variance == Decimal("-5.00")
    assert closure.counted_cash_amount == Decimal("145.00")


def test_full_submission():
    closure = build_closure(
        {
            "dataOperacao": "2024-02-10",
            "funcionarioNome": "Ana Clara",
            "dinheiroSistema": "100,00",
            "creditoSistema": "20",
            "debitoSistema": "30",
            "pagOnline": "10",
            "pix": "5",
            "totalCaixaDinheiro": "145",
            "abertura": "50",
            "reforco": "10",
            "gastos": "5",
            "valorParaDeposito": "15",
        },
        default_employee_name="Ana Clara",
    )

    assert closure.operation_date == datetime(2024, 2, 10, tzinfo=timezone.utc)
    assert closure.employee_name == "Ana Clara"
    assert closure.system_total == Decimal("165.00")
    assert closure.cash_variance == Decimal("-5.00")


def test_negative_expense_is_reported_with_its_label():
    with pytest.raises(ClosureValidationError) as excinfo:
        build_closure({"gastos": "-10"})

    error = excinfo.value
    assert error.messages == ("Gastos: Valor não pode ser negativo.",)
    assert "Gastos" in str(error)
    assert error.status_code == 400
    assert error.is_client_error


def test_default_employee_name_is_used_when_missing():
    closure = build_closure({"dinheiroSistema": "10"}, default_employee_name="Ana")

    assert closure.employee_name == "Ana"


def test_submitted_employee_name_wins_over_default():
    closure = build_closure({"Funcionário": "  Bruno  "}, default_employee_name="Ana")

    assert closure.employee_name == "Bruno"


def test_every_error_is_collected_in_one_pass():
    with pytest.raises(ClosureValidationError) as excinfo:
        build_closure(
            {
                "dataOperacao": "nope",
                "funcionarioNome": "Al",
                "dinheiroSistema": "abc",
                "pix": "-1",
                "picoles": "muitos",
            }
        )

    messages = excinfo.value.messages
    assert messages == (
        "Data da operação inválida.",
        "Dinheiro do sistema: Valor monetário inválido.",
        "PIX: Valor não pode ser negativo.",
        "Picolés sist: Valor inteiro inválido.",
        "Nome do funcionário deve possuir ao menos 3 caracteres.",
    )
    assert str(excinfo.value) == " ".join(messages)


def test_missing_date_uses_the_clock():
    closure = make_builder().build({})

    assert closure.operation_date == FIXED_NOW
    assert closure.employee_name is None
    assert closure.notes is None
    assert closure.system_total == Decimal("0.00")
    assert closure.cash_variance == Decimal("0.00")


def test_naive_clock_is_read_as_utc():
    builder = ClosureBuilder(clock=lambda: datetime(2024, 3, 1, 12, 0))

    assert builder.build({"data": " "}).operation_date == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_derived_fields_in_raw_input_are_ignored():
    closure = make_builder().build(
        {
            "dinheiro": "10",
            "TOTAL SISTEMA": "999",
            "Variável do caixa": "-999",
            "drawer_cash_expected": "1",
        }
    )

    assert closure.system_total == Decimal("10.00")
    assert closure.cash_variance == Decimal("10.00")


def test_terminal_amounts_and_counts_are_kept_but_not_summed():
    closure = make_builder().build(
        {
            "dinheiro": "10",
            "Crédito (Maq)": "300",
            "Débito (Maq)": "200",
            "Entrega cartão": "2",
            "Picolés sist": "7",
        }
    )

    assert closure.credit_terminal_amount == Decimal("300.00")
    assert closure.debit_terminal_amount == Decimal("200.00")
    assert closure.card_delivery_count == 2
    assert closure.popsicle_system_count == 7
    assert closure.system_total == Decimal("10.00")


def test_unknown_fields_and_notes():
    closure = make_builder().build({"Gorjeta": "5", "Obs": "  troco conferido  "})

    assert closure.notes == "troco conferido"
    assert set(closure.to_dict()) == set(CLOSURE_FIELDS)


def test_builder_uses_custom_aliases():
    builder = make_builder(normalizer=LabelNormalizer({"Sangria": "deposit_amount"}))

    closure = builder.build({"dinheiro": "100", "Sangria": "40"})

    assert closure.deposit_amount == Decimal("40.00")
    assert closure.cash_variance == Decimal("60.00")
