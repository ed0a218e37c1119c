"""Locale-tolerant parsing of raw closure values."""
from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from closure_checker.config import SETTINGS

from .errors import FieldValueError

INVALID_MONEY = "Valor monetário inválido."
INVALID_INTEGER = "Valor inteiro inválido."
NEGATIVE_VALUE = "Valor não pode ser negativo."
INVALID_DATE = "Data da operação inválida."


def normalize_number_string(value: str) -> str:
    """Rewrite ``"1.234,56"`` style numbers as ``"1234.56"``.

    With both separators present the dot groups thousands and the comma marks
    decimals; a lone comma is a decimal comma.
    """
    raw = value.strip()
    symbol = SETTINGS.currency_symbol
    if raw.upper().startswith(symbol.upper()):
        raw = raw[len(symbol):]
    raw = raw.replace(" ", "").replace("\u00a0", "")
    if "." in raw and "," in raw:
        return raw.replace(".", "").replace(",", ".", 1)
    if "," in raw:
        return raw.replace(",", ".", 1)
    return raw


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_decimal(value: Any, message: str = INVALID_MONEY) -> Decimal:
    if isinstance(value, bool):
        raise FieldValueError(message)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            number = Decimal(normalize_number_string(value))
        except InvalidOperation as exc:
            raise FieldValueError(message) from exc
    else:
        raise FieldValueError(message)
    if not number.is_finite():
        raise FieldValueError(message)
    return number


def round_currency(value: Decimal | int | float) -> Decimal:
    """Quantize to cents, half away from zero. Rounding a rounded value is a no-op."""
    number = value if isinstance(value, Decimal) else to_decimal(value)
    try:
        return number.quantize(
            SETTINGS.currency_quantum,
            rounding=SETTINGS.rounding,
            context=SETTINGS.decimal_context,
        )
    except InvalidOperation as exc:
        raise FieldValueError(INVALID_MONEY) from exc


def parse_money(value: Any, *, allow_negative: bool = False) -> Decimal:
    if _is_blank(value):
        return round_currency(Decimal(0))
    number = to_decimal(value)
    if not allow_negative and number < 0:
        raise FieldValueError(NEGATIVE_VALUE)
    return round_currency(number)


def parse_integer(value: Any, *, allow_negative: bool = False) -> int:
    """Parse a count; fractional input is truncated toward zero."""
    if _is_blank(value):
        return 0
    amount = to_decimal(value, INVALID_INTEGER)
    if amount.adjusted() >= SETTINGS.decimal_context.prec:
        raise FieldValueError(INVALID_INTEGER)
    number = int(amount)
    if not allow_negative and number < 0:
        raise FieldValueError(NEGATIVE_VALUE)
    return number


def parse_operation_date(
    value: Any,
    *,
    tz: timezone = SETTINGS.timezone,
    formats: tuple[str, ...] = SETTINGS.date_formats,
) -> datetime:
    """Resolve a raw date to an aware ``datetime``.

    Naive values are read in ``tz``. Numbers are epoch milliseconds.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=tz)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and not math.isfinite(value):
            raise FieldValueError(INVALID_DATE)
        try:
            return datetime.fromtimestamp(value / 1000, tz)
        except (OverflowError, OSError, ValueError) as exc:
            raise FieldValueError(INVALID_DATE) from exc
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None
            for fmt in formats:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is not None:
            return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=tz)
    raise FieldValueError(INVALID_DATE)
