"""Domain services building, comparing and presenting closures."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from closure_checker.config import SETTINGS, Settings

from .aliases import DEFAULT_NORMALIZER, LabelNormalizer
from .errors import ClosureValidationError, FieldValueError
from .models import (
    CLOSURE_FIELDS,
    COUNT_FIELDS,
    FIELD_LABELS,
    MONEY_FIELDS,
    CanonicalClosure,
    DiffEntry,
)
from .parsing import parse_integer, parse_money, parse_operation_date
from .reconciliation import (
    calculate_cash_variance,
    calculate_drawer_cash_expected,
    calculate_system_total,
)

SHORT_EMPLOYEE_NAME = "Nome do funcionário deve possuir ao menos {min_length} caracteres."

TRACKED_FIELDS = CLOSURE_FIELDS
DATE_FIELDS = frozenset({"operation_date"})


def _clean_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class ClosureBuilder:
    """Turns a raw submission into a :class:`CanonicalClosure` or fails with every problem found."""

    def __init__(
        self,
        settings: Settings = SETTINGS,
        normalizer: LabelNormalizer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings
        self._normalizer = normalizer or DEFAULT_NORMALIZER
        self._clock = clock or (lambda: datetime.now(settings.timezone))

    def build(
        self,
        raw_input: Mapping[str, Any],
        default_employee_name: str | None = None,
    ) -> CanonicalClosure:
        payload = self._normalizer.normalize(raw_input)
        errors: list[str] = []

        def parse_field(parser: Callable[[Any], Any], field_name: str) -> Any:
            try:
                return parser(payload.get(field_name))
            except FieldValueError as exc:
                errors.append(f"{FIELD_LABELS[field_name]}: {exc}")
                return parser(None)

        operation_date = self._parse_date(payload.get("operation_date"), errors)

        employee_name = _clean_text(payload.get("employee_name")) or _clean_text(default_employee_name) or None

        amounts = {name: parse_field(parse_money, name) for name in MONEY_FIELDS}
        counts = {name: parse_field(parse_integer, name) for name in COUNT_FIELDS}

        min_length = self._settings.min_employee_name_length
        if employee_name and len(employee_name) < min_length:
            errors.append(SHORT_EMPLOYEE_NAME.format(min_length=min_length))

        system_total = calculate_system_total(amounts)
        cash_variance = calculate_cash_variance(amounts)

        if errors:
            raise ClosureValidationError(errors)

        return CanonicalClosure(
            operation_date=operation_date,
            employee_name=employee_name,
            notes=_clean_text(payload.get("notes")) or None,
            system_total=system_total,
            cash_variance=cash_variance,
            **amounts,
            **counts,
        )

    def _parse_date(self, value: Any, errors: list[str]) -> datetime | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            now = self._clock()
            return now if now.tzinfo is not None else now.replace(tzinfo=self._settings.timezone)
        try:
            return parse_operation_date(
                value,
                tz=self._settings.timezone,
                formats=self._settings.date_formats,
            )
        except FieldValueError as exc:
            errors.append(str(exc))
            return None


def _record_values(record: Any) -> dict[str, Any]:
    if record is None:
        return {}
    if isinstance(record, CanonicalClosure):
        return record.to_dict()
    if isinstance(record, Mapping):
        return dict(record)
    raise TypeError(f"Unsupported closure record type: {type(record)!r}")


class ClosureDiffer:
    """Reports the tracked fields whose value differs between two closures."""

    def __init__(
        self,
        tracked_fields: Iterable[str] = TRACKED_FIELDS,
        date_fields: Iterable[str] = DATE_FIELDS,
        settings: Settings = SETTINGS,
    ) -> None:
        self._tracked_fields = tuple(tracked_fields)
        self._date_fields = frozenset(date_fields)
        self._settings = settings

    def diff(self, before: Any, after: Any) -> dict[str, DiffEntry]:
        before_values = _record_values(before)
        after_values = _record_values(after)

        changes: dict[str, DiffEntry] = {}
        for name in self._tracked_fields:
            old = before_values.get(name)
            new = after_values.get(name)
            if name in self._date_fields:
                changed = not self._same_instant(old, new)
            else:
                changed = old != new
            if changed:
                changes[name] = DiffEntry(before=old, after=new)
        return changes

    def _same_instant(self, left: Any, right: Any) -> bool:
        left_instant = self._instant(left)
        right_instant = self._instant(right)
        if left_instant is None or right_instant is None:
            return left == right
        return left_instant == right_instant

    def _instant(self, value: Any) -> datetime | None:
        if value is None:
            return None
        try:
            return parse_operation_date(
                value,
                tz=self._settings.timezone,
                formats=self._settings.date_formats,
            )
        except FieldValueError:
            return None


def build_closure_response(record: Any) -> dict[str, Any] | None:
    """Plain-data view of ``record`` with ``drawer_cash_expected`` recomputed."""
    if record is None:
        return None
    response = _record_values(record)
    response["drawer_cash_expected"] = calculate_drawer_cash_expected(response)
    return response


DEFAULT_BUILDER = ClosureBuilder()
DEFAULT_DIFFER = ClosureDiffer()


def build_closure(raw_input: Mapping[str, Any], *, default_employee_name: str | None = None) -> CanonicalClosure:
    return DEFAULT_BUILDER.build(raw_input, default_employee_name=default_employee_name)


def diff_closures(before: Any, after: Any) -> dict[str, DiffEntry]:
    return DEFAULT_DIFFER.diff(before, after)
