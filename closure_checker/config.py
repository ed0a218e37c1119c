"""Central configuration for the closure checker package."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
ARCHIVE_DIR = DATA_DIR / "closures"
ALIAS_OVERRIDE_PATH = BASE_DIR / "alias_override.json"

# Accepted in addition to ISO-8601; spreadsheets exported in pt-BR write day first.
DATE_FORMATS = (
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d-%m-%Y",
)


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    currency_quantum: Decimal
    rounding: str
    timezone: timezone
    min_employee_name_length: int
    date_formats: tuple[str, ...]
    currency_symbol: str


SETTINGS = Settings(
    decimal_context=Context(prec=28, rounding=ROUND_HALF_UP),
    currency_quantum=Decimal("0.01"),
    rounding=ROUND_HALF_UP,
    timezone=timezone.utc,
    min_employee_name_length=3,
    date_formats=DATE_FORMATS,
    currency_symbol="R$",
)
