"""Label normalization for free-form closure spreadsheets.

Column names typed by hand or exported from spreadsheets vary in case,
accents, punctuation and abbreviations.  Every label is folded to a compact
key and resolved against a static alias table to a canonical field name.
"""
from __future__ import annotations

import re
import unicodedata
from types import MappingProxyType
from typing import Any, Mapping

from .models import CLOSURE_FIELDS

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

_SOURCE_ALIASES = {
    "data": "operation_date",
    "dataoperacao": "operation_date",
    "funcionario": "employee_name",
    "funcionarionome": "employee_name",
    "funcionariorresponsavel": "employee_name",
    "responsavel": "employee_name",
    "dinheirosistema": "cash_system_amount",
    "dinheirosist": "cash_system_amount",
    "dinheirodosistema": "cash_system_amount",
    "dinheirodosist": "cash_system_amount",
    "dinsist": "cash_system_amount",
    "dinheiro": "cash_system_amount",
    "credito": "credit_system_amount",
    "creditosist": "credit_system_amount",
    "creditodosistema": "credit_system_amount",
    "credito(sist)": "credit_system_amount",
    "creditosistema": "credit_system_amount",
    "debito": "debit_system_amount",
    "debitosist": "debit_system_amount",
    "debitodosistema": "debit_system_amount",
    "debito(sist)": "debit_system_amount",
    "debitosistema": "debit_system_amount",
    "credito(maq)": "credit_terminal_amount",
    "creditomaq": "credit_terminal_amount",
    "creditomaquina": "credit_terminal_amount",
    "debito(maq)": "debit_terminal_amount",
    "debitomaq": "debit_terminal_amount",
    "debitomaquina": "debit_terminal_amount",
    "pagonline": "online_payment_amount",
    "pag.online": "online_payment_amount",
    "pagamentoonline": "online_payment_amount",
    "pix": "pix_amount",
    "totalsistema": "system_total",
    "totalsitema": "system_total",
    "totalcaixadinheiro": "counted_cash_amount",
    "totalcaixa(dinheiro)": "counted_cash_amount",
    "dinheirocaixa": "counted_cash_amount",
    "abertura": "opening_float",
    "reforco": "reinforcement_amount",
    "reforcos": "reinforcement_amount",
    "gastos": "expenses_amount",
    "gasto": "expenses_amount",
    "paradeposito": "deposit_amount",
    "valorparadeposito": "deposit_amount",
    "deposito": "deposit_amount",
    "variaveldinheiro": "cash_variance",
    "variaveldocaixa": "cash_variance",
    "variaveld$": "cash_variance",
    "variaveldinheirocaixa": "cash_variance",
    "variaveldo$": "cash_variance",
    "variavelcaixa": "cash_variance",
    "entregacartao": "card_delivery_count",
    "entregacartaotdmenos": "card_delivery_count",
    "entregacartaotdmenos$": "card_delivery_count",
    "picoles": "popsicle_system_count",
    "picolessist": "popsicle_system_count",
    "picolessistema": "popsicle_system_count",
    "informacoes": "notes",
    "infomacoes": "notes",
    "obs": "notes",
    "drawercashexpected": "drawer_cash_expected",
    "dinheiroemgaveta": "drawer_cash_expected",
}


def normalize_label_key(label: Any) -> str:
    """Fold a label to lowercase ASCII alphanumerics, e.g. ``"Crédito (Sist)"`` -> ``"creditosist"``."""
    if label is None or label == "":
        return ""
    raw = label if isinstance(label, str) else str(label)
    decomposed = unicodedata.normalize("NFD", raw)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", stripped.lower())


def _build_alias_table() -> Mapping[str, str]:
    table = {normalize_label_key(name): name for name in CLOSURE_FIELDS}
    table.update(_SOURCE_ALIASES)
    return MappingProxyType(table)


FIELD_ALIASES = _build_alias_table()


class LabelNormalizer:
    """Resolves raw labels to canonical field names.

    ``extra_aliases`` are merged over the built-in table once, at construction.
    """

    def __init__(self, extra_aliases: Mapping[str, str] | None = None) -> None:
        if extra_aliases:
            merged = dict(FIELD_ALIASES)
            for label, field_name in extra_aliases.items():
                key = normalize_label_key(label)
                if key:
                    merged[key] = field_name
            self._aliases: Mapping[str, str] = MappingProxyType(merged)
        else:
            self._aliases = FIELD_ALIASES

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def canonical_field(self, label: Any) -> str:
        """Return the canonical field for ``label``; unknown labels come back trimmed."""
        trimmed = (label if isinstance(label, str) else str(label)).strip()
        if not trimmed:
            return ""
        exact = self._aliases.get(trimmed)
        if exact is not None:
            return exact
        return self._aliases.get(normalize_label_key(trimmed), trimmed)

    def normalize(self, payload: Any) -> dict[str, Any]:
        """Re-key ``payload`` by canonical field; later keys win on collisions."""
        normalized: dict[str, Any] = {}
        if not isinstance(payload, Mapping):
            return normalized
        for key, value in payload.items():
            if key is None:
                continue
            canonical = self.canonical_field(key)
            if not canonical:
                continue
            normalized[canonical] = value
        return normalized


DEFAULT_NORMALIZER = LabelNormalizer()


def canonical_field(label: Any) -> str:
    return DEFAULT_NORMALIZER.canonical_field(label)


def normalize_closure_labels(payload: Any) -> dict[str, Any]:
    return DEFAULT_NORMALIZER.normalize(payload)
