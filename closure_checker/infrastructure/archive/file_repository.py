"""Filesystem repository for canonical closures and their audit trail."""
from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping

from closure_checker.domain.models import DERIVED_FIELDS, MONEY_FIELDS, CanonicalClosure

logger = logging.getLogger(__name__)

CLOSURE_FILE = "closure.json"
AUDIT_FILE = "audit.jsonl"

_DECIMAL_FIELDS = frozenset(MONEY_FIELDS + DERIVED_FIELDS)


_CLOSURE_ID = re.compile(r"[0-9A-Za-z_-]+")


def _normalize_closure_id(closure_id: str) -> str:
    # Ids map one-to-one onto directory names.
    normalized = (closure_id or "").strip()
    if not _CLOSURE_ID.fullmatch(normalized):
        raise ValueError(f"Invalid closure id: {closure_id!r}")
    return normalized


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_closure(data: Mapping[str, Any]) -> dict[str, Any]:
    record = dict(data)
    for name in _DECIMAL_FIELDS:
        if record.get(name) is not None:
            record[name] = Decimal(record[name])
    if record.get("operation_date"):
        record["operation_date"] = datetime.fromisoformat(record["operation_date"])
    return record


class FileSystemClosureRepository:
    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def _closure_dir(self, closure_id: str) -> Path:
        return self._root / _normalize_closure_id(closure_id)

    def get(self, closure_id: str) -> dict[str, Any] | None:
        path = self._closure_dir(closure_id) / CLOSURE_FILE
        if not path.exists():
            return None
        return _decode_closure(json.loads(path.read_text(encoding="utf-8")))

    def save(self, closure_id: str, closure: CanonicalClosure) -> None:
        closure_dir = self._closure_dir(closure_id)
        closure_dir.mkdir(parents=True, exist_ok=True)
        path = closure_dir / CLOSURE_FILE
        path.write_text(
            json.dumps(closure.to_dict(), default=_encode, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Saved closure %s to %s", closure_id, path)

    def append_audit(self, closure_id: str, entry: Mapping[str, Any]) -> None:
        closure_dir = self._closure_dir(closure_id)
        closure_dir.mkdir(parents=True, exist_ok=True)
        with (closure_dir / AUDIT_FILE).open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry, default=_encode, ensure_ascii=False) + "\n")
        logger.debug("Appended audit entry for closure %s", closure_id)

    def list_audit(self, closure_id: str) -> list[dict[str, Any]]:
        path = self._closure_dir(closure_id) / AUDIT_FILE
        if not path.exists():
            return []
        return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
