"""Storage helpers for site-specific label aliases."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from closure_checker.config import ALIAS_OVERRIDE_PATH
from closure_checker.domain.aliases import normalize_label_key
from closure_checker.domain.models import CANONICAL_FIELDS

logger = logging.getLogger(__name__)


def _normalize_aliases(raw: dict[str, Any] | None) -> dict[str, str]:
    normalized: dict[str, str] = {}
    if not isinstance(raw, dict):
        return normalized
    for label, field_name in raw.items():
        key = normalize_label_key(label)
        if not key:
            continue
        target = "" if field_name is None else str(field_name).strip()
        if target not in CANONICAL_FIELDS:
            logger.warning("Ignoring alias %r -> %r: not a closure field", label, field_name)
            continue
        normalized[key] = target
    return normalized


def load_aliases(path: Path | None = None) -> dict[str, str]:
    override_path = path or ALIAS_OVERRIDE_PATH
    if not override_path.exists():
        return {}
    try:
        data = json.loads(override_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Alias file %s is not valid JSON; using built-in aliases only", override_path)
        return {}
    return _normalize_aliases(data)


def save_aliases(mapping: dict[str, str], path: Path | None = None) -> dict[str, str]:
    override_path = path or ALIAS_OVERRIDE_PATH
    normalized = _normalize_aliases(mapping)
    override_path.parent.mkdir(parents=True, exist_ok=True)
    override_path.write_text(
        json.dumps(normalized, ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return normalized
