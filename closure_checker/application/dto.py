"""Application-level DTOs for closure submission and amendment."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from closure_checker.domain.models import CanonicalClosure, DiffEntry


@dataclass(slots=True, frozen=True)
class ClosureSubmission:
    closure_id: str
    raw_input: Mapping[str, Any]
    default_employee_name: str | None = None


@dataclass(slots=True, frozen=True)
class ClosureResult:
    closure_id: str
    closure: CanonicalClosure
    response: dict[str, Any]
    changes: Mapping[str, DiffEntry] = field(default_factory=dict)
