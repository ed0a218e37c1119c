"""Domain-level results for batch closure validation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from .models import CanonicalClosure


@dataclass(frozen=True)
class ClosureOutcome:
    index: int
    closure: CanonicalClosure | None
    errors: Sequence[str] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return self.closure is not None


@dataclass(frozen=True)
class BatchSummary:
    total: int
    valid: int
    invalid: int
    with_variance: int
    generated_at: datetime


@dataclass(frozen=True)
class BatchReport:
    summary: BatchSummary
    outcomes: Sequence[ClosureOutcome] = field(default_factory=tuple)

    def has_issues(self) -> bool:
        return any([self.summary.invalid, self.summary.with_variance])

    def iter_valid(self) -> Iterable[CanonicalClosure]:
        for outcome in self.outcomes:
            if outcome.closure is not None:
                yield outcome.closure

    def iter_invalid(self) -> Iterable[ClosureOutcome]:
        for outcome in self.outcomes:
            if outcome.closure is None:
                yield outcome
