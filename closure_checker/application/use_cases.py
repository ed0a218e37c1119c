"""Application services orchestrating closure workflows."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from closure_checker.application.dto import ClosureResult, ClosureSubmission
from closure_checker.domain.errors import ClosureNotFoundError, ClosureValidationError
from closure_checker.domain.models import CanonicalClosure, DiffEntry
from closure_checker.domain.repositories import ClosureRepository
from closure_checker.domain.results import BatchReport, BatchSummary, ClosureOutcome
from closure_checker.domain.services import (
    ClosureBuilder,
    ClosureDiffer,
    build_closure_response,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ClosureContext:
    repository: ClosureRepository
    builder: ClosureBuilder = field(default_factory=ClosureBuilder)
    differ: ClosureDiffer = field(default_factory=ClosureDiffer)
    clock: Callable[[], datetime] = _utcnow


def _audit_entry(action: str, changes: Mapping[str, DiffEntry], recorded_at: datetime) -> dict[str, Any]:
    return {
        "action": action,
        "recorded_at": recorded_at,
        "changes": {name: entry.to_dict() for name, entry in changes.items()},
    }


class SubmitClosureUseCase:
    def __init__(self, context: ClosureContext) -> None:
        self._context = context

    def execute(self, submission: ClosureSubmission) -> ClosureResult:
        closure = self._context.builder.build(
            submission.raw_input,
            default_employee_name=submission.default_employee_name,
        )
        changes = self._context.differ.diff(None, closure)
        repository = self._context.repository
        repository.save(submission.closure_id, closure)
        repository.append_audit(submission.closure_id, _audit_entry("create", changes, self._context.clock()))
        return ClosureResult(
            closure_id=submission.closure_id,
            closure=closure,
            response=build_closure_response(closure),
            changes=changes,
        )


class AmendClosureUseCase:
    """Rebuilds a stored closure from edited input and records what changed."""

    def __init__(self, context: ClosureContext) -> None:
        self._context = context

    def execute(self, submission: ClosureSubmission) -> ClosureResult:
        repository = self._context.repository
        previous = repository.get(submission.closure_id)
        if previous is None:
            raise ClosureNotFoundError(submission.closure_id)

        closure = self._context.builder.build(
            submission.raw_input,
            default_employee_name=submission.default_employee_name,
        )
        changes = self._context.differ.diff(previous, closure)
        repository.save(submission.closure_id, closure)
        if changes:
            repository.append_audit(submission.closure_id, _audit_entry("update", changes, self._context.clock()))
        return ClosureResult(
            closure_id=submission.closure_id,
            closure=closure,
            response=build_closure_response(closure),
            changes=changes,
        )


class ValidateClosuresUseCase:
    """Validates a batch of raw closures, e.g. every row of a spreadsheet."""

    def __init__(self, builder: ClosureBuilder | None = None, clock: Callable[[], datetime] = _utcnow) -> None:
        self._builder = builder or ClosureBuilder()
        self._clock = clock

    def execute(
        self,
        raw_inputs: Sequence[Mapping[str, Any]],
        default_employee_name: str | None = None,
    ) -> BatchReport:
        outcomes: list[ClosureOutcome] = []
        for index, raw_input in enumerate(raw_inputs):
            try:
                closure: CanonicalClosure | None = self._builder.build(
                    raw_input,
                    default_employee_name=default_employee_name,
                )
                errors: tuple[str, ...] = ()
            except ClosureValidationError as exc:
                closure = None
                errors = exc.messages
            outcomes.append(ClosureOutcome(index=index, closure=closure, errors=errors))

        valid = [o.closure for o in outcomes if o.closure is not None]
        summary = BatchSummary(
            total=len(outcomes),
            valid=len(valid),
            invalid=len(outcomes) - len(valid),
            with_variance=len([c for c in valid if c.cash_variance != 0]),
            generated_at=self._clock(),
        )
        return BatchReport(summary=summary, outcomes=tuple(outcomes))
