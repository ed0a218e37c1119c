"""Till closure reconciliation toolkit."""
from closure_checker.application.use_cases import (
    AmendClosureUseCase,
    ClosureContext,
    SubmitClosureUseCase,
    ValidateClosuresUseCase,
)
from closure_checker.domain.aliases import LabelNormalizer, normalize_closure_labels
from closure_checker.domain.errors import ClosureValidationError
from closure_checker.domain.models import CanonicalClosure, DiffEntry
from closure_checker.domain.reconciliation import (
    calculate_cash_variance,
    calculate_drawer_cash_expected,
    calculate_system_total,
)
from closure_checker.domain.services import (
    ClosureBuilder,
    ClosureDiffer,
    build_closure,
    build_closure_response,
    diff_closures,
)

__all__ = [
    "AmendClosureUseCase",
    "CanonicalClosure",
    "ClosureBuilder",
    "ClosureContext",
    "ClosureDiffer",
    "ClosureValidationError",
    "DiffEntry",
    "LabelNormalizer",
    "SubmitClosureUseCase",
    "ValidateClosuresUseCase",
    "build_closure",
    "build_closure_response",
    "calculate_cash_variance",
    "calculate_drawer_cash_expected",
    "calculate_system_total",
    "diff_closures",
    "normalize_closure_labels",
]
