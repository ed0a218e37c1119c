"""Errors raised by the closure domain."""
from __future__ import annotations

from typing import Sequence


class FieldValueError(ValueError):
    """A single raw value could not be turned into its canonical type."""


class ClosureValidationError(ValueError):
    """One or more fields of a submission failed validation.

    ``is_client_error`` marks the failure as caused by the submitted data so
    an outer HTTP layer can answer with ``status_code``.
    """

    status_code = 400
    is_client_error = True

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = tuple(messages)
        super().__init__(" ".join(self.messages))


class ClosureNotFoundError(LookupError):
    def __init__(self, closure_id: str) -> None:
        self.closure_id = closure_id
        super().__init__(f"Closure {closure_id!r} not found")
