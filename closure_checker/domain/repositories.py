"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from .models import CanonicalClosure


class ClosureRepository(Protocol):
    """Stores canonical closures and their audit trail."""

    def get(self, closure_id: str) -> Mapping[str, Any] | None:
        ...

    def save(self, closure_id: str, closure: CanonicalClosure) -> None:
        ...

    def append_audit(self, closure_id: str, entry: Mapping[str, Any]) -> None:
        ...

    def list_audit(self, closure_id: str) -> Sequence[Mapping[str, Any]]:
        ...
