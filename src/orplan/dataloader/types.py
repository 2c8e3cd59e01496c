# src/orplan/dataloader/types.py
from __future__ import annotations

from dataclasses import dataclass, field

from orplan.schemas.models import CanonicalOperation, ValidationIssue


@dataclass(slots=True)
class RowOutcome:
    """
    Result of transforming one data row.

    Fields:
        operation: The canonical operation, or None when any field error occurred.
        errors: Row-level errors (the row is dropped when non-empty).
        warnings: Non-blocking findings; present whether or not the row was kept.
    """

    operation: CanonicalOperation | None = None
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.operation is not None and not self.errors
