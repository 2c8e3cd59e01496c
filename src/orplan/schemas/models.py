"""
@brief
Pydantic data models for the Orplan import core.

@details
Defines the canonical model types:
    - ValidationIssue: one error or warning found while importing (immutable)
    - CanonicalOperation: one validated, classified operation (immutable)
    - ConflictEntry: one overlap or double booking inside a room/date group
    - ImportSummary: aggregate counts of one import run
    - ImportResult: the complete in-memory outcome of one import call
    - ImportConfig: runtime configuration (from config.yaml)

Output entities are frozen: derived values are produced by constructing new
instances (`model_copy(update=...)`), never by mutating shared records.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field, model_validator

from orplan.schemas.catalog import (
    DEFAULT_ROOM_DEPARTMENTS,
    REQUIRED_COLUMNS,
    ConflictKind,
    ConflictSeverity,
    Department,
    LifecycleStatus,
    Room,
    Severity,
    Shift,
    Tier,
)

ImportPhase = Literal[
    "idle",
    "structural-validation",
    "row-processing",
    "conflict-detection",
    "summary",
    "success",
    "structural-error",
    "cancelled",
]

MINUTES_PER_DAY = 24 * 60


class _StrictBaseModel(BaseModel):
    """
    @brief
    Base model enforcing strict defaults for configuration and data contracts.

    @details
    Forbids unknown fields and preserves exact naming rules.
    Designed as a foundation for all other Orplan models.
    """

    model_config = {
        "extra": "forbid",  # Reject unknown fields
        "populate_by_name": True,  # Allow population by field name
    }


class _FrozenModel(_StrictBaseModel):
    """Strict model whose instances cannot be mutated after construction."""

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "frozen": True,
    }


def minutes_to_hhmm(total_minutes: int) -> str:
    """Format minutes since midnight as zero-padded HH:MM (wrapping past midnight)."""
    m = total_minutes % MINUTES_PER_DAY
    return f"{m // 60:02d}:{m % 60:02d}"


def hhmm_to_minutes(value: str) -> int:
    """Parse a normalized HH:MM string into minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class ValidationIssue(_FrozenModel):
    """
    @brief
    One error or warning raised during import.

    @details
    Row-level errors drop the offending row; warnings never do.
    File-level (structural) issues carry no row_index and are always errors.
    """

    code: str = Field(..., description="Machine-readable issue code, e.g. INVALID_TIME")
    message: str = Field(..., description="Human-readable message (German)")
    severity: Severity = Field(..., description="error | warning")
    row_index: int | None = Field(None, ge=1, description="1-based line number in the file")
    field: str | None = Field(None, description="Column the issue refers to")
    value: str | None = Field(None, description="Offending raw value")

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


class CanonicalOperation(_FrozenModel):
    """
    @brief
    Represents one validated operation of the OP plan.

    @details
    Only fully validated rows reach this type: date and start time are always
    valid and the duration always lies within [15, 720] minutes.
    The end time is derived (start + duration) and wraps at midnight;
    `end_minutes` keeps the absolute offset used for overlap checks.
    """

    id: str = Field(..., description="Deterministic id: room, date, start time (+ tiebreaker)")
    row_index: int | None = Field(None, ge=1, description="Source line number")
    room: Room = Field(..., description="Operating room (SAAL 1..8)")
    department: Department = Field(..., description="Clinical department code")
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="ISO date YYYY-MM-DD")
    start_time: str = Field(
        ..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="Start time HH:MM (24h)"
    )
    duration_minutes: int = Field(..., ge=15, le=720, description="Estimated duration")
    procedure: str = Field(..., min_length=1, description="Procedure name (Eingriff)")
    complexity: Tier = Field(..., description="Complexity tier")
    primary_surgeon: str | None = Field(None, description="1.Operateur")
    note: str | None = Field(None, description="Free-text note (Anmerkung)")
    case_number: str | None = Field(None, description="Fallnummer")
    source_status: str | None = Field(None, description="Raw OP-Status literal")
    status: LifecycleStatus = Field("planned", description="Internal lifecycle status")
    shift: Shift = Field(..., description="Shift bucket derived from start time")
    required_skills: tuple[str, ...] = Field((), description="Skills the staffing needs")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def end_time(self) -> str:
        return minutes_to_hhmm(self.end_minutes)

    @property
    def start_minutes(self) -> int:
        return hhmm_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes


class ConflictEntry(_FrozenModel):
    """
    @brief
    One scheduling conflict inside a (room, date) group.

    @details
    Conflicts annotate the result; they never remove operations.
    """

    room: Room
    date: str
    time_window: str = Field(..., description="Conflicting window HH:MM-HH:MM")
    operations: tuple[CanonicalOperation, ...] = Field(..., min_length=2)
    kind: ConflictKind
    severity: ConflictSeverity
    overlap_minutes: int = Field(0, ge=0)

    @property
    def operation_ids(self) -> list[str]:
        return [op.id for op in self.operations]


class ImportSummary(_FrozenModel):
    """Aggregate counts of one import run."""

    total_rows: int = 0
    successful_transforms: int = 0
    failed_transforms: int = 0
    skipped_rows: int = 0
    by_department: dict[str, int] = Field(default_factory=dict)
    by_room: dict[str, int] = Field(default_factory=dict)
    by_complexity: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    earliest_time: str | None = None
    latest_time: str | None = None
    total_planned_minutes: int = 0
    conflict_count: int = 0


class ImportResult(_StrictBaseModel):
    """
    @brief
    Complete outcome of one import call.

    @details
    `success` is True iff no row-level (or structural) error occurred;
    warnings and conflicts never affect it. After a structural failure only
    `errors` is populated.
    """

    success: bool
    phase: ImportPhase
    operations: list[CanonicalOperation] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    conflicts: list[ConflictEntry] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)


# ------------------------------------------------------------
# Runtime configuration
# ------------------------------------------------------------
class IOPolicy(BaseModel):
    """
    @brief
    Controls artifact writing of the command-line runner.

    @details
    The import core itself never touches the disk; these flags are read by
    the CLI and the post-import handler only.
    """

    write_artifacts: bool = Field(
        True,
        description="If False, disables writing operations.csv and import_report.json.",
    )


class ImportConfig(_StrictBaseModel):
    """
    @brief
    Represents the full runtime configuration loaded from config.yaml.

    @details
    Structural thresholds, duration bounds, warning thresholds, conflict
    severity thresholds and the authoritative room → department allocation.
    Every field has a default, so `ImportConfig()` is a complete configuration.
    """

    delimiter: str = Field(";", min_length=1, max_length=1, description="Field delimiter")
    min_columns: int = Field(5, ge=1, description="Reject files whose header has fewer columns")
    required_columns: list[str] = Field(
        default_factory=lambda: list(REQUIRED_COLUMNS),
        description="Header names that must be present",
    )

    min_duration_minutes: int = Field(30, ge=15, description="Floor of estimated durations")
    max_duration_minutes: int = Field(720, le=720, description="Cap of estimated durations")
    long_procedure_minutes: int = Field(
        360, ge=1, description="Durations above this produce a LONG_PROCEDURE warning"
    )
    usual_start_hour: int = Field(6, ge=0, le=23, description="Earliest usual start hour")
    usual_end_hour: int = Field(20, ge=0, le=23, description="Latest usual start hour")

    overlap_low_max_minutes: int = Field(15, ge=0, description="Overlap ≤ this → low")
    overlap_medium_max_minutes: int = Field(30, ge=0, description="Overlap ≤ this → medium")

    room_departments: dict[Room, Department] = Field(
        default_factory=lambda: dict(DEFAULT_ROOM_DEPARTMENTS),  # type: ignore[arg-type]
        description="Authoritative room → department allocation",
    )

    workers: int = Field(1, ge=1, description="Thread workers for row transformation")

    output_dir: str | None = "data/output"
    io_policy: IOPolicy = Field(default_factory=IOPolicy.model_construct)

    @model_validator(mode="after")
    def _check_bounds(self) -> ImportConfig:
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ValueError("min_duration_minutes must not exceed max_duration_minutes")
        if self.usual_start_hour > self.usual_end_hour:
            raise ValueError("usual_start_hour must not exceed usual_end_hour")
        if self.overlap_low_max_minutes > self.overlap_medium_max_minutes:
            raise ValueError("overlap_low_max_minutes must not exceed overlap_medium_max_minutes")
        return self


__all__ = [
    "ValidationIssue",
    "CanonicalOperation",
    "ConflictEntry",
    "ImportSummary",
    "ImportResult",
    "ImportConfig",
    "IOPolicy",
    "ImportPhase",
    "minutes_to_hhmm",
    "hhmm_to_minutes",
]
