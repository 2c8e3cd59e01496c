# src/orplan/transform/transformer.py
"""
@brief
Turns one raw record into a CanonicalOperation plus row-level issues.

@details
The transformer validates every required field (collecting all field errors,
not just the first), then derives department, complexity, duration, status,
shift and required skills. Warnings never drop a row; any error does.
"""

from __future__ import annotations

from collections.abc import Mapping

from orplan.classifier.complexity import classify, estimate_duration
from orplan.classifier.skills import derive_required_skills
from orplan.dataloader.types import RowOutcome
from orplan.schemas.catalog import (
    COL_CASE_NUMBER,
    COL_DATE,
    COL_DEPARTMENT,
    COL_NOTE,
    COL_PROCEDURE,
    COL_ROOM,
    COL_STATUS,
    COL_SURGEON,
    COL_TIME,
    DEFAULT_LIFECYCLE_STATUS,
    STATUS_MAPPING,
    Shift,
)
from orplan.schemas.models import CanonicalOperation, ImportConfig, ValidationIssue
from orplan.validator.fields import (
    make_issue,
    validate_date,
    validate_department,
    validate_room,
    validate_status,
    validate_time,
)


def map_shift(start_time: str) -> Shift:
    """Shift bucket of a start time: BD1 [6,12), BD2 [12,16), BD3 [16,20), RD otherwise."""
    hour = int(start_time.split(":")[0])
    if 6 <= hour < 12:
        return "BD1"
    if 12 <= hour < 16:
        return "BD2"
    if 16 <= hour < 20:
        return "BD3"
    return "RD"


def operation_id(room: str, date: str, start_time: str) -> str:
    """Deterministic id derived from room, ISO date and start time: `SAAL2-2025-07-10-0730`."""
    return f"{room.replace(' ', '')}-{date}-{start_time.replace(':', '')}"


class Transformer:
    """
    @brief
    Row transformer bound to one ImportConfig.

    @details
    Stateless apart from the configuration, so a single instance may be shared
    by the worker threads of one import.
    """

    def __init__(self, config: ImportConfig | None = None) -> None:
        self.config = config or ImportConfig()

    def transform(
        self,
        raw: Mapping[str, str],
        row_index: int,
        present_columns: frozenset[str] | None = None,
    ) -> RowOutcome:
        """
        @brief
        Validate and convert one raw record.

        @params
            raw : Mapping[str, str]
                Header name → trimmed cell value.
            row_index : int
                1-based line number of the row in the file (header is line 1).
            present_columns : frozenset[str] | None
                Header names present in the file; optional-column warnings are
                only raised for columns listed here. Defaults to the record keys.

        @returns
            RowOutcome with the operation (or None) and the collected issues.
        """
        cfg = self.config
        columns = present_columns if present_columns is not None else frozenset(raw)
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        # (1) Required fields: collect every failure
        room, issue = validate_room(raw.get(COL_ROOM, ""), row_index)
        if issue:
            errors.append(issue)
        department, issue = validate_department(raw.get(COL_DEPARTMENT, ""), row_index)
        if issue:
            errors.append(issue)
        date, issue = validate_date(raw.get(COL_DATE, ""), row_index)
        if issue:
            errors.append(issue)
        start_time, issue = validate_time(raw.get(COL_TIME, ""), row_index)
        if issue:
            errors.append(issue)

        procedure = (raw.get(COL_PROCEDURE) or "").strip()
        if not procedure:
            errors.append(
                make_issue(
                    "MISSING_REQUIRED_FIELD",
                    f"Erforderliches Feld fehlt - {COL_PROCEDURE}",
                    row_index=row_index,
                    field=COL_PROCEDURE,
                )
            )

        if errors or room is None or department is None or date is None or start_time is None:
            return RowOutcome(operation=None, errors=errors, warnings=warnings)

        # (2) Department: the room allocation is authoritative
        mapped = cfg.room_departments.get(room)  # type: ignore[call-overload]
        if mapped is not None and mapped != department:
            warnings.append(
                make_issue(
                    "DEPARTMENT_OVERRIDDEN",
                    f"Abteilung {department} passt nicht zu {room}; verwende {mapped}",
                    severity="warning",
                    row_index=row_index,
                    field=COL_DEPARTMENT,
                    value=department,
                )
            )
            department = mapped

        # (3) Complexity and duration
        complexity = classify(procedure)
        duration = estimate_duration(
            procedure,
            complexity,
            min_minutes=cfg.min_duration_minutes,
            max_minutes=cfg.max_duration_minutes,
        )

        # (4) Status: unknown literals fall back to "planned"
        source_status, issue = validate_status(raw.get(COL_STATUS, ""), row_index)
        if issue:
            warnings.append(issue)
            status = DEFAULT_LIFECYCLE_STATUS
            source_status = issue.value
        else:
            status = STATUS_MAPPING.get(source_status or "", DEFAULT_LIFECYCLE_STATUS)

        surgeon = (raw.get(COL_SURGEON) or "").strip() or None
        case_number = (raw.get(COL_CASE_NUMBER) or "").strip() or None
        note = (raw.get(COL_NOTE) or "").strip() or None

        operation = CanonicalOperation(
            id=operation_id(room, date, start_time),
            row_index=row_index,
            room=room,  # type: ignore[arg-type]
            department=department,  # type: ignore[arg-type]
            date=date,
            start_time=start_time,
            duration_minutes=duration,
            procedure=procedure,
            complexity=complexity,
            primary_surgeon=surgeon,
            note=note,
            case_number=case_number,
            source_status=source_status or None,
            status=status,
            shift=map_shift(start_time),
            required_skills=derive_required_skills(procedure, department),  # type: ignore[arg-type]
        )

        # (5) Non-blocking findings
        warnings.extend(self._warnings_for(operation, columns, row_index))
        return RowOutcome(operation=operation, errors=[], warnings=warnings)

    def _warnings_for(
        self, op: CanonicalOperation, columns: frozenset[str], row_index: int
    ) -> list[ValidationIssue]:
        cfg = self.config
        found: list[ValidationIssue] = []

        if op.duration_minutes > cfg.long_procedure_minutes:
            found.append(
                make_issue(
                    "LONG_PROCEDURE",
                    f"Ungewöhnlich lange Operation ({op.duration_minutes} min): {op.procedure}",
                    severity="warning",
                    row_index=row_index,
                    field=COL_PROCEDURE,
                    value=str(op.duration_minutes),
                )
            )

        hour = op.start_minutes // 60
        if hour < cfg.usual_start_hour or hour > cfg.usual_end_hour:
            found.append(
                make_issue(
                    "UNUSUAL_TIME",
                    f"Operation außerhalb der üblichen Zeiten: {op.start_time}",
                    severity="warning",
                    row_index=row_index,
                    field=COL_TIME,
                    value=op.start_time,
                )
            )

        if COL_SURGEON in columns and op.primary_surgeon is None:
            found.append(
                make_issue(
                    "MISSING_SURGEON",
                    "Kein Operateur angegeben",
                    severity="warning",
                    row_index=row_index,
                    field=COL_SURGEON,
                )
            )

        if COL_CASE_NUMBER in columns and op.case_number is None:
            found.append(
                make_issue(
                    "MISSING_CASE_NUMBER",
                    "Keine Fallnummer angegeben",
                    severity="warning",
                    row_index=row_index,
                    field=COL_CASE_NUMBER,
                )
            )

        return found


def transform(
    raw: Mapping[str, str],
    row_index: int,
    config: ImportConfig | None = None,
    present_columns: frozenset[str] | None = None,
) -> RowOutcome:
    """Functional facade over `Transformer.transform`."""
    return Transformer(config).transform(raw, row_index, present_columns)


__all__ = ["Transformer", "transform", "map_shift", "operation_id"]
