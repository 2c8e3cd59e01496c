# src/orplan/metrics/summary.py
from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from orplan.schemas.models import CanonicalOperation, ImportSummary

_COLUMNS = ["department", "room", "complexity", "status", "start_time", "duration_minutes"]


def _counts(df: pd.DataFrame, column: str) -> dict[str, int]:
    """value_counts of one column as a plain, key-sorted dict of ints."""
    counts = df[column].value_counts()
    return {str(k): int(v) for k, v in sorted(counts.items(), key=lambda kv: str(kv[0]))}


def operations_frame(operations: Sequence[CanonicalOperation]) -> pd.DataFrame:
    """
    @brief
    Flat DataFrame view of canonical operations.

    @details
    One row per operation with the columns used for aggregation; an empty
    input yields an empty frame that still carries the expected columns.
    """
    rows = [
        {
            "department": op.department,
            "room": op.room,
            "complexity": op.complexity,
            "status": op.status,
            "start_time": op.start_time,
            "duration_minutes": op.duration_minutes,
        }
        for op in operations
    ]
    return pd.DataFrame(rows, columns=_COLUMNS)


def build_summary(
    operations: Sequence[CanonicalOperation],
    *,
    total_rows: int,
    failed_transforms: int,
    skipped_rows: int = 0,
    conflict_count: int = 0,
) -> ImportSummary:
    """
    @brief
    Aggregate counts of one import run.

    @details
    Row counters come from the orchestrator; everything derived from the
    operations themselves (per-department, per-room, per-complexity and
    per-status counts, earliest/latest start, planned minutes) is computed
    on a pandas DataFrame.

    @params
        operations : Sequence[CanonicalOperation]
            Operations kept by the import.
        total_rows : int
            Non-blank data rows seen.
        failed_transforms : int
            Rows dropped because of errors.
        skipped_rows : int
            Blank data lines that were ignored.
        conflict_count : int
            Number of detected conflicts.

    @returns
        Frozen ImportSummary.
    """
    # (1) Empty import → only the counters
    df = operations_frame(operations)
    if df.empty:
        return ImportSummary(
            total_rows=total_rows,
            successful_transforms=0,
            failed_transforms=failed_transforms,
            skipped_rows=skipped_rows,
            conflict_count=conflict_count,
        )

    # (2) Group counts and time range
    return ImportSummary(
        total_rows=total_rows,
        successful_transforms=int(len(df)),
        failed_transforms=failed_transforms,
        skipped_rows=skipped_rows,
        by_department=_counts(df, "department"),
        by_room=_counts(df, "room"),
        by_complexity=_counts(df, "complexity"),
        by_status=_counts(df, "status"),
        earliest_time=str(df["start_time"].min()),
        latest_time=str(df["start_time"].max()),
        total_planned_minutes=int(df["duration_minutes"].sum()),
        conflict_count=conflict_count,
    )


__all__ = ["build_summary", "operations_frame"]
