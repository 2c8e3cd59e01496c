# src/orplan/export/schedule_export.py
from __future__ import annotations

import csv
import io
import json
import os
import tempfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from orplan.errors import DataError
from orplan.schemas.models import CanonicalOperation, ImportResult

OPERATION_COLUMNS: tuple[str, ...] = (
    "id",
    "row_index",
    "date",
    "start_time",
    "end_time",
    "duration_minutes",
    "room",
    "department",
    "procedure",
    "complexity",
    "primary_surgeon",
    "case_number",
    "source_status",
    "status",
    "shift",
    "required_skills",
    "note",
)


def _atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    @brief
    Write text through a temporary file in the target directory, then swap it in.

    @raises
        DataError
            On write or rename failure (the temporary file is removed).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    try:
        with open(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise DataError(
            f"atomic write failed for {path}: {e}",
            source="export._atomic_write_text",
            suggested_action="Check output directory permissions and disk space.",
        ) from e


def _operation_row(op: CanonicalOperation) -> dict[str, Any]:
    row = op.model_dump(mode="json")
    row["required_skills"] = "|".join(op.required_skills)
    return {col: ("" if row.get(col) is None else row[col]) for col in OPERATION_COLUMNS}


def write_operations_csv(
    operations: Sequence[CanonicalOperation], out_path: Path, delimiter: str = ";"
) -> Path:
    """
    @brief
    Export canonical operations as a delimited CSV file.

    @details
    Rows are sorted by (date, room, start_time, id) so repeated exports of
    the same import are byte-identical. Skills are joined with `|`.
    The file is UTF-8 and written atomically.

    @params
        operations : Sequence[CanonicalOperation]
            Operations of an ImportResult.
        out_path : Path
            Destination CSV file.
        delimiter : str
            Field delimiter (default `;`, matching the source export).

    @returns
        Path to the written file.

    @raises
        DataError
            On duplicate ids or I/O failure.
    """
    # (1) Duplicate ids would make the export ambiguous
    ids = [op.id for op in operations]
    if len(ids) != len(set(ids)):
        dup = next(i for i in ids if ids.count(i) > 1)
        raise DataError(
            f"Duplicate operation id detected: {dup}",
            source="export.write_operations_csv",
            suggested_action="Export operations of a single ImportResult only.",
        )

    # (2) Deterministic order
    ordered = sorted(operations, key=lambda op: (op.date, op.room, op.start_time, op.id))

    # (3) Render and write
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(OPERATION_COLUMNS), delimiter=delimiter)
    writer.writeheader()
    for op in ordered:
        writer.writerow(_operation_row(op))

    _atomic_write_text(Path(out_path), buf.getvalue())
    return Path(out_path)


def build_report(result: ImportResult) -> dict[str, Any]:
    """JSON-ready report: status, summary, conflicts, errors and warnings."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "success": result.success,
        "phase": result.phase,
        "summary": result.summary.model_dump(mode="json"),
        "conflicts": [
            {
                "room": c.room,
                "date": c.date,
                "time_window": c.time_window,
                "kind": c.kind,
                "severity": c.severity,
                "overlap_minutes": c.overlap_minutes,
                "operation_ids": c.operation_ids,
            }
            for c in result.conflicts
        ],
        "errors": [issue.model_dump(mode="json") for issue in result.errors],
        "warnings": [issue.model_dump(mode="json") for issue in result.warnings],
    }


def write_import_report(result: ImportResult, out_dir: Path) -> Path:
    """
    @brief
    Write import_report.json atomically into `out_dir`.

    @returns
        Path to the created report.
    """
    payload = json.dumps(build_report(result), ensure_ascii=False, indent=2)
    target = Path(out_dir) / "import_report.json"
    _atomic_write_text(target, payload + "\n")
    return target


__all__ = ["OPERATION_COLUMNS", "write_operations_csv", "write_import_report", "build_report"]
