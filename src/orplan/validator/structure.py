# src/orplan/validator/structure.py
from __future__ import annotations

import logging
from collections.abc import Sequence

from orplan.dataloader.row_parser import split_line
from orplan.schemas.catalog import REQUIRED_COLUMNS
from orplan.schemas.models import ValidationIssue
from orplan.validator.fields import make_issue

logger = logging.getLogger(__name__)


def validate_structure(
    lines: Sequence[str],
    *,
    delimiter: str = ";",
    min_columns: int = len(REQUIRED_COLUMNS),
    required_columns: Sequence[str] = REQUIRED_COLUMNS,
) -> list[ValidationIssue]:
    """
    @brief
    File-level well-formedness check, run once before any row is parsed.

    @details
    Returns only errors; an empty list means the file may be processed.
    Blank lines are ignored when counting. Checks, in order:
      - at least one header line and one data line
      - header column count not below `min_columns`
      - every required header present (one issue per missing column)
    A malformed header makes every row meaningless, so the caller must
    abort the import when this returns anything.

    @params
        lines : Sequence[str]
            Raw file lines (header first).
        delimiter : str
            Field delimiter.
        min_columns : int
            Minimum number of header columns.
        required_columns : Sequence[str]
            Header names that must be present.

    @returns
        List of error-severity ValidationIssue (empty when valid).
    """
    issues: list[ValidationIssue] = []

    # (1) Need header + at least one data line
    content_lines = [ln for ln in lines if ln.strip()]
    if len(content_lines) < 2:
        issues.append(
            make_issue(
                "STRUCT_TOO_FEW_LINES",
                "CSV-Datei muss mindestens eine Kopfzeile und eine Datenzeile enthalten",
                value=str(len(content_lines)),
            )
        )
        return issues

    # (2) Column count of the header
    headers = split_line(content_lines[0], delimiter)
    if len(headers) < min_columns:
        issues.append(
            make_issue(
                "STRUCT_TOO_FEW_COLUMNS",
                f"Zu wenige Spalten gefunden ({len(headers)}). Mindestens {min_columns} erwartet.",
                value=str(len(headers)),
            )
        )

    # (3) Required headers
    present = set(headers)
    for column in required_columns:
        if column not in present:
            issues.append(
                make_issue(
                    "STRUCT_MISSING_COLUMN",
                    f"Erforderliche Spalte fehlt: {column}",
                    field=column,
                )
            )

    if issues:
        logger.error(
            "Structural validation failed: %s",
            ", ".join(issue.code for issue in issues),
        )
    return issues
