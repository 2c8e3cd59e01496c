# src/orplan/validator/fields.py
"""
@brief
Stateless field validators for the German OP-plan export.

@details
Every validator is a total function over strings with the contract
`validate_x(raw, row_index=None) -> (normalized | None, ValidationIssue | None)`:
exactly one element of the pair is None. Empty input yields
MISSING_REQUIRED_FIELD, malformed input yields the field's dedicated code.
"""

from __future__ import annotations

import re
from datetime import date

from orplan.schemas.catalog import (
    COL_DATE,
    COL_DEPARTMENT,
    COL_ROOM,
    COL_STATUS,
    COL_TIME,
    DEPARTMENTS,
    ROOMS,
    SOURCE_STATUSES,
)
from orplan.schemas.models import ValidationIssue

_DATE_RE = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_ROOM_RE = re.compile(r"^saal\s*(\d+)$", re.IGNORECASE)

MESSAGES: dict[str, str] = {
    "MISSING_REQUIRED_FIELD": "Erforderliches Feld fehlt",
    "INVALID_DATE": "Ungültiges Datum. Format muss DD.MM.YYYY sein",
    "INVALID_TIME": "Ungültige Zeit. Format muss HH:MM sein",
    "INVALID_DEPARTMENT": "Ungültige Abteilung. Muss eine von " + ", ".join(DEPARTMENTS) + " sein",
    "INVALID_ROOM": "Ungültiger OP-Saal. Muss SAAL 1-8 sein",
    "UNKNOWN_STATUS": "Unbekannter OP-Status",
}

FieldResult = tuple[str | None, ValidationIssue | None]


def make_issue(
    code: str,
    message: str,
    *,
    severity: str = "error",
    row_index: int | None = None,
    field: str | None = None,
    value: str | None = None,
) -> ValidationIssue:
    """Build a ValidationIssue, prefixing the message with the line number when known."""
    if row_index is not None:
        message = f"Zeile {row_index}: {message}"
    return ValidationIssue(
        code=code,
        message=message,
        severity=severity,  # type: ignore[arg-type]
        row_index=row_index,
        field=field,
        value=value,
    )


def _missing(field: str, row_index: int | None) -> FieldResult:
    return None, make_issue(
        "MISSING_REQUIRED_FIELD",
        f"{MESSAGES['MISSING_REQUIRED_FIELD']} - {field}",
        row_index=row_index,
        field=field,
    )


def _invalid(code: str, field: str, raw: str, row_index: int | None) -> FieldResult:
    return None, make_issue(
        code,
        f"{MESSAGES[code]} - {raw}",
        row_index=row_index,
        field=field,
        value=raw,
    )


def validate_date(raw: str, row_index: int | None = None) -> FieldResult:
    """
    @brief
    Validate a German date `DD.MM.YYYY` and normalize it to ISO `YYYY-MM-DD`.

    @details
    The literal must match the pattern AND survive a calendar round trip,
    so day/month overflow such as `31.02.2025` is rejected.
    """
    value = (raw or "").strip()
    if not value:
        return _missing(COL_DATE, row_index)

    match = _DATE_RE.match(value)
    if match is None:
        return _invalid("INVALID_DATE", COL_DATE, value, row_index)

    day, month, year = (int(part) for part in match.groups())
    try:
        parsed = date(year, month, day)
    except ValueError:
        return _invalid("INVALID_DATE", COL_DATE, value, row_index)

    return parsed.isoformat(), None


def validate_time(raw: str, row_index: int | None = None) -> FieldResult:
    """
    @brief
    Validate `H:MM` / `HH:MM` (24h) and normalize to zero-padded `HH:MM`.
    """
    value = (raw or "").strip()
    if not value:
        return _missing(COL_TIME, row_index)

    match = _TIME_RE.match(value)
    if match is None:
        return _invalid("INVALID_TIME", COL_TIME, value, row_index)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return _invalid("INVALID_TIME", COL_TIME, value, row_index)

    return f"{hours:02d}:{minutes:02d}", None


def validate_department(raw: str, row_index: int | None = None) -> FieldResult:
    """Department code must be one of the six fixed codes (case-insensitive)."""
    value = (raw or "").strip()
    if not value:
        return _missing(COL_DEPARTMENT, row_index)

    code = value.upper()
    if code not in DEPARTMENTS:
        return _invalid("INVALID_DEPARTMENT", COL_DEPARTMENT, value, row_index)
    return code, None


def normalize_room(raw: str) -> str:
    """Canonical spelling of a room literal: `saal2` / `Saal  2` → `SAAL 2`."""
    value = (raw or "").strip()
    match = _ROOM_RE.match(value)
    if match is None:
        return value
    return f"SAAL {int(match.group(1))}"


def validate_room(raw: str, row_index: int | None = None) -> FieldResult:
    """Room must normalize to one of the eight operating rooms."""
    value = (raw or "").strip()
    if not value:
        return _missing(COL_ROOM, row_index)

    room = normalize_room(value)
    if room not in ROOMS:
        return _invalid("INVALID_ROOM", COL_ROOM, value, row_index)
    return room, None


def validate_status(raw: str, row_index: int | None = None) -> FieldResult:
    """
    @brief
    Check the OP-Status literal against the known source statuses.

    @details
    An unknown status is tolerated downstream, so the issue has warning
    severity. Empty input is returned as ("", None): the column is optional.
    """
    value = (raw or "").strip()
    if not value:
        return "", None
    if value not in SOURCE_STATUSES:
        return None, make_issue(
            "UNKNOWN_STATUS",
            f"{MESSAGES['UNKNOWN_STATUS']} '{value}'. Gültige Werte: {', '.join(SOURCE_STATUSES)}",
            severity="warning",
            row_index=row_index,
            field=COL_STATUS,
            value=value,
        )
    return value, None


__all__ = [
    "validate_date",
    "validate_time",
    "validate_department",
    "validate_room",
    "validate_status",
    "normalize_room",
    "make_issue",
]
