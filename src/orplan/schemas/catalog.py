# src/orplan/schemas/catalog.py
"""
@brief
Closed value domains of the German OP-plan export.

@details
Column names, department codes, room names, source status literals and the
fixed lookups derived from them. Everything here is read-only data shared by
validators, transformer and configuration defaults.
"""

from __future__ import annotations

from typing import Literal

Tier = Literal["Sehr Hoch", "Hoch", "Mittel", "Niedrig"]
Department = Literal["ACH", "GCH", "PCH", "URO", "GYN", "UCH"]
Room = Literal["SAAL 1", "SAAL 2", "SAAL 3", "SAAL 4", "SAAL 5", "SAAL 6", "SAAL 7", "SAAL 8"]
LifecycleStatus = Literal["planned", "in_progress", "completed", "protocol_incomplete", "cancelled"]
Shift = Literal["BD1", "BD2", "BD3", "RD"]
Severity = Literal["error", "warning"]
ConflictKind = Literal["overlap", "exact-duplicate"]
ConflictSeverity = Literal["low", "medium", "high"]

# Tier priority order, highest first; classification scans in this order
TIERS: tuple[Tier, ...] = ("Sehr Hoch", "Hoch", "Mittel", "Niedrig")
DEFAULT_TIER: Tier = "Mittel"

DEPARTMENTS: tuple[Department, ...] = ("ACH", "GCH", "PCH", "URO", "GYN", "UCH")
ROOMS: tuple[Room, ...] = (
    "SAAL 1",
    "SAAL 2",
    "SAAL 3",
    "SAAL 4",
    "SAAL 5",
    "SAAL 6",
    "SAAL 7",
    "SAAL 8",
)

DEPARTMENT_NAMES: dict[Department, str] = {
    "ACH": "Allgemeinchirurgie",
    "GCH": "Gefäßchirurgie",
    "PCH": "Plastische Chirurgie",
    "URO": "Urologie",
    "GYN": "Gynäkologie",
    "UCH": "Unfallchirurgie",
}

# Room → department of the hospital's standard room allocation
DEFAULT_ROOM_DEPARTMENTS: dict[str, str] = {
    "SAAL 1": "UCH",
    "SAAL 2": "GCH",
    "SAAL 3": "ACH",
    "SAAL 4": "GYN",
    "SAAL 5": "GCH",
    "SAAL 6": "URO",
    "SAAL 7": "ACH",
    "SAAL 8": "PCH",
}

# Source status literal → internal lifecycle status
STATUS_MAPPING: dict[str, LifecycleStatus] = {
    "OP geplant": "planned",
    "OP abgeschlossen": "completed",
    "OP-Protokoll nicht abgeschlossen": "protocol_incomplete",
    "OP läuft": "in_progress",
    "OP verspätet": "planned",
    "OP abgesagt": "cancelled",
    "OP verschoben": "planned",
}
SOURCE_STATUSES: tuple[str, ...] = tuple(STATUS_MAPPING)
DEFAULT_LIFECYCLE_STATUS: LifecycleStatus = "planned"

# ------------------------------------------------------------
# Column names of the hospital export
# ------------------------------------------------------------
COL_DATE = "Datum"
COL_TIME = "Zeit"
COL_PROCEDURE = "Eingriff"
COL_DEPARTMENT = "OP-Orgaeinheit"
COL_ROOM = "OP-Saal"
COL_SURGEON = "1.Operateur"
COL_STATUS = "OP-Status"
COL_CASE_NUMBER = "Fallnummer"
COL_NOTE = "Anmerkung"

REQUIRED_COLUMNS: tuple[str, ...] = (COL_DATE, COL_TIME, COL_PROCEDURE, COL_DEPARTMENT, COL_ROOM)

# Full 28-column header of the hospital export, in file order
EXPORT_COLUMNS: tuple[str, ...] = (
    "Datum",
    "Zeit",
    "Eingriff",
    "Antibiotikaprophylaxe",
    "OP-Orgaeinheit",
    "weitere geplante Orgaeinheiten",
    "OP-Saal",
    "Nachname",
    "Vorname",
    "Geburtsdatum",
    "Geburtsname",
    "Identitifikationsnummer",
    "Vornamen bei Geburt",
    "Verwendeter Name",
    "Geburtsort (Code)",
    "Fallnummer",
    "Patient-Orgaeinheit",
    "Station",
    "1.Operateur",
    "Aufnahmedatum",
    "Aufnahmezeit",
    "Falltyp",
    "Fallstatus",
    "Planungskontrolle",
    "Anmerkung",
    "Maßnahmen",
    "OP-Status",
    "Prämedikationsstatus",
)

__all__ = [
    "Tier",
    "Department",
    "Room",
    "LifecycleStatus",
    "Shift",
    "Severity",
    "ConflictKind",
    "ConflictSeverity",
    "TIERS",
    "DEFAULT_TIER",
    "DEPARTMENTS",
    "ROOMS",
    "DEPARTMENT_NAMES",
    "DEFAULT_ROOM_DEPARTMENTS",
    "STATUS_MAPPING",
    "SOURCE_STATUSES",
    "DEFAULT_LIFECYCLE_STATUS",
    "REQUIRED_COLUMNS",
    "EXPORT_COLUMNS",
]
