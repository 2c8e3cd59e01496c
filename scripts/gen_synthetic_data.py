# scripts/gen_synthetic_data.py
from __future__ import annotations

import csv
import random
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from orplan.schemas.catalog import (
    DEFAULT_ROOM_DEPARTMENTS,
    EXPORT_COLUMNS,
    ROOMS,
    SOURCE_STATUSES,
)

"""
Synthetic OP-plan generator (single run → single CSV file).

Design:
- Parameters are hard-coded as constants below (no CLI args).
- Output mimics the hospital export: 28 German columns, `;` delimiter,
  DD.MM.YYYY dates and H:MM times.
- For each room and day a sequential chain of operations is generated,
  starting at DAY_START_HOUR; each operation is taken from the room's
  department list, followed by a changeover gap.
- Within a room chains never overlap by construction; OVERLAP_RATE injects
  a few deliberate double bookings so the conflict detector has work to do.

Edit the constants in the "CONFIG" section to produce different datasets.
"""

# =========================
# CONFIG: EDIT THESE
# =========================
DAYS: int = 2  # number of consecutive days (>= 1)
FIRST_DAY: date = date(2025, 7, 10)
OUTPUT: str = f"data/input/op_plan_{DAYS}d_{len(ROOMS)}r.csv"

DAY_START_HOUR: int = 7
DAY_END_HOUR: int = 17  # last possible start hour
MIN_GAP_MIN: int = 15  # changeover between operations in one room
MAX_GAP_MIN: int = 45
OVERLAP_RATE: float = 0.05  # probability of starting inside the previous operation

RANDOM_SEED: int = 42
# =========================

PROCEDURES: dict[str, list[tuple[str, int]]] = {
    "UCH": [
        ("Hüft-TEP links", 180),
        ("Knie-TEP rechts", 150),
        ("Schulter-Arthroskopie", 90),
        ("Kreuzbandplastik", 120),
        ("Metallentfernung Unterschenkel", 45),
        ("Meniskus-Teilresektion", 60),
    ],
    "ACH": [
        ("Cholezystektomie laparoskopisch", 120),
        ("Appendektomie", 90),
        ("Hernioplastik inguinal", 90),
        ("Sigmaresektion", 180),
        ("Hemikolektomie rechts", 210),
    ],
    "GYN": [
        ("Hysterektomie total", 150),
        ("Sectio caesarea", 45),
        ("Laparoskopie diagnostisch", 90),
        ("Hysteroskopie mit Kürettage", 30),
    ],
    "URO": [
        ("TUR-P", 90),
        ("Nephrektomie links", 180),
        ("Ureteroskopie mit Steinextraktion", 90),
        ("Zystoskopie diagnostisch", 30),
    ],
    "GCH": [
        ("Varizen-Stripping beidseits", 60),
        ("AV-Fistel Anlage", 90),
        ("Bypass femoropopliteal", 240),
        ("Port-Implantation", 45),
    ],
    "PCH": [
        ("Liposuktion Abdomen", 120),
        ("Abdominoplastik", 240),
        ("Lipom-Exstirpation", 30),
        ("Narben-Korrektur", 60),
    ],
}

SURGEONS: dict[str, list[str]] = {
    "UCH": ["Dr. Weber", "Dr. Zimmermann", "Dr. Hoffmann"],
    "ACH": ["Dr. Schmidt", "Dr. Becker", "Dr. Wagner"],
    "GYN": ["Dr. Lange", "Dr. Koch", "Dr. Richter"],
    "URO": ["Dr. Klein", "Dr. Wolf", "Dr. Krause"],
    "GCH": ["Dr. Neumann", "Dr. Braun", "Dr. Schwarz"],
    "PCH": ["Dr. Jung", "Dr. Hartmann", "Dr. Peters"],
}


@dataclass(frozen=True, slots=True)
class PlanRow:
    day: date
    start_min: int
    procedure: str
    department: str
    room: str
    surgeon: str
    case_number: str
    status: str


def _ensure_dirs(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _generate_room_day(room: str, day: date, case_counter: int) -> tuple[list[PlanRow], int]:
    """
    Generate a sequential chain of operations for one room on one day.

    Returns:
        (rows, next_case_counter)
    """
    department = DEFAULT_ROOM_DEPARTMENTS[room]
    rows: list[PlanRow] = []
    cursor = DAY_START_HOUR * 60
    prev_duration = 0

    while cursor <= DAY_END_HOUR * 60:
        procedure, duration = random.choice(PROCEDURES[department])
        start = cursor
        if rows and random.random() < OVERLAP_RATE:
            start = rows[-1].start_min + prev_duration // 2

        case_counter += 1
        rows.append(
            PlanRow(
                day=day,
                start_min=start,
                procedure=procedure,
                department=department,
                room=room,
                surgeon=random.choice(SURGEONS[department]),
                case_number=f"{case_counter:08d}",
                status=random.choice(SOURCE_STATUSES[:5]),
            )
        )
        prev_duration = duration
        cursor = start + duration + random.randrange(MIN_GAP_MIN, MAX_GAP_MIN + 1, 5)

    return rows, case_counter


def _to_record(row: PlanRow) -> dict[str, str]:
    record = {col: "" for col in EXPORT_COLUMNS}
    record.update(
        {
            "Datum": row.day.strftime("%d.%m.%Y"),
            "Zeit": f"{row.start_min // 60}:{row.start_min % 60:02d}",
            "Eingriff": row.procedure,
            "OP-Orgaeinheit": row.department,
            "OP-Saal": row.room,
            "Fallnummer": row.case_number,
            "1.Operateur": row.surgeon,
            "OP-Status": row.status,
            "Falltyp": "stationär",
        }
    )
    return record


def _write_csv(path: Path, rows: Iterable[PlanRow]) -> None:
    _ensure_dirs(path)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(EXPORT_COLUMNS), delimiter=";")
        writer.writeheader()
        for r in rows:
            writer.writerow(_to_record(r))


def _validate_config_or_die() -> None:
    problems: list[str] = []
    if DAYS < 1:
        problems.append("DAYS must be >= 1")
    if not (0 <= DAY_START_HOUR <= DAY_END_HOUR <= 23):
        problems.append("Require 0 <= DAY_START_HOUR <= DAY_END_HOUR <= 23")
    if MIN_GAP_MIN < 0 or MAX_GAP_MIN < MIN_GAP_MIN:
        problems.append("Require 0 <= MIN_GAP_MIN <= MAX_GAP_MIN")
    if not (0.0 <= OVERLAP_RATE <= 1.0):
        problems.append("OVERLAP_RATE must be within [0, 1]")
    if problems:
        msg = "Invalid generator configuration:\n- " + "\n- ".join(problems)
        print(msg, file=sys.stderr)
        sys.exit(2)


def main() -> int:
    _validate_config_or_die()
    random.seed(RANDOM_SEED)

    output = Path(OUTPUT)
    all_rows: list[PlanRow] = []
    case_counter = 0

    for offset in range(DAYS):
        day = FIRST_DAY + timedelta(days=offset)
        for room in ROOMS:
            rows, case_counter = _generate_room_day(room, day, case_counter)
            all_rows.extend(rows)

    # Sort like the hospital export: by date, then time, then room
    all_rows.sort(key=lambda r: (r.day, r.start_min, r.room))

    _write_csv(output, all_rows)

    print(f"[GEN] days={DAYS}, rooms={len(ROOMS)}, operations={len(all_rows)}")
    print(f"[GEN] wrote: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
