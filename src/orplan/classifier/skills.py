# src/orplan/classifier/skills.py
from __future__ import annotations

from orplan.schemas.catalog import Department

DEPARTMENT_SKILLS: dict[str, tuple[str, ...]] = {
    "ACH": ("Allgemeinchirurgie", "Instrumentierung"),
    "GCH": ("Gefäßchirurgie", "Instrumentierung"),
    "PCH": ("Plastische Chirurgie", "Instrumentierung"),
    "URO": ("Urologie", "Instrumentierung"),
    "GYN": ("Gynäkologie", "Instrumentierung"),
    "UCH": ("Unfallchirurgie", "Orthopädie", "Instrumentierung"),
}

PROCEDURE_SKILLS: tuple[tuple[str, str], ...] = (
    ("laparoskopie", "Laparoskopie"),
    ("endoskopie", "Endoskopie"),
    ("mikrochirurgie", "Mikrochirurgie"),
    ("arthroskopie", "Arthroskopie"),
)


def derive_required_skills(procedure: str, department: Department) -> tuple[str, ...]:
    """Skills the staffing of an operation needs: department skills, then procedure keywords (deduplicated, ordered)."""
    skills: list[str] = list(DEPARTMENT_SKILLS.get(department, ()))
    name = (procedure or "").lower()
    for keyword, skill in PROCEDURE_SKILLS:
        if keyword in name:
            skills.append(skill)
    return tuple(dict.fromkeys(skills))
