# src/orplan/classifier/complexity.py
"""
@brief
Rule-table classifier for German procedure names.

@details
`classify()` maps a free-text procedure name (Eingriff) to one of four
complexity tiers; `estimate_duration()` derives a planned duration in minutes.

The rule table is an explicit ordered list of `(tier, pattern, label)` tuples.
Rules are grouped by tier in priority order (Sehr Hoch → Hoch → Mittel →
Niedrig) and tested in table order; the first match wins. Names that match
several rules therefore always resolve to the highest tier checked first.
"""

from __future__ import annotations

import re

from orplan.schemas.catalog import DEFAULT_TIER, TIERS, Tier

ComplexityRule = tuple[Tier, re.Pattern[str], str]


def _rule(tier: Tier, pattern: str, label: str) -> ComplexityRule:
    return tier, re.compile(pattern, re.IGNORECASE), label


# ------------------------------------------------------------
# Ordered classification table
# ------------------------------------------------------------
COMPLEXITY_RULES: tuple[ComplexityRule, ...] = (
    # Sehr Hoch
    _rule("Sehr Hoch", r"major.*amputation|amputation.*major", "Major Amputation"),
    _rule("Sehr Hoch", r"thyreoidektomie", "Thyroidectomy"),
    _rule("Sehr Hoch", r"osteosynthese.*acetabulum", "Acetabular Osteosynthesis"),
    _rule("Sehr Hoch", r"herz.*operation|herzchirurgie", "Cardiac Surgery"),
    _rule("Sehr Hoch", r"wirbelsäule.*fusion|spondylodese", "Spinal Fusion"),
    _rule("Sehr Hoch", r"transplantation", "Transplantation"),
    # Hoch
    _rule("Hoch", r"mamma.*bet|brustkrebs.*bet", "Breast Cancer Surgery BET"),
    _rule("Hoch", r"hernie.*tapp", "Hernia TAPP"),
    _rule("Hoch", r"ureterorenoskopie", "Ureterorenoscopy"),
    _rule("Hoch", r"kniegelenk.*ersatz|knie.*tep", "Knee Replacement"),
    _rule("Hoch", r"hüftgelenk.*ersatz|hüft.*tep", "Hip Replacement"),
    _rule("Hoch", r"laparoskopie.*komplex", "Complex Laparoscopy"),
    # Mittel
    _rule("Mittel", r"dupuytren", "Dupuytren Contracture"),
    _rule("Mittel", r"cholezystektomie", "Cholecystectomy"),
    _rule("Mittel", r"arthroskopie", "Arthroscopy"),
    _rule("Mittel", r"appendektomie", "Appendectomy"),
    _rule("Mittel", r"hernie.*inguinal", "Inguinal Hernia"),
    _rule("Mittel", r"gallenblase", "Gallbladder Surgery"),
    # Niedrig
    _rule("Niedrig", r"lokale.*exzision", "Local Excision"),
    _rule("Niedrig", r"kleine.*eingriffe", "Minor Procedures"),
    _rule("Niedrig", r"biopsie", "Biopsy"),
    _rule("Niedrig", r"zyste.*entfernung", "Cyst Removal"),
    _rule("Niedrig", r"hautläsion", "Skin Lesion"),
    _rule("Niedrig", r"naht.*revision", "Suture Revision"),
)

# Keywords that lift an otherwise unmatched name to "Hoch"
FALLBACK_HIGH_KEYWORDS: tuple[str, ...] = ("komplex", "revision", "rekonstruktion")

BASE_DURATIONS: dict[Tier, int] = {
    "Sehr Hoch": 240,
    "Hoch": 150,
    "Mittel": 90,
    "Niedrig": 45,
}

# Reference durations of well-known procedures (substring of the lower-cased name)
REFERENCE_DURATIONS: dict[str, int] = {
    # UCH
    "hüft-tep": 180,
    "knie-tep": 150,
    "knie-arthroskopie": 90,
    "meniskus": 60,
    "kreuzband": 120,
    "schulter-arthroskopie": 90,
    "osteosynthese": 120,
    "metallentfernung": 45,
    "wirbelsäule": 240,
    # ACH
    "cholezystektomie": 120,
    "appendektomie": 90,
    "hernioplastik": 90,
    "sigmaresektion": 180,
    "hemikolektomie": 210,
    "gallenblasen": 120,
    # GYN
    "hysterektomie": 150,
    "sectio": 45,
    "laparoskopie gyn": 90,
    "hysteroskopie": 30,
    "ovarial": 120,
    # URO
    "tur-p": 90,
    "nephrektomie": 180,
    "ureteroskopie": 90,
    "nephrolithopaxie": 120,
    "zystoskopie": 30,
    # PCH
    "mammareduktion": 180,
    "liposuktion": 120,
    "abdominoplastik": 240,
    "facelift": 180,
    "lipom": 30,
    # GCH
    "varizen": 60,
    "av-fistel": 90,
    "bypass": 240,
    "angioplastie": 120,
}

# Additive keyword modifiers, applied once each
DURATION_MODIFIERS: tuple[tuple[str, int], ...] = (
    ("mikrochirurgie", 60),
    ("endoskopie", -15),
    ("laparoskopie", -20),
    ("revision", 30),
)

MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 720


def match_rule(procedure: str) -> ComplexityRule | None:
    """
    @brief
    Return the first rule of the table matching `procedure`, or None.

    @details
    Rules are visited tier by tier in TIERS order so the table's grouping
    cannot silently change the priority.
    """
    name = (procedure or "").strip().lower()
    if not name:
        return None
    for tier in TIERS:
        for rule in COMPLEXITY_RULES:
            if rule[0] == tier and rule[1].search(name):
                return rule
    return None


def classify(procedure: str) -> Tier:
    """
    @brief
    Map a procedure name to its complexity tier. Total: never raises.

    @details
        1) first matching table rule (tier priority order)
        2) fallback keywords (komplex / revision / rekonstruktion) → Hoch
        3) default → Mittel
    """
    rule = match_rule(procedure)
    if rule is not None:
        return rule[0]

    name = (procedure or "").lower()
    if any(keyword in name for keyword in FALLBACK_HIGH_KEYWORDS):
        return "Hoch"
    return DEFAULT_TIER


def reference_duration(procedure: str) -> int | None:
    """Known reference duration for the procedure, if any entry is a substring of it."""
    name = (procedure or "").strip().lower()
    for key, minutes in REFERENCE_DURATIONS.items():
        if key in name:
            return minutes
    return None


def estimate_duration(
    procedure: str,
    tier: Tier,
    *,
    min_minutes: int = MIN_DURATION_MINUTES,
    max_minutes: int = MAX_DURATION_MINUTES,
) -> int:
    """
    @brief
    Estimate the planned duration of a procedure in minutes.

    @details
    Base is the reference duration of the procedure when one is known,
    otherwise the per-tier base. Keyword modifiers are added on top; the
    result is clamped to [min_minutes, max_minutes].

    @params
        procedure : str
            Procedure name (Eingriff).
        tier : Tier
            Complexity tier as returned by `classify`.
        min_minutes / max_minutes : int
            Floor and cap of the estimate.

    @returns
        Duration in whole minutes.
    """
    duration = reference_duration(procedure)
    if duration is None:
        duration = BASE_DURATIONS.get(tier, BASE_DURATIONS[DEFAULT_TIER])

    name = (procedure or "").lower()
    for keyword, delta in DURATION_MODIFIERS:
        if keyword in name:
            duration += delta

    return min(max(min_minutes, duration), max_minutes)


__all__ = [
    "COMPLEXITY_RULES",
    "BASE_DURATIONS",
    "REFERENCE_DURATIONS",
    "DURATION_MODIFIERS",
    "classify",
    "match_rule",
    "reference_duration",
    "estimate_duration",
]
