# tests/classifier/test_complexity.py
import pytest

from orplan.classifier.complexity import (
    COMPLEXITY_RULES,
    classify,
    estimate_duration,
    match_rule,
    reference_duration,
)
from orplan.classifier.skills import derive_required_skills
from orplan.schemas.catalog import TIERS


@pytest.mark.parametrize(
    "procedure, tier",
    [
        ("Cholezystektomie", "Mittel"),
        ("Thyreoidektomie beidseits", "Sehr Hoch"),
        ("Knie-TEP rechts", "Hoch"),
        ("Hüft-TEP links", "Hoch"),
        ("Biopsie Mamma", "Niedrig"),
        ("ARTHROSKOPIE Knie", "Mittel"),
        ("Nierentransplantation", "Sehr Hoch"),
    ],
)
def test_classify_known_procedures(procedure, tier):
    assert classify(procedure) == tier


@pytest.mark.parametrize("procedure", ["", "   ", "Unbekannter Eingriff", "1234", ";;;"])
def test_classify_defaults_to_mittel(procedure):
    assert classify(procedure) == "Mittel"


def test_classify_tie_break_prefers_higher_tier():
    """
    @brief
    Names matching rules of several tiers resolve to the highest tier.

    @details
    "Appendektomie" (Mittel) and "Biopsie" (Niedrig) both match; the scan
    visits Mittel first. The position of the keywords in the name is
    irrelevant.
    """
    # --- Act / Assert ---
    assert classify("Appendektomie mit Biopsie") == "Mittel"
    assert classify("Biopsie bei Appendektomie") == "Mittel"
    assert classify("Biopsie und Thyreoidektomie") == "Sehr Hoch"


def test_table_rule_wins_over_fallback_keywords():
    # "naht.*revision" is a Niedrig rule; "revision" alone is a Hoch fallback keyword
    assert classify("Nahtrevision") == "Niedrig"
    assert classify("Revision unklarer Befund") == "Hoch"
    assert classify("Komplexe Rekonstruktion") == "Hoch"


def test_rule_table_is_grouped_in_priority_order():
    positions = [TIERS.index(tier) for tier, _, _ in COMPLEXITY_RULES]
    assert positions == sorted(positions)


def test_match_rule_returns_label():
    rule = match_rule("Cholezystektomie laparoskopisch")
    assert rule is not None
    assert rule[0] == "Mittel"
    assert rule[2] == "Cholecystectomy"
    assert match_rule("nichts bekanntes") is None


@pytest.mark.parametrize(
    "procedure, tier, expected",
    [
        ("Cholezystektomie", "Mittel", 120),  # reference duration
        ("Unbekannt", "Sehr Hoch", 240),
        ("Unbekannt", "Hoch", 150),
        ("Unbekannt", "Mittel", 90),
        ("Unbekannt", "Niedrig", 45),
        ("Mikrochirurgie Unbekannt", "Hoch", 210),
        ("Endoskopie Unbekannt", "Niedrig", 30),
        ("Laparoskopie Unbekannt", "Mittel", 70),
        ("Revision Unbekannt", "Hoch", 180),
    ],
)
def test_estimate_duration_base_and_modifiers(procedure, tier, expected):
    assert estimate_duration(procedure, tier) == expected


def test_estimate_duration_is_floored_at_30():
    """
    @brief
    Subtractive modifiers never push the estimate below 30 minutes.
    """
    # --- Arrange ---
    procedure = "Hysteroskopie Laparoskopie"  # reference 30, laparoscopic -20

    # --- Act ---
    minutes = estimate_duration(procedure, classify(procedure))

    # --- Assert ---
    assert minutes == 30


def test_estimate_duration_respects_custom_bounds():
    assert estimate_duration("Mikrochirurgie", "Sehr Hoch", max_minutes=200) == 200
    assert estimate_duration("Lipom", "Niedrig", min_minutes=45) == 45


def test_reference_duration_lookup():
    assert reference_duration("Hüft-TEP links") == 180
    assert reference_duration("Sectio caesarea") == 45
    assert reference_duration("Unbekannt") is None


def test_derive_required_skills_department_and_keywords():
    skills = derive_required_skills("Knie-Arthroskopie", "UCH")
    assert skills == ("Unfallchirurgie", "Orthopädie", "Instrumentierung", "Arthroskopie")


def test_derive_required_skills_deduplicates():
    skills = derive_required_skills("Laparoskopie Laparoskopie", "ACH")
    assert skills.count("Laparoskopie") == 1
    assert skills[:2] == ("Allgemeinchirurgie", "Instrumentierung")
