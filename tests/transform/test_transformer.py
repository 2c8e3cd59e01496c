# tests/transform/test_transformer.py
import pytest

import orplan.transform.transformer as transformer_mod
from orplan.schemas.models import ImportConfig
from orplan.transform.transformer import Transformer, map_shift, operation_id, transform


def _raw(**overrides) -> dict[str, str]:
    raw = {
        "Datum": "10.07.2025",
        "Zeit": "7:30",
        "Eingriff": "Cholezystektomie",
        "OP-Orgaeinheit": "ACH",
        "OP-Saal": "SAAL 3",
    }
    raw.update(overrides)
    return raw


def test_transform_builds_canonical_operation():
    """
    @brief
    A clean row becomes a fully derived CanonicalOperation.

    @details
    Cholezystektomie classifies as "Mittel" and has a 120 minute reference
    duration; SAAL 3 belongs to ACH so no department warning is raised.
    """
    # --- Act ---
    outcome = transform(_raw(), row_index=2)

    # --- Assert ---
    op = outcome.operation
    assert outcome.errors == []
    assert outcome.warnings == []
    assert op.id == "SAAL3-2025-07-10-0730"
    assert op.row_index == 2
    assert op.date == "2025-07-10"
    assert op.start_time == "07:30"
    assert op.end_time == "09:30"
    assert op.duration_minutes == 120
    assert op.complexity == "Mittel"
    assert op.department == "ACH"
    assert op.status == "planned"
    assert op.source_status is None
    assert op.shift == "BD1"
    assert op.required_skills == ("Allgemeinchirurgie", "Instrumentierung")


def test_room_mapping_overrides_department_with_warning():
    # --- Arrange ---
    raw = _raw(**{"OP-Saal": "SAAL 2"})  # SAAL 2 → GCH

    # --- Act ---
    outcome = transform(raw, row_index=2)

    # --- Assert ---
    assert outcome.operation.department == "GCH"
    assert [w.code for w in outcome.warnings] == ["DEPARTMENT_OVERRIDDEN"]
    assert outcome.warnings[0].value == "ACH"
    assert outcome.operation.required_skills[0] == "Gefäßchirurgie"


def test_empty_room_mapping_keeps_source_department():
    cfg = ImportConfig(room_departments={})
    outcome = transform(_raw(**{"OP-Saal": "SAAL 2"}), row_index=2, config=cfg)

    assert outcome.operation.department == "ACH"
    assert outcome.warnings == []


def test_invalid_time_drops_row():
    """Zeit=25:99 → no operation, exactly one INVALID_TIME error."""
    outcome = transform(_raw(Zeit="25:99"), row_index=2)

    assert outcome.operation is None
    assert [e.code for e in outcome.errors] == ["INVALID_TIME"]
    assert outcome.errors[0].field == "Zeit"
    assert outcome.errors[0].value == "25:99"
    assert outcome.errors[0].row_index == 2


def test_all_field_errors_are_collected():
    # --- Arrange ---
    raw = _raw(Datum="", **{"OP-Saal": "SAAL 9", "OP-Orgaeinheit": "XYZ"}, Eingriff="")

    # --- Act ---
    outcome = transform(raw, row_index=5)

    # --- Assert ---
    assert outcome.operation is None
    fields = {e.field: e.code for e in outcome.errors}
    assert fields == {
        "OP-Saal": "INVALID_ROOM",
        "OP-Orgaeinheit": "INVALID_DEPARTMENT",
        "Datum": "MISSING_REQUIRED_FIELD",
        "Eingriff": "MISSING_REQUIRED_FIELD",
    }
    assert all(e.message.startswith("Zeile 5: ") for e in outcome.errors)


@pytest.mark.parametrize("column", ["Datum", "Zeit", "Eingriff", "OP-Orgaeinheit", "OP-Saal"])
def test_missing_required_field_names_the_column(column):
    outcome = transform(_raw(**{column: ""}), row_index=2)

    assert outcome.operation is None
    assert len(outcome.errors) == 1
    assert outcome.errors[0].code == "MISSING_REQUIRED_FIELD"
    assert outcome.errors[0].field == column


def test_long_procedure_is_kept_with_warning(monkeypatch):
    """
    @brief
    An estimate above 360 minutes warns but keeps the operation.
    """
    # --- Arrange ---
    monkeypatch.setattr(transformer_mod, "estimate_duration", lambda *a, **k: 400)

    # --- Act ---
    outcome = transform(_raw(), row_index=2)

    # --- Assert ---
    assert outcome.operation is not None
    assert outcome.operation.duration_minutes == 400
    assert outcome.errors == []
    assert [w.code for w in outcome.warnings] == ["LONG_PROCEDURE"]


def test_long_procedure_threshold_is_configurable():
    cfg = ImportConfig(long_procedure_minutes=100)
    outcome = transform(_raw(Eingriff="Hüft-TEP links"), row_index=2, config=cfg)

    assert outcome.operation.duration_minutes == 180
    assert "LONG_PROCEDURE" in [w.code for w in outcome.warnings]


@pytest.mark.parametrize(
    "zeit, unusual",
    [("5:59", True), ("6:00", False), ("20:30", False), ("21:00", True), ("0:15", True)],
)
def test_unusual_time_warning(zeit, unusual):
    outcome = transform(_raw(Zeit=zeit), row_index=2)
    codes = [w.code for w in outcome.warnings]
    assert ("UNUSUAL_TIME" in codes) is unusual


def test_duration_floor_is_applied():
    outcome = transform(_raw(Eingriff="Hysteroskopie Laparoskopie"), row_index=2)
    assert outcome.operation.duration_minutes == 30


def test_status_mapping_and_unknown_status():
    # --- Act ---
    cancelled = transform(_raw(**{"OP-Status": "OP abgesagt"}), row_index=2)
    unknown = transform(_raw(**{"OP-Status": "OP vertagt"}), row_index=3)

    # --- Assert ---
    assert cancelled.operation.status == "cancelled"
    assert cancelled.operation.source_status == "OP abgesagt"
    assert unknown.operation.status == "planned"
    assert unknown.operation.source_status == "OP vertagt"
    assert [w.code for w in unknown.warnings] == ["UNKNOWN_STATUS"]


def test_missing_surgeon_and_case_number_only_when_columns_exist():
    """
    @brief
    Optional-column warnings depend on the file header.

    @details
    A file without 1.Operateur / Fallnummer columns gets no warnings; a file
    that has them but leaves them empty does.
    """
    # --- Arrange ---
    with_columns = _raw(**{"1.Operateur": "", "Fallnummer": ""})

    # --- Act ---
    absent = transform(_raw(), row_index=2)
    empty = transform(with_columns, row_index=2)
    filled = transform(
        _raw(**{"1.Operateur": "Dr. Schmidt", "Fallnummer": "12345"}), row_index=2
    )

    # --- Assert ---
    assert absent.warnings == []
    assert [w.code for w in empty.warnings] == ["MISSING_SURGEON", "MISSING_CASE_NUMBER"]
    assert filled.warnings == []
    assert filled.operation.primary_surgeon == "Dr. Schmidt"
    assert filled.operation.case_number == "12345"


def test_present_columns_override_record_keys():
    transformer = Transformer()
    outcome = transformer.transform(_raw(), row_index=2, present_columns=frozenset({"1.Operateur"}))
    assert [w.code for w in outcome.warnings] == ["MISSING_SURGEON"]


@pytest.mark.parametrize(
    "start, shift",
    [("06:00", "BD1"), ("11:59", "BD1"), ("12:00", "BD2"), ("16:00", "BD3"), ("20:00", "RD"), ("03:00", "RD")],
)
def test_map_shift(start, shift):
    assert map_shift(start) == shift


def test_operation_id_is_deterministic():
    assert operation_id("SAAL 1", "2025-07-10", "07:00") == "SAAL1-2025-07-10-0700"


def test_missing_normalized_value_never_builds_an_operation(monkeypatch):
    """
    @brief
    A required field without a normalized value drops the row without raising.
    """
    # --- Arrange ---
    monkeypatch.setattr(transformer_mod, "validate_room", lambda value, row_index=None: (None, None))

    # --- Act ---
    outcome = Transformer().transform(_raw(), row_index=2)

    # --- Assert ---
    assert outcome.operation is None
    assert not outcome.ok
