import pytest
from pydantic import ValidationError

from orplan.schemas.models import (
    CanonicalOperation,
    ConflictEntry,
    ImportConfig,
    ImportResult,
    ValidationIssue,
    hhmm_to_minutes,
    minutes_to_hhmm,
)


def _op(**overrides) -> CanonicalOperation:
    data = {
        "id": "SAAL1-2025-07-10-0700",
        "room": "SAAL 1",
        "department": "UCH",
        "date": "2025-07-10",
        "start_time": "07:00",
        "duration_minutes": 180,
        "procedure": "Hüft-TEP links",
        "complexity": "Hoch",
        "shift": "BD1",
    }
    data.update(overrides)
    return CanonicalOperation(**data)


def test_operation_model_valid():
    op = _op()

    assert op.end_time == "10:00"
    assert op.start_minutes == 420
    assert op.end_minutes == 600
    assert op.status == "planned"
    assert op.required_skills == ()


def test_end_time_wraps_past_midnight():
    """
    @brief
    The displayed end time wraps at midnight; end_minutes keeps the absolute offset.
    """
    op = _op(start_time="23:00", duration_minutes=120, shift="RD")

    assert op.end_time == "01:00"
    assert op.end_minutes == 25 * 60


def test_end_time_is_serialized():
    dumped = _op().model_dump(mode="json")
    assert dumped["end_time"] == "10:00"


def test_operation_is_frozen():
    op = _op()
    with pytest.raises(ValidationError):
        op.room = "SAAL 2"  # type: ignore[misc]


def test_model_copy_produces_new_instance():
    op = _op()
    renamed = op.model_copy(update={"id": op.id + "-2"})

    assert renamed.id == "SAAL1-2025-07-10-0700-2"
    assert op.id == "SAAL1-2025-07-10-0700"


@pytest.mark.parametrize(
    "overrides",
    [
        {"duration_minutes": 10},
        {"duration_minutes": 721},
        {"start_time": "7:00"},
        {"start_time": "24:00"},
        {"date": "10.07.2025"},
        {"room": "SAAL 9"},
        {"department": "XYZ"},
        {"complexity": "Extrem"},
        {"procedure": ""},
        {"unexpected": "field"},
    ],
)
def test_operation_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        _op(**overrides)


def test_validation_issue_row_index_is_one_based():
    issue = ValidationIssue(code="INVALID_TIME", message="x", severity="error", row_index=1)
    assert issue.is_error

    with pytest.raises(ValidationError):
        ValidationIssue(code="INVALID_TIME", message="x", severity="error", row_index=0)


def test_validation_issue_severity_domain():
    warning = ValidationIssue(code="LONG_PROCEDURE", message="x", severity="warning")
    assert not warning.is_error

    with pytest.raises(ValidationError):
        ValidationIssue(code="X", message="x", severity="info")  # type: ignore[arg-type]


def test_conflict_entry_requires_two_operations():
    a = _op()
    b = _op(id="SAAL1-2025-07-10-0730", start_time="07:30")

    entry = ConflictEntry(
        room="SAAL 1",
        date="2025-07-10",
        time_window="07:30-10:00",
        operations=(a, b),
        kind="overlap",
        severity="high",
        overlap_minutes=150,
    )
    assert entry.operation_ids == [a.id, b.id]

    with pytest.raises(ValidationError):
        ConflictEntry(
            room="SAAL 1",
            date="2025-07-10",
            time_window="07:00-10:00",
            operations=(a,),
            kind="overlap",
            severity="low",
        )


def test_import_config_defaults():
    cfg = ImportConfig()

    assert cfg.delimiter == ";"
    assert cfg.min_columns == 5
    assert cfg.required_columns == ["Datum", "Zeit", "Eingriff", "OP-Orgaeinheit", "OP-Saal"]
    assert (cfg.min_duration_minutes, cfg.max_duration_minutes) == (30, 720)
    assert cfg.long_procedure_minutes == 360
    assert (cfg.overlap_low_max_minutes, cfg.overlap_medium_max_minutes) == (15, 30)
    assert cfg.room_departments["SAAL 2"] == "GCH"
    assert cfg.workers == 1
    assert cfg.io_policy.write_artifacts is True


@pytest.mark.parametrize(
    "data",
    [
        {"extra_key": True},
        {"usual_start_hour": 21, "usual_end_hour": 20},
        {"overlap_low_max_minutes": 40, "overlap_medium_max_minutes": 30},
        {"min_duration_minutes": 10},
    ],
)
def test_import_config_rejects_invalid(data):
    with pytest.raises(ValidationError):
        ImportConfig(**data)


def test_import_result_defaults():
    result = ImportResult(success=True, phase="success")

    assert result.operations == []
    assert result.conflicts == []
    assert result.summary.total_rows == 0


@pytest.mark.parametrize("minutes, text", [(0, "00:00"), (450, "07:30"), (1439, "23:59"), (1500, "01:00")])
def test_minutes_to_hhmm(minutes, text):
    assert minutes_to_hhmm(minutes) == text


def test_hhmm_to_minutes():
    assert hhmm_to_minutes("07:30") == 450
