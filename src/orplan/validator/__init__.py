from orplan.validator.fields import (
    validate_date,
    validate_department,
    validate_room,
    validate_status,
    validate_time,
)
from orplan.validator.structure import validate_structure

__all__ = [
    "validate_date",
    "validate_time",
    "validate_department",
    "validate_room",
    "validate_status",
    "validate_structure",
]
