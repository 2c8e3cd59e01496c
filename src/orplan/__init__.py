"""Import core for German OP-plan exports."""

from orplan.importer import ScheduleImporter, import_schedule
from orplan.schemas.models import ImportConfig, ImportResult

__all__ = ["ScheduleImporter", "import_schedule", "ImportConfig", "ImportResult"]
