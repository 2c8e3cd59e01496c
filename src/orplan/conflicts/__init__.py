from orplan.conflicts.detector import detect_conflicts

__all__ = ["detect_conflicts"]
