from orplan.classifier.complexity import classify, estimate_duration
from orplan.classifier.skills import derive_required_skills

__all__ = ["classify", "estimate_duration", "derive_required_skills"]
