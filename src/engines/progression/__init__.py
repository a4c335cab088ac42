"""
Progression Engine - Prerequisite graph, completion and unit presentation.

Components:
- GraphValidator: acyclic, same-course prerequisite graph; topological order
- ModuleConfigValidator: completion criteria / presentation rules sanity
- CompletionEvaluator: not_started / in_progress / passed / failed
- PresentationScheduler: ordered units with availability, cooldown, exhaustion
- ProgressionOrchestrator: per-learner course view in one topological pass
"""

from src.engines.progression.completion_evaluator import CompletionEvaluator, ModuleProgressSummary
from src.engines.progression.config_validator import ModuleConfigValidator
from src.engines.progression.graph_validator import GraphValidator
from src.engines.progression.models import (
    CompletionStatus,
    CourseSnapshot,
    LearnerModuleProgress,
    LearningUnit,
    Module,
    PresentationRules,
    UnitAttempt,
)
from src.engines.progression.orchestrator import ProgressionOrchestrator, ProgressionResult
from src.engines.progression.presentation_scheduler import (
    Eligibility,
    PresentationScheduler,
    ScheduledUnit,
)

__all__ = [
    "CompletionEvaluator",
    "ModuleProgressSummary",
    "ModuleConfigValidator",
    "GraphValidator",
    "CompletionStatus",
    "CourseSnapshot",
    "LearnerModuleProgress",
    "LearningUnit",
    "Module",
    "PresentationRules",
    "UnitAttempt",
    "ProgressionOrchestrator",
    "ProgressionResult",
    "Eligibility",
    "PresentationScheduler",
    "ScheduledUnit",
]
