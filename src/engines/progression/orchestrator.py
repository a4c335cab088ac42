"""
Progression Orchestrator - "What can this learner do next?"

Composes graph validation, completion evaluation and scheduling over one
course snapshot in a single topological pass.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from src.engines.progression.completion_evaluator import CompletionEvaluator, ModuleProgressSummary
from src.engines.progression.graph_validator import GraphValidator
from src.engines.progression.models import (
    CompletionStatus,
    CourseSnapshot,
    LearnerModuleProgress,
)
from src.engines.progression.presentation_scheduler import PresentationScheduler, ScheduledUnit
from src.logging_config import get_logger

logger = get_logger(__name__)


class ProgressionResult(BaseModel):
    """Learner-facing progression state of a course."""

    course_id: str
    learner_id: str
    evaluated_at: datetime
    module_states: Dict[str, CompletionStatus]
    unlocked_modules: List[str]  # topological order
    presentable: Dict[str, List[ScheduledUnit]]
    summaries: Dict[str, ModuleProgressSummary]
    course_complete: bool


class ProgressionOrchestrator:
    """
    Public entry point of the progression engine.

    A module is unlocked once all of its prerequisites are passed. Modules are
    visited prerequisites-first so each module only reads upstream statuses.
    """

    @classmethod
    def progress(
        cls,
        course: CourseSnapshot,
        learner_id: str,
        progress_snapshots: Iterable[LearnerModuleProgress],
        now: datetime,
        *,
        learner_requests: Iterable[str] = (),
    ) -> ProgressionResult:
        """
        Evaluate every module of a course for one learner.

        Args:
            course: Modules and learning units of the course
            learner_id: Learner being evaluated
            progress_snapshots: Attempt histories, one per started module
            now: Evaluation instant
            learner_requests: Modules where the learner asked to repeat completed units

        Returns:
            ProgressionResult with statuses, unlocked modules and presentable units

        Raises:
            CycleError / DanglingRefError when the stored graph is invalid
        """
        order = GraphValidator.topological_order(course.modules)
        modules = {m.id: m for m in course.modules}
        units = course.units_by_module()
        snapshots: Dict[str, LearnerModuleProgress] = {
            p.module_id: p for p in progress_snapshots if p.learner_id == learner_id
        }
        requested = set(learner_requests)

        states: Dict[str, CompletionStatus] = {}
        unlocked: List[str] = []
        presentable: Dict[str, List[ScheduledUnit]] = {}
        summaries: Dict[str, ModuleProgressSummary] = {}

        for module_id in order:
            module = modules[module_id]
            snapshot: Optional[LearnerModuleProgress] = snapshots.get(module_id)
            summary = CompletionEvaluator.summarize(module, units[module_id], snapshot)
            summaries[module_id] = summary
            states[module_id] = summary.status

            prerequisites_met = all(states[p] == CompletionStatus.PASSED for p in module.prerequisites)
            if prerequisites_met:
                unlocked.append(module_id)
            elif not module.presentation_rules.allow_skip:
                presentable[module_id] = []
                continue

            presentable[module_id] = PresentationScheduler.next_units(
                module,
                units[module_id],
                snapshot,
                now,
                learner_id=learner_id,
                learner_request=module_id in requested,
                prerequisites_met=prerequisites_met,
            )

        course_complete = bool(states) and all(s == CompletionStatus.PASSED for s in states.values())
        logger.debug(
            "Evaluated course: %d/%d modules unlocked",
            len(unlocked), len(order),
            extra={"learner_id": learner_id, "course_id": course.course_id},
        )
        return ProgressionResult(
            course_id=course.course_id,
            learner_id=learner_id,
            evaluated_at=now,
            module_states=states,
            unlocked_modules=unlocked,
            presentable=presentable,
            summaries=summaries,
            course_complete=course_complete,
        )
