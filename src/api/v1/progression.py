"""
Progression endpoints - unit scheduling, module completion, course progression.
"""

from fastapi import APIRouter, HTTPException, status

from src.api.deps import ClockDep, resolve_now
from src.engines.progression.completion_evaluator import CompletionEvaluator, ModuleProgressSummary
from src.engines.progression.orchestrator import ProgressionOrchestrator, ProgressionResult
from src.engines.progression.presentation_scheduler import PresentationScheduler
from src.schemas.common import ErrorResponse
from src.schemas.progression import (
    CourseProgressionRequest,
    ModuleCompletionRequest,
    NextUnitsRequest,
    NextUnitsResponse,
)

router = APIRouter()

_ERRORS = {400: {"model": ErrorResponse}}


def _check_module_path(module_id: str, body_module_id: str, progress) -> None:
    if body_module_id != module_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Module id does not match path")
    if progress is not None and progress.module_id != module_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Progress belongs to another module")


@router.post("/modules/{module_id}/next-units", response_model=NextUnitsResponse, responses=_ERRORS)
async def next_units(module_id: str, body: NextUnitsRequest, clock: ClockDep):
    """Units of the module the learner may attempt now, in presentation order."""
    _check_module_path(module_id, body.module.id, body.progress)
    now = resolve_now(clock, body.at)
    units = PresentationScheduler.next_units(
        body.module,
        body.learning_units,
        body.progress,
        now,
        learner_id=body.learner_id,
        learner_request=body.learner_request,
        prerequisites_met=body.prerequisites_met,
    )
    return NextUnitsResponse(
        module_id=module_id,
        learner_id=body.learner_id,
        evaluated_at=now,
        units=units,
    )


@router.post("/modules/{module_id}/completion", response_model=ModuleProgressSummary, responses=_ERRORS)
async def module_completion(module_id: str, body: ModuleCompletionRequest):
    """Completion status and counters of one module for one learner."""
    _check_module_path(module_id, body.module.id, body.progress)
    units = [u for u in body.learning_units if u.is_active and u.module_id == module_id]
    return CompletionEvaluator.summarize(body.module, units, body.progress)


@router.post("/courses/{course_id}/progression", response_model=ProgressionResult, responses=_ERRORS)
async def course_progression(course_id: str, body: CourseProgressionRequest, clock: ClockDep):
    """Per-module status, unlocked modules and presentable units for one learner."""
    if body.course.course_id != course_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Course id does not match path")
    return ProgressionOrchestrator.progress(
        body.course,
        body.learner_id,
        body.progress,
        resolve_now(clock, body.at),
        learner_requests=body.learner_requests,
    )
