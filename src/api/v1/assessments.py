"""
Assessment endpoints - question selection, publish and mutation checks.
"""

from fastapi import APIRouter

from src.engines.assessment.attempt_guard import ensure_mutable
from src.engines.assessment.question_selector import QuestionSelector
from src.engines.errors import ActiveAttemptsError
from src.logging_config import get_logger
from src.schemas.assessment import (
    MutationCheckRequest,
    MutationCheckResponse,
    PublishCheckRequest,
    PublishCheckResponse,
    QuestionSelectRequest,
    QuestionSelectResponse,
)
from src.schemas.common import ErrorResponse

router = APIRouter()
logger = get_logger(__name__)

_ERRORS = {400: {"model": ErrorResponse}}


@router.post(
    "/assessments/{assessment_id}/attempts/{attempt_id}/questions",
    response_model=QuestionSelectResponse,
    responses=_ERRORS,
)
async def select_questions(assessment_id: str, attempt_id: str, body: QuestionSelectRequest):
    """Questions for an attempt. Replaying the same attempt id returns the same questions."""
    result = QuestionSelector.select(
        body.pool,
        body.selection,
        attempt_id=attempt_id,
        usage_counts=body.usage_counts,
    )
    return QuestionSelectResponse(
        assessment_id=assessment_id,
        attempt_id=attempt_id,
        question_ids=result.question_ids,
        selection_mode=result.selection_mode,
        available=result.available,
    )


@router.post(
    "/assessments/{assessment_id}/publish-check",
    response_model=PublishCheckResponse,
    responses=_ERRORS,
)
async def publish_check(assessment_id: str, body: PublishCheckRequest):
    """Whether the banks can serve the configured question count."""
    available = QuestionSelector.check_publishable(body.pool, body.selection)
    return PublishCheckResponse(available=available)


@router.post(
    "/assessments/{assessment_id}/mutation-check",
    response_model=MutationCheckResponse,
    responses=_ERRORS,
)
async def mutation_check(assessment_id: str, body: MutationCheckRequest):
    """Whether an update, archive or delete is safe given the assessment's attempts."""
    try:
        ensure_mutable(body.action, body.attempts, body.changed_fields)
    except ActiveAttemptsError as e:
        logger.info(
            "Rejected %s of assessment %s: %s", body.action.value, assessment_id, e.code,
            extra={"attempt_count": len(e.attempt_ids)},
        )
        raise
    return MutationCheckResponse()
