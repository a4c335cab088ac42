"""
Pydantic schemas for the assessment API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from src.engines.assessment.attempt_guard import AssessmentAction, AssessmentAttemptSnapshot
from src.engines.assessment.question_pool import QuestionPool, QuestionSelection, SelectionMode


class QuestionSelectRequest(BaseModel):
    """Pool snapshot and selection rules for one attempt."""

    pool: QuestionPool
    selection: QuestionSelection
    usage_counts: Optional[Dict[str, int]] = None


class QuestionSelectResponse(BaseModel):
    assessment_id: str
    attempt_id: str
    question_ids: List[str]
    selection_mode: SelectionMode
    available: int


class PublishCheckRequest(BaseModel):
    pool: QuestionPool
    selection: QuestionSelection


class PublishCheckResponse(BaseModel):
    publishable: bool = True
    available: int


class MutationCheckRequest(BaseModel):
    """A proposed assessment change and the attempts that reference it."""

    action: AssessmentAction
    attempts: List[AssessmentAttemptSnapshot] = []
    changed_fields: List[str] = []


class MutationCheckResponse(BaseModel):
    allowed: bool = True
