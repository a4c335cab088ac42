"""
Attempt Guard - Assessment mutations that attempts make unsafe.
"""

from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from src.engines.errors import ActiveAttemptsError

# Changing these would alter the questions or grading of an attempt in flight.
LOCKED_FIELDS = frozenset({"question_selection", "passing_score", "time_limit"})


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    GRADED = "graded"
    ABANDONED = "abandoned"


class AssessmentAction(str, Enum):
    UPDATE = "update"
    ARCHIVE = "archive"
    DELETE = "delete"


class AssessmentAttemptSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: AttemptStatus


def ensure_mutable(
    action: AssessmentAction,
    attempts: Iterable[AssessmentAttemptSnapshot],
    changed_fields: Optional[Iterable[str]] = None,
) -> None:
    """
    Raise ActiveAttemptsError if the action is not allowed given the attempts.

    update only conflicts when it touches a locked field.
    """
    attempts = list(attempts)
    active: List[str] = [a.id for a in attempts if a.status == AttemptStatus.IN_PROGRESS]

    if action == AssessmentAction.DELETE:
        if attempts:
            raise ActiveAttemptsError(action.value, [a.id for a in attempts], code=ActiveAttemptsError.HAS_ATTEMPTS)
        return

    if action == AssessmentAction.ARCHIVE:
        if active:
            raise ActiveAttemptsError(action.value, active)
        return

    touched = LOCKED_FIELDS.intersection(changed_fields or ())
    if touched and active:
        raise ActiveAttemptsError(action.value, active)
