"""
Assessment Engine - Question selection and attempt-safety checks.

Components:
- QuestionSelector: sequential / seeded random / seeded weighted selection
- ensure_mutable: blocks assessment changes that would affect attempts
"""

from src.engines.assessment.attempt_guard import (
    AssessmentAction,
    AssessmentAttemptSnapshot,
    AttemptStatus,
    ensure_mutable,
)
from src.engines.assessment.question_pool import (
    Difficulty,
    Question,
    QuestionBank,
    QuestionPool,
    QuestionSelection,
    SelectionMode,
    SelectionResult,
)
from src.engines.assessment.question_selector import (
    QuestionSelector,
    inverse_usage_weight,
    uniform_weight,
)

__all__ = [
    "AssessmentAction",
    "AssessmentAttemptSnapshot",
    "AttemptStatus",
    "ensure_mutable",
    "Difficulty",
    "Question",
    "QuestionBank",
    "QuestionPool",
    "QuestionSelection",
    "SelectionMode",
    "SelectionResult",
    "QuestionSelector",
    "inverse_usage_weight",
    "uniform_weight",
]
