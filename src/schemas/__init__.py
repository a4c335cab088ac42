"""
Pydantic schemas for API request/response validation.
"""

from src.schemas.assessment import (
    MutationCheckRequest,
    MutationCheckResponse,
    PublishCheckRequest,
    PublishCheckResponse,
    QuestionSelectRequest,
    QuestionSelectResponse,
)
from src.schemas.common import (
    ErrorResponse,
    HealthResponse,
    ValidationResponse,
)
from src.schemas.progression import (
    CourseProgressionRequest,
    ModuleCompletionRequest,
    ModuleConfigValidateRequest,
    ModuleGraphValidateRequest,
    ModuleGraphValidateResponse,
    ModuleReorderRequest,
    ModuleReorderResponse,
    NextUnitsRequest,
    NextUnitsResponse,
    PrerequisiteUpdate,
)

__all__ = [
    # Assessment
    "MutationCheckRequest",
    "MutationCheckResponse",
    "PublishCheckRequest",
    "PublishCheckResponse",
    "QuestionSelectRequest",
    "QuestionSelectResponse",
    # Progression
    "CourseProgressionRequest",
    "ModuleCompletionRequest",
    "ModuleConfigValidateRequest",
    "ModuleGraphValidateRequest",
    "ModuleGraphValidateResponse",
    "ModuleReorderRequest",
    "ModuleReorderResponse",
    "NextUnitsRequest",
    "NextUnitsResponse",
    "PrerequisiteUpdate",
    # Common
    "ErrorResponse",
    "HealthResponse",
    "ValidationResponse",
]
