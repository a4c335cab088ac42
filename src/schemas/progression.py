"""
Pydantic schemas for the progression API.

Request bodies carry the configuration and progress snapshots the engine
evaluates; the service keeps no state between calls.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from src.engines.progression.models import (
    CourseSnapshot,
    LearnerModuleProgress,
    LearningUnit,
    Module,
    UtcDatetime,
)
from src.engines.progression.presentation_scheduler import ScheduledUnit


class PrerequisiteUpdate(BaseModel):
    """Prerequisites a module is about to be given."""

    module_id: str
    prerequisites: List[str]


class ModuleGraphValidateRequest(BaseModel):
    """Course modules, optionally with a pending create or prerequisite change."""

    modules: List[Module]
    new_module: Optional[Module] = None
    prerequisite_update: Optional[PrerequisiteUpdate] = None


class ModuleGraphValidateResponse(BaseModel):
    valid: bool = True
    topological_order: List[str]


class ModuleReorderRequest(BaseModel):
    modules: List[Module]
    module_ids: List[str] = Field(..., description="Every module of the course in its new order")


class ModuleReorderResponse(BaseModel):
    positions: Dict[str, int]


class ModuleConfigValidateRequest(BaseModel):
    module: Module
    learning_units: List[LearningUnit] = []


class NextUnitsRequest(BaseModel):
    """Input to compute presentable units of one module."""

    module: Module
    learning_units: List[LearningUnit]
    learner_id: str
    progress: Optional[LearnerModuleProgress] = None
    learner_request: bool = False
    prerequisites_met: bool = True
    at: Optional[UtcDatetime] = None  # evaluation time, defaults to now


class NextUnitsResponse(BaseModel):
    module_id: str
    learner_id: str
    evaluated_at: datetime
    units: List[ScheduledUnit]


class ModuleCompletionRequest(BaseModel):
    module: Module
    learning_units: List[LearningUnit]
    progress: Optional[LearnerModuleProgress] = None


class CourseProgressionRequest(BaseModel):
    """A course and one learner's attempt histories."""

    course: CourseSnapshot
    learner_id: str
    progress: List[LearnerModuleProgress] = []
    learner_requests: List[str] = Field([], description="Modules where the learner asked to repeat units")
    at: Optional[UtcDatetime] = None
