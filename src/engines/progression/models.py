"""
Progression domain model.

Modules, learning units, presentation rules and learner attempt histories as
immutable snapshots supplied by storage collaborators. Completion criteria is
a tagged union discriminated by ``type``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so window and cooldown math never mixes kinds."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)


class LearningUnitCategory(str, Enum):
    """Kinds of learning unit content."""
    EXPOSITION = "exposition"
    PRACTICE = "practice"
    ASSESSMENT = "assessment"


class PresentationMode(str, Enum):
    PRESCRIBED = "prescribed"
    LEARNER_CHOICE = "learner_choice"
    RANDOM = "random"


class RepetitionMode(str, Enum):
    NONE = "none"
    UNTIL_PASSED = "until_passed"
    UNTIL_MASTERY = "until_mastery"
    SPACED = "spaced"


class CompletionStatus(str, Enum):
    """Learner-facing status of a module."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    PASSED = "passed"
    FAILED = "failed"


# Completion criteria variants. Payload fields stay optional because the
# contracts allow null; ModuleConfigValidator rejects incomplete variants.

class _CriteriaBase(_Snapshot):
    require_all_expositions: bool = False


class AllRequiredCriteria(_CriteriaBase):
    type: Literal["all_required"] = "all_required"


class PercentageCriteria(_CriteriaBase):
    type: Literal["percentage"] = "percentage"
    percentage_required: Optional[float] = Field(None, ge=0, le=100)


class GateLearningUnitCriteria(_CriteriaBase):
    type: Literal["gate_learning_unit"] = "gate_learning_unit"
    gate_learning_unit_id: Optional[str] = None
    gate_learning_unit_score: Optional[float] = Field(None, ge=0, le=100)


class PointsCriteria(_CriteriaBase):
    type: Literal["points"] = "points"
    points_required: Optional[float] = Field(None, ge=0)


CompletionCriteria = Annotated[
    Union[AllRequiredCriteria, PercentageCriteria, GateLearningUnitCriteria, PointsCriteria],
    Field(discriminator="type"),
]


class RepeatOn(_Snapshot):
    """Why a unit may be offered again."""
    failed_attempt: bool = True
    below_mastery: bool = True
    learner_request: bool = False


class PresentationRules(_Snapshot):
    """Ordering and repeatability of the units of one module."""

    presentation_mode: PresentationMode = PresentationMode.LEARNER_CHOICE
    prescribed_order: Optional[List[str]] = None
    repetition_mode: RepetitionMode = RepetitionMode.NONE
    mastery_threshold: Optional[float] = Field(None, ge=0, le=100)
    max_repetitions: Optional[int] = Field(None, ge=1)
    cooldown_between_repetitions: int = Field(0, ge=0)  # minutes
    repeat_on: RepeatOn = Field(default_factory=RepeatOn)
    repeatable_categories: List[LearningUnitCategory] = []
    show_all_available: bool = True
    allow_skip: bool = False


class Module(_Snapshot):
    """A module of a course and its configuration."""

    id: str
    course_id: str
    title: str = ""
    order: int = 0
    prerequisites: List[str] = []
    completion_criteria: CompletionCriteria = Field(default_factory=AllRequiredCriteria)
    presentation_rules: PresentationRules = Field(default_factory=PresentationRules)
    is_published: bool = False
    available_from: Optional[UtcDatetime] = None
    available_until: Optional[UtcDatetime] = None


class LearningUnit(_Snapshot):
    """An individual content item within a module."""

    id: str
    module_id: str
    title: str = ""
    category: LearningUnitCategory
    sequence: int = 0
    is_required: bool = True
    max_points: float = Field(100.0, ge=0)
    is_active: bool = True
    available_from: Optional[UtcDatetime] = None
    available_until: Optional[UtcDatetime] = None


class UnitAttempt(_Snapshot):
    """One recorded attempt at a learning unit."""

    unit_id: str
    timestamp: UtcDatetime
    score: Optional[float] = Field(None, ge=0, le=100)
    passed: bool = False


class LearnerModuleProgress(_Snapshot):
    """Attempt history of one learner within one module."""

    learner_id: str
    module_id: str
    attempts: List[UnitAttempt] = []


class CourseSnapshot(_Snapshot):
    """Configuration of one course as read from storage for a single query."""

    course_id: str
    modules: List[Module]
    learning_units: List[LearningUnit] = []

    def units_by_module(self) -> Dict[str, List[LearningUnit]]:
        """Active learning units grouped by module id."""
        grouped: Dict[str, List[LearningUnit]] = {m.id: [] for m in self.modules}
        for unit in self.learning_units:
            if unit.is_active and unit.module_id in grouped:
                grouped[unit.module_id].append(unit)
        return grouped
