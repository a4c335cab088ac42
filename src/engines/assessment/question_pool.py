"""
Question pool - read-only snapshot of question banks for selection.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    """Question difficulty. Accepts the easy/medium/hard spelling of the question service."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def _missing_(cls, value):
        aliases = {"easy": cls.BEGINNER, "medium": cls.INTERMEDIATE, "hard": cls.ADVANCED}
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


class SelectionMode(str, Enum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"
    WEIGHTED = "weighted"


class Question(BaseModel):
    """A bank question as seen by the selector."""

    model_config = ConfigDict(frozen=True)

    id: str
    difficulty: Difficulty
    tags: List[str] = []
    is_active: bool = True
    usage_count: Optional[int] = Field(None, ge=0)  # global historical usage


class QuestionBank(BaseModel):
    """A named bank; question_ids keep insertion order."""

    model_config = ConfigDict(frozen=True)

    id: str
    question_ids: List[str] = []
    is_active: bool = True


class QuestionPool(BaseModel):
    """Banks and their questions as read for one selection."""

    model_config = ConfigDict(frozen=True)

    banks: List[QuestionBank]
    questions: List[Question]

    def bank_index(self) -> Dict[str, QuestionBank]:
        return {b.id: b for b in self.banks}

    def question_index(self) -> Dict[str, Question]:
        return {q.id: q for q in self.questions}


class QuestionSelection(BaseModel):
    """Selection rules of an assessment."""

    model_config = ConfigDict(frozen=True)

    question_bank_ids: List[str] = Field(..., min_length=1)
    question_count: int = Field(..., ge=1)
    selection_mode: SelectionMode = SelectionMode.SEQUENTIAL
    filter_by_tags: Optional[List[str]] = None
    filter_by_difficulty: Optional[List[Difficulty]] = None


class SelectionResult(BaseModel):
    """Questions frozen into an attempt, in presentation order."""

    question_ids: List[str]
    selection_mode: SelectionMode
    available: int
