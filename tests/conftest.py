"""
Pytest fixtures for progression engine tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.engines.assessment.question_pool import Difficulty, Question, QuestionBank, QuestionPool
from src.engines.progression.models import (
    LearnerModuleProgress,
    LearningUnit,
    LearningUnitCategory,
    Module,
    PresentationRules,
    UnitAttempt,
)

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return FIXED_NOW


@pytest.fixture
def make_module() -> Callable[..., Module]:
    """Build a module; criteria and rules default to the model defaults."""

    def _make(
        module_id: str,
        *,
        course_id: str = "course-1",
        order: int = 0,
        prerequisites: Optional[List[str]] = None,
        criteria=None,
        rules: Optional[PresentationRules] = None,
        **extra,
    ) -> Module:
        data = dict(
            id=module_id,
            course_id=course_id,
            title=f"Module {module_id}",
            order=order,
            prerequisites=prerequisites or [],
            **extra,
        )
        if criteria is not None:
            data["completion_criteria"] = criteria
        if rules is not None:
            data["presentation_rules"] = rules
        return Module(**data)

    return _make


@pytest.fixture
def make_unit() -> Callable[..., LearningUnit]:
    def _make(
        unit_id: str,
        module_id: str = "m1",
        category: LearningUnitCategory = LearningUnitCategory.PRACTICE,
        sequence: int = 0,
        **extra,
    ) -> LearningUnit:
        return LearningUnit(
            id=unit_id,
            module_id=module_id,
            title=f"Unit {unit_id}",
            category=category,
            sequence=sequence,
            **extra,
        )

    return _make


@pytest.fixture
def attempt(now: datetime) -> Callable[..., UnitAttempt]:
    """Attempt recorded minutes_ago before the fixed now."""

    def _attempt(
        unit_id: str,
        passed: bool = True,
        score: Optional[float] = None,
        minutes_ago: int = 60,
    ) -> UnitAttempt:
        if score is None:
            score = 100.0 if passed else 40.0
        return UnitAttempt(
            unit_id=unit_id,
            timestamp=now - timedelta(minutes=minutes_ago),
            score=score,
            passed=passed,
        )

    return _attempt


@pytest.fixture
def make_progress() -> Callable[..., LearnerModuleProgress]:
    def _make(module_id: str, attempts: List[UnitAttempt], learner_id: str = "learner-1") -> LearnerModuleProgress:
        return LearnerModuleProgress(learner_id=learner_id, module_id=module_id, attempts=attempts)

    return _make


@pytest.fixture
def question_pool() -> QuestionPool:
    """Two banks: bank-a holds q1..q8 (q7 inactive), bank-b holds q8..q12."""
    difficulties = [Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.ADVANCED]
    questions = [
        Question(
            id=f"q{i}",
            difficulty=difficulties[i % 3],
            tags=["algebra"] if i % 2 else ["geometry"],
            is_active=i != 7,
        )
        for i in range(1, 13)
    ]
    banks = [
        QuestionBank(id="bank-a", question_ids=[f"q{i}" for i in range(1, 9)]),
        QuestionBank(id="bank-b", question_ids=[f"q{i}" for i in range(8, 13)]),
        QuestionBank(id="bank-retired", question_ids=["q1"], is_active=False),
    ]
    return QuestionPool(banks=banks, questions=questions)


@pytest_asyncio.fixture
async def client():
    """HTTP client bound to the app with the clock pinned to FIXED_NOW."""
    from src.api.deps import get_clock
    from src.main import app

    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
