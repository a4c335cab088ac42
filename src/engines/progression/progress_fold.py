"""
Per-unit aggregates derived from a learner's attempt history.

Aggregates are recomputed by a pure fold on every read; nothing here is
cached or stored. The repetition predicates are shared by the scheduler and
the completion evaluator so both agree on what can still be attempted.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional

from src.engines.progression.models import (
    LearningUnit,
    LearningUnitCategory,
    PresentationRules,
    RepetitionMode,
    UnitAttempt,
)


@dataclass(frozen=True)
class UnitAggregate:
    """Folded attempt history of one unit."""
    unit_id: str
    attempt_count: int = 0
    passed: bool = False
    best_score: Optional[float] = None
    last_attempt_at: Optional[datetime] = None
    last_passed: bool = False

    @property
    def attempted(self) -> bool:
        return self.attempt_count > 0

    @property
    def repetitions(self) -> int:
        """Attempts beyond the first."""
        return max(self.attempt_count - 1, 0)


def _step(agg: UnitAggregate, attempt: UnitAttempt) -> UnitAggregate:
    best = agg.best_score
    if attempt.score is not None and (best is None or attempt.score > best):
        best = attempt.score
    is_latest = agg.last_attempt_at is None or attempt.timestamp >= agg.last_attempt_at
    return UnitAggregate(
        unit_id=agg.unit_id,
        attempt_count=agg.attempt_count + 1,
        passed=agg.passed or attempt.passed,
        best_score=best,
        last_attempt_at=attempt.timestamp if is_latest else agg.last_attempt_at,
        last_passed=attempt.passed if is_latest else agg.last_passed,
    )


def fold_attempts(attempts: Iterable[UnitAttempt]) -> Dict[str, UnitAggregate]:
    """Fold an attempt history into one aggregate per attempted unit."""
    aggregates: Dict[str, UnitAggregate] = {}
    for attempt in attempts:
        current = aggregates.get(attempt.unit_id) or UnitAggregate(unit_id=attempt.unit_id)
        aggregates[attempt.unit_id] = _step(current, attempt)
    return aggregates


def aggregate_for(aggregates: Dict[str, UnitAggregate], unit_id: str) -> UnitAggregate:
    return aggregates.get(unit_id) or UnitAggregate(unit_id=unit_id)


def is_completed(unit: LearningUnit, agg: UnitAggregate) -> bool:
    """Exposition units have no pass/fail semantics; attempting them completes them."""
    if unit.category == LearningUnitCategory.EXPOSITION:
        return agg.attempted
    return agg.passed


def is_exhausted(rules: PresentationRules, agg: UnitAggregate) -> bool:
    """True once the unit has used up every allowed repetition."""
    if rules.max_repetitions is None:
        return False
    return agg.repetitions >= rules.max_repetitions


def is_satisfied(unit: LearningUnit, rules: PresentationRules, agg: UnitAggregate) -> bool:
    """Whether the unit needs no further attempts under the repetition mode."""
    if unit.category == LearningUnitCategory.EXPOSITION:
        return agg.attempted
    mode = rules.repetition_mode
    if mode in (RepetitionMode.NONE, RepetitionMode.UNTIL_PASSED):
        return agg.passed
    if mode == RepetitionMode.UNTIL_MASTERY or (
        mode == RepetitionMode.SPACED and rules.mastery_threshold is not None
    ):
        threshold = rules.mastery_threshold if rules.mastery_threshold is not None else 100.0
        return agg.best_score is not None and agg.best_score >= threshold
    if mode == RepetitionMode.SPACED:
        return agg.passed
    raise ValueError(f"Unknown repetition mode: {mode}")


def is_repeat_offered(
    unit: LearningUnit,
    rules: PresentationRules,
    agg: UnitAggregate,
    learner_request: bool = False,
) -> bool:
    """Whether an attempted unit is offered again, ignoring exhaustion and cooldown."""
    repeatable = unit.category in rules.repeatable_categories
    if is_satisfied(unit, rules, agg):
        return learner_request and rules.repeat_on.learner_request and repeatable
    if rules.repetition_mode == RepetitionMode.NONE and not repeatable:
        return False
    if agg.last_passed:
        return rules.repeat_on.below_mastery
    return rules.repeat_on.failed_attempt


def can_attempt_again(unit: LearningUnit, rules: PresentationRules, agg: UnitAggregate) -> bool:
    """A further attempt is still possible without an explicit learner request."""
    if not agg.attempted:
        return True
    return is_repeat_offered(unit, rules, agg) and not is_exhausted(rules, agg)
