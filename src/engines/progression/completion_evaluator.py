"""
Completion Evaluator - Decides pass/fail of a module for one learner.

Criteria:
- all_required: every required unit completed
- percentage: completed required / total required >= percentage_required
- gate_learning_unit: best score of the gate unit >= gate score
- points: sum of best scores (clamped per unit) >= points_required
Any variant may additionally require every exposition unit to be attempted.
"""

from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from src.engines.errors import InvalidCriteriaConfigError
from src.engines.progression.models import (
    AllRequiredCriteria,
    CompletionStatus,
    GateLearningUnitCriteria,
    LearnerModuleProgress,
    LearningUnit,
    LearningUnitCategory,
    Module,
    PercentageCriteria,
    PointsCriteria,
)
from src.engines.progression.progress_fold import (
    UnitAggregate,
    aggregate_for,
    can_attempt_again,
    fold_attempts,
    is_completed,
)


class ModuleProgressSummary(BaseModel):
    """Learner statistics for one module."""

    module_id: str
    status: CompletionStatus
    units_completed: int
    units_total: int
    completion_percentage: float
    points_earned: float
    attempt_count: int


class _Verdict:
    """Whether the criteria are met, and which units could still change that."""

    def __init__(self, met: bool, outstanding: List[LearningUnit]):
        self.met = met
        self.outstanding = outstanding


def _required(value: Optional[float], field: str) -> float:
    if value is None:
        raise InvalidCriteriaConfigError(f"completion_criteria.{field}", f"completion criteria requires {field}")
    return value


class CompletionEvaluator:
    """
    Evaluates module completion from a folded attempt history.

    Usage:
        status = CompletionEvaluator.evaluate(module, units, progress)
    """

    @classmethod
    def required_completion_percentage(
        cls,
        units: Sequence[LearningUnit],
        aggregates: Dict[str, UnitAggregate],
    ) -> float:
        """Share of required units completed, 0-100. No required units counts as complete."""
        required = [u for u in units if u.is_required]
        if not required:
            return 100.0
        done = sum(1 for u in required if is_completed(u, aggregate_for(aggregates, u.id)))
        return done * 100 / len(required)

    @classmethod
    def points_earned(cls, units: Sequence[LearningUnit], aggregates: Dict[str, UnitAggregate]) -> float:
        total = 0.0
        for unit in units:
            best = aggregate_for(aggregates, unit.id).best_score
            if best is not None:
                total += min(best, unit.max_points)
        return total

    @classmethod
    def _judge(
        cls,
        module: Module,
        units: Sequence[LearningUnit],
        aggregates: Dict[str, UnitAggregate],
    ) -> _Verdict:
        criteria = module.completion_criteria

        if isinstance(criteria, AllRequiredCriteria):
            outstanding = [
                u for u in units
                if u.is_required and not is_completed(u, aggregate_for(aggregates, u.id))
            ]
            verdict = _Verdict(not outstanding, outstanding)
        elif isinstance(criteria, PercentageCriteria):
            threshold = _required(criteria.percentage_required, "percentage_required")
            outstanding = [
                u for u in units
                if u.is_required and not is_completed(u, aggregate_for(aggregates, u.id))
            ]
            met = cls.required_completion_percentage(units, aggregates) >= threshold
            verdict = _Verdict(met, outstanding)
        elif isinstance(criteria, GateLearningUnitCriteria):
            gate_id = criteria.gate_learning_unit_id
            if gate_id is None:
                raise InvalidCriteriaConfigError(
                    "completion_criteria.gate_learning_unit_id",
                    "completion criteria requires gate_learning_unit_id",
                )
            min_score = _required(criteria.gate_learning_unit_score, "gate_learning_unit_score")
            gate = aggregate_for(aggregates, gate_id)
            met = gate.best_score is not None and gate.best_score >= min_score
            gate_unit = [u for u in units if u.id == gate_id]
            verdict = _Verdict(met, [] if met else gate_unit)
        elif isinstance(criteria, PointsCriteria):
            required_points = _required(criteria.points_required, "points_required")
            outstanding = [
                u for u in units
                if (aggregate_for(aggregates, u.id).best_score or 0) < u.max_points
            ]
            verdict = _Verdict(cls.points_earned(units, aggregates) >= required_points, outstanding)
        else:
            raise InvalidCriteriaConfigError("completion_criteria.type", f"unknown criteria {criteria!r}")

        if criteria.require_all_expositions:
            unseen = [
                u for u in units
                if u.category == LearningUnitCategory.EXPOSITION and not aggregate_for(aggregates, u.id).attempted
            ]
            if unseen:
                verdict = _Verdict(False, verdict.outstanding + unseen)
        return verdict

    @classmethod
    def evaluate_aggregates(
        cls,
        module: Module,
        units: Sequence[LearningUnit],
        aggregates: Dict[str, UnitAggregate],
    ) -> CompletionStatus:
        verdict = cls._judge(module, units, aggregates)
        if verdict.met:
            return CompletionStatus.PASSED
        if not any(aggregate_for(aggregates, u.id).attempted for u in units):
            return CompletionStatus.NOT_STARTED

        # Terminal once no unit that could still move the criteria will be offered again.
        rules = module.presentation_rules
        if rules.max_repetitions is not None and not any(
            can_attempt_again(u, rules, aggregate_for(aggregates, u.id)) for u in verdict.outstanding
        ):
            return CompletionStatus.FAILED
        return CompletionStatus.IN_PROGRESS

    @classmethod
    def evaluate(
        cls,
        module: Module,
        units: Sequence[LearningUnit],
        progress: Optional[LearnerModuleProgress],
    ) -> CompletionStatus:
        """
        Evaluate a learner's completion status for one module.

        Args:
            module: Module with its completion criteria and presentation rules
            units: Active learning units of the module
            progress: Learner's attempt history (None when never started)

        Returns:
            CompletionStatus; FAILED only once no outstanding unit can be attempted again
        """
        aggregates = fold_attempts(progress.attempts if progress else [])
        return cls.evaluate_aggregates(module, units, aggregates)

    @classmethod
    def summarize(
        cls,
        module: Module,
        units: Sequence[LearningUnit],
        progress: Optional[LearnerModuleProgress],
    ) -> ModuleProgressSummary:
        """Status plus the unit counters the module read endpoints display."""
        attempts = progress.attempts if progress else []
        aggregates = fold_attempts(attempts)
        return ModuleProgressSummary(
            module_id=module.id,
            status=cls.evaluate_aggregates(module, units, aggregates),
            units_completed=sum(1 for u in units if is_completed(u, aggregate_for(aggregates, u.id))),
            units_total=len(units),
            completion_percentage=round(cls.required_completion_percentage(units, aggregates), 2),
            points_earned=cls.points_earned(units, aggregates),
            attempt_count=len(attempts),
        )
