"""
Module configuration checks run before a module write is committed.
"""

from typing import Iterable

from src.engines.errors import DanglingRefError, InvalidCriteriaConfigError
from src.engines.progression.models import (
    AllRequiredCriteria,
    GateLearningUnitCriteria,
    LearningUnit,
    Module,
    PercentageCriteria,
    PointsCriteria,
    PresentationMode,
    RepetitionMode,
)


class ModuleConfigValidator:
    """
    Rejects incomplete completion criteria and presentation rules at
    configuration time so they never reach learner-facing evaluation.
    """

    @classmethod
    def validate_criteria(cls, module: Module, unit_ids: set) -> None:
        criteria = module.completion_criteria
        if isinstance(criteria, AllRequiredCriteria):
            return
        if isinstance(criteria, PercentageCriteria):
            if criteria.percentage_required is None:
                raise InvalidCriteriaConfigError(
                    "completion_criteria.percentage_required",
                    "percentage completion requires percentage_required",
                )
        elif isinstance(criteria, GateLearningUnitCriteria):
            if criteria.gate_learning_unit_id is None:
                raise InvalidCriteriaConfigError(
                    "completion_criteria.gate_learning_unit_id",
                    "gate_learning_unit completion requires gate_learning_unit_id",
                )
            if criteria.gate_learning_unit_score is None:
                raise InvalidCriteriaConfigError(
                    "completion_criteria.gate_learning_unit_score",
                    "gate_learning_unit completion requires gate_learning_unit_score",
                )
            if criteria.gate_learning_unit_id not in unit_ids:
                raise DanglingRefError(module.id, criteria.gate_learning_unit_id, kind="learning_unit")
        elif isinstance(criteria, PointsCriteria):
            if criteria.points_required is None:
                raise InvalidCriteriaConfigError(
                    "completion_criteria.points_required",
                    "points completion requires points_required",
                )
        else:
            raise InvalidCriteriaConfigError("completion_criteria.type", f"unknown criteria {criteria!r}")

    @classmethod
    def validate_rules(cls, module: Module, unit_ids: set) -> None:
        rules = module.presentation_rules
        if rules.presentation_mode == PresentationMode.PRESCRIBED:
            if not rules.prescribed_order:
                raise InvalidCriteriaConfigError(
                    "presentation_rules.prescribed_order",
                    "prescribed presentation requires prescribed_order",
                )
            for unit_id in rules.prescribed_order:
                if unit_id not in unit_ids:
                    raise DanglingRefError(module.id, unit_id, kind="learning_unit")
        if rules.repetition_mode == RepetitionMode.UNTIL_MASTERY and rules.mastery_threshold is None:
            raise InvalidCriteriaConfigError(
                "presentation_rules.mastery_threshold",
                "until_mastery repetition requires mastery_threshold",
            )

    @classmethod
    def validate(cls, module: Module, learning_units: Iterable[LearningUnit]) -> None:
        """
        Validate one module's configuration against its learning units.

        Raises:
            InvalidCriteriaConfigError: a required variant field is missing
            DanglingRefError: the gate unit or a prescribed unit is not in the module
        """
        unit_ids = {u.id for u in learning_units if u.module_id == module.id and u.is_active}
        if (
            module.available_from is not None
            and module.available_until is not None
            and module.available_from > module.available_until
        ):
            raise InvalidCriteriaConfigError(
                "available_until",
                "available_until must not be earlier than available_from",
            )
        cls.validate_criteria(module, unit_ids)
        cls.validate_rules(module, unit_ids)
