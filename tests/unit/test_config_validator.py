"""Unit tests for ModuleConfigValidator."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.engines.errors import DanglingRefError, InvalidCriteriaConfigError
from src.engines.progression.config_validator import ModuleConfigValidator
from src.engines.progression.models import (
    GateLearningUnitCriteria,
    Module,
    PercentageCriteria,
    PointsCriteria,
    PresentationMode,
    PresentationRules,
    RepetitionMode,
)


@pytest.fixture
def units(make_unit):
    return [make_unit("u1", sequence=1), make_unit("u2", sequence=2)]


class TestCompletionCriteria:
    """Required fields and ranges of completion criteria."""

    def test_default_all_required_is_valid(self, make_module, units):
        ModuleConfigValidator.validate(make_module("m1"), units)

    def test_percentage_requires_value(self, make_module, units):
        with pytest.raises(InvalidCriteriaConfigError) as exc_info:
            ModuleConfigValidator.validate(make_module("m1", criteria=PercentageCriteria()), units)
        assert exc_info.value.field == "completion_criteria.percentage_required"
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_gate_requires_unit_and_score(self, make_module, units):
        with pytest.raises(InvalidCriteriaConfigError):
            ModuleConfigValidator.validate(
                make_module("m1", criteria=GateLearningUnitCriteria(gate_learning_unit_score=70)), units
            )
        with pytest.raises(InvalidCriteriaConfigError):
            ModuleConfigValidator.validate(
                make_module("m1", criteria=GateLearningUnitCriteria(gate_learning_unit_id="u1")), units
            )

    def test_gate_unit_must_belong_to_module(self, make_module, units):
        criteria = GateLearningUnitCriteria(gate_learning_unit_id="elsewhere", gate_learning_unit_score=70)
        with pytest.raises(DanglingRefError) as exc_info:
            ModuleConfigValidator.validate(make_module("m1", criteria=criteria), units)
        assert exc_info.value.kind == "learning_unit"

    def test_points_requires_value(self, make_module, units):
        with pytest.raises(InvalidCriteriaConfigError):
            ModuleConfigValidator.validate(make_module("m1", criteria=PointsCriteria()), units)

    def test_criteria_discriminated_by_type(self):
        """Raw payloads resolve to the variant named by type."""
        module = Module.model_validate({
            "id": "m1",
            "course_id": "c",
            "completion_criteria": {"type": "points", "points_required": 150},
        })
        assert isinstance(module.completion_criteria, PointsCriteria)

    def test_percentage_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            PercentageCriteria(percentage_required=120)


class TestPresentationRules:
    """Consistency of presentation and repetition rules."""

    def test_prescribed_requires_order(self, make_module, units):
        rules = PresentationRules(presentation_mode=PresentationMode.PRESCRIBED)
        with pytest.raises(InvalidCriteriaConfigError) as exc_info:
            ModuleConfigValidator.validate(make_module("m1", rules=rules), units)
        assert exc_info.value.field == "presentation_rules.prescribed_order"

    def test_prescribed_order_unknown_unit(self, make_module, units):
        rules = PresentationRules(presentation_mode=PresentationMode.PRESCRIBED, prescribed_order=["u2", "u9"])
        with pytest.raises(DanglingRefError):
            ModuleConfigValidator.validate(make_module("m1", rules=rules), units)

    def test_inactive_unit_not_referencable(self, make_module, make_unit):
        units = [make_unit("u1"), make_unit("u2", is_active=False)]
        rules = PresentationRules(presentation_mode=PresentationMode.PRESCRIBED, prescribed_order=["u1", "u2"])
        with pytest.raises(DanglingRefError):
            ModuleConfigValidator.validate(make_module("m1", rules=rules), units)

    def test_until_mastery_requires_threshold(self, make_module, units):
        rules = PresentationRules(repetition_mode=RepetitionMode.UNTIL_MASTERY)
        with pytest.raises(InvalidCriteriaConfigError):
            ModuleConfigValidator.validate(make_module("m1", rules=rules), units)

    def test_inverted_window_rejected(self, make_module, units):
        module = make_module(
            "m1",
            available_from=datetime(2025, 2, 1, tzinfo=timezone.utc),
            available_until=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        with pytest.raises(InvalidCriteriaConfigError) as exc_info:
            ModuleConfigValidator.validate(module, units)
        assert exc_info.value.field == "available_until"

    def test_complete_configuration_passes(self, make_module, units):
        rules = PresentationRules(
            presentation_mode=PresentationMode.PRESCRIBED,
            prescribed_order=["u2", "u1"],
            repetition_mode=RepetitionMode.UNTIL_MASTERY,
            mastery_threshold=85,
            max_repetitions=3,
        )
        criteria = GateLearningUnitCriteria(gate_learning_unit_id="u2", gate_learning_unit_score=70)
        ModuleConfigValidator.validate(make_module("m1", rules=rules, criteria=criteria), units)
