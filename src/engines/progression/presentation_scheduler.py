"""
Presentation Scheduler - Which learning units a learner may attempt next.

Orders a module's units by its presentation mode and labels each one
available, locked, cooling down or exhausted according to the repetition
rules. Units that are done and not re-offered are left out.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from src.engines.progression.models import (
    LearnerModuleProgress,
    LearningUnit,
    LearningUnitCategory,
    Module,
    PresentationMode,
    RepetitionMode,
    as_utc,
)
from src.engines.progression.progress_fold import (
    UnitAggregate,
    aggregate_for,
    fold_attempts,
    is_exhausted,
    is_repeat_offered,
)
from src.engines.seeding import seeded_rng
from src.logging_config import get_logger

logger = get_logger(__name__)


class Eligibility(str, Enum):
    AVAILABLE = "available"
    LOCKED = "locked"
    COOLDOWN = "cooldown"
    EXHAUSTED = "exhausted"


class ScheduledUnit(BaseModel):
    """A unit the learner is shown, with why and when it can be attempted."""

    unit_id: str
    category: LearningUnitCategory
    eligibility: Eligibility
    available_at: Optional[datetime] = None  # end of cooldown
    skipped: bool = False  # offered although prerequisite modules are incomplete
    attempt_count: int = 0


def _within(now: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and now < start:
        return False
    if end is not None and now > end:
        return False
    return True


class PresentationScheduler:
    """
    Computes the presentable units of one module for one learner.

    Usage:
        entries = PresentationScheduler.next_units(module, units, progress, now, learner_id=lid)
    """

    @classmethod
    def order_units(
        cls,
        module: Module,
        units: Sequence[LearningUnit],
        learner_id: str,
    ) -> List[LearningUnit]:
        """Units in presentation order; stable for a given learner and module."""
        rules = module.presentation_rules
        if rules.presentation_mode == PresentationMode.PRESCRIBED:
            by_id = {u.id: u for u in units}
            ordered: List[LearningUnit] = []
            seen = set()
            for unit_id in rules.prescribed_order or []:
                if unit_id in by_id and unit_id not in seen:
                    seen.add(unit_id)
                    ordered.append(by_id[unit_id])
            return ordered

        ordered = sorted(units, key=lambda u: (u.sequence, u.id))
        if rules.presentation_mode == PresentationMode.RANDOM:
            seeded_rng("presentation", learner_id, module.id).shuffle(ordered)
        return ordered

    @classmethod
    def _schedule_unit(
        cls,
        module: Module,
        unit: LearningUnit,
        agg: UnitAggregate,
        now: datetime,
        learner_request: bool,
    ) -> Optional[ScheduledUnit]:
        rules = module.presentation_rules
        entry = ScheduledUnit(
            unit_id=unit.id,
            category=unit.category,
            eligibility=Eligibility.AVAILABLE,
            attempt_count=agg.attempt_count,
        )

        if not (
            _within(now, module.available_from, module.available_until)
            and _within(now, unit.available_from, unit.available_until)
        ):
            return entry.model_copy(update={"eligibility": Eligibility.LOCKED})
        if not agg.attempted:
            return entry
        if not is_repeat_offered(unit, rules, agg, learner_request):
            return None
        if is_exhausted(rules, agg):
            return entry.model_copy(update={"eligibility": Eligibility.EXHAUSTED})
        if rules.repetition_mode == RepetitionMode.SPACED and agg.last_attempt_at is not None:
            ready_at = agg.last_attempt_at + timedelta(minutes=rules.cooldown_between_repetitions)
            if now < ready_at:
                return entry.model_copy(
                    update={"eligibility": Eligibility.COOLDOWN, "available_at": ready_at}
                )
        return entry

    @classmethod
    def next_units(
        cls,
        module: Module,
        units: Sequence[LearningUnit],
        progress: Optional[LearnerModuleProgress],
        now: datetime,
        *,
        learner_id: str,
        learner_request: bool = False,
        prerequisites_met: bool = True,
    ) -> List[ScheduledUnit]:
        """
        Ordered units currently presentable to a learner.

        Args:
            module: Module whose presentation rules apply
            units: Learning units of the module (inactive ones are ignored)
            progress: Learner's attempt history in the module
            now: Evaluation instant
            learner_id: Seeds the random presentation order
            learner_request: Learner explicitly asked to repeat completed units
            prerequisites_met: All prerequisite modules are passed

        Returns:
            Scheduled units in presentation order; a single entry when the
            module does not show all available units
        """
        now = as_utc(now)
        rules = module.presentation_rules
        active = [u for u in units if u.is_active and u.module_id == module.id]
        aggregates: Dict[str, UnitAggregate] = fold_attempts(progress.attempts if progress else [])

        entries: List[ScheduledUnit] = []
        for unit in cls.order_units(module, active, learner_id):
            entry = cls._schedule_unit(module, unit, aggregate_for(aggregates, unit.id), now, learner_request)
            if entry is not None:
                entries.append(entry)

        if not prerequisites_met:
            if rules.allow_skip:
                entries = [
                    e.model_copy(update={"skipped": True}) if e.eligibility == Eligibility.AVAILABLE else e
                    for e in entries
                ]
            else:
                entries = [
                    e.model_copy(update={"eligibility": Eligibility.LOCKED, "available_at": None})
                    for e in entries
                ]

        if not rules.show_all_available and entries:
            upcoming = next((e for e in entries if e.eligibility == Eligibility.AVAILABLE), entries[0])
            entries = [upcoming]

        logger.debug(
            "Scheduled %d units for module %s", len(entries), module.id,
            extra={"learner_id": learner_id, "module_id": module.id},
        )
        return entries
