"""
Question Selector - Freezes the question set of an assessment attempt.

Sequential selection is fully reproducible. Random and weighted selection
draw from a private RNG seeded by the attempt id, so replaying an attempt
reproduces its questions.
"""

import math
from typing import Callable, Dict, List, Mapping, Optional

from src.config import get_settings
from src.engines.assessment.question_pool import (
    Question,
    QuestionPool,
    QuestionSelection,
    SelectionMode,
    SelectionResult,
)
from src.engines.errors import InsufficientQuestionsError, QuestionBankNotFoundError
from src.engines.seeding import seeded_rng
from src.logging_config import get_logger

logger = get_logger(__name__)

WeightFn = Callable[[Question, Optional[int]], float]


def inverse_usage_weight(question: Question, usage: Optional[int]) -> float:
    """Favour rarely used questions; no statistics means uniform."""
    if usage is None:
        return 1.0
    return 1.0 / (1 + max(usage, 0))


def uniform_weight(question: Question, usage: Optional[int]) -> float:
    return 1.0


WEIGHT_STRATEGIES: Dict[str, WeightFn] = {
    "inverse_usage": inverse_usage_weight,
    "uniform": uniform_weight,
}


class QuestionSelector:
    """
    Picks questions from banks per an assessment's selection rules.

    Usage:
        result = QuestionSelector.select(pool, selection, attempt_id="att-1")
        result.question_ids  # stored on the attempt
    """

    @classmethod
    def candidates(cls, pool: QuestionPool, selection: QuestionSelection) -> List[Question]:
        """
        Filtered candidates in bank-insertion order.

        Raises:
            QuestionBankNotFoundError: a listed bank is missing or inactive
        """
        banks = pool.bank_index()
        missing = [
            bank_id for bank_id in selection.question_bank_ids
            if bank_id not in banks or not banks[bank_id].is_active
        ]
        if missing:
            raise QuestionBankNotFoundError(missing)

        questions = pool.question_index()
        tags = set(selection.filter_by_tags) if selection.filter_by_tags else None
        difficulties = set(selection.filter_by_difficulty) if selection.filter_by_difficulty else None

        result: List[Question] = []
        seen = set()
        for bank_id in selection.question_bank_ids:
            for question_id in banks[bank_id].question_ids:
                if question_id in seen:
                    continue
                seen.add(question_id)
                question = questions.get(question_id)
                if question is None or not question.is_active:
                    continue
                if tags is not None and not tags.intersection(question.tags):
                    continue
                if difficulties is not None and question.difficulty not in difficulties:
                    continue
                result.append(question)
        return result

    @classmethod
    def check_publishable(cls, pool: QuestionPool, selection: QuestionSelection) -> int:
        """
        Verify the selection can be served without drawing any questions.

        Returns:
            Number of candidate questions

        Raises:
            QuestionBankNotFoundError, InsufficientQuestionsError
        """
        available = len(cls.candidates(pool, selection))
        if available < selection.question_count:
            raise InsufficientQuestionsError(available, selection.question_count)
        return available

    @classmethod
    def select(
        cls,
        pool: QuestionPool,
        selection: QuestionSelection,
        *,
        attempt_id: str,
        usage_counts: Optional[Mapping[str, int]] = None,
        weight_fn: Optional[WeightFn] = None,
    ) -> SelectionResult:
        """
        Select the questions of one attempt.

        Args:
            pool: Banks and questions snapshot
            selection: Assessment selection rules
            attempt_id: Seeds random and weighted selection
            usage_counts: Usage per question id, overrides Question.usage_count
            weight_fn: Weight for weighted mode; defaults to the configured strategy

        Returns:
            SelectionResult with exactly question_count ids
        """
        candidates = cls.candidates(pool, selection)
        count = selection.question_count
        if len(candidates) < count:
            raise InsufficientQuestionsError(len(candidates), count)

        mode = selection.selection_mode
        if mode == SelectionMode.SEQUENTIAL:
            chosen = candidates[:count]
        elif mode == SelectionMode.RANDOM:
            chosen = seeded_rng("random", attempt_id).sample(candidates, count)
        elif mode == SelectionMode.WEIGHTED:
            if weight_fn is None:
                weight_fn = WEIGHT_STRATEGIES[get_settings().weighted_selection_strategy]
            chosen = cls._weighted_sample(candidates, count, attempt_id, usage_counts or {}, weight_fn)
        else:
            raise ValueError(f"Unknown selection mode: {mode}")

        logger.debug(
            "Selected %d of %d questions (%s)", count, len(candidates), mode.value,
            extra={"attempt_id": attempt_id},
        )
        return SelectionResult(
            question_ids=[q.id for q in chosen],
            selection_mode=mode,
            available=len(candidates),
        )

    @staticmethod
    def _weighted_sample(
        candidates: List[Question],
        count: int,
        attempt_id: str,
        usage_counts: Mapping[str, int],
        weight_fn: WeightFn,
    ) -> List[Question]:
        # Efraimidis-Spirakis: keep the count largest log(u) / w keys.
        rng = seeded_rng("weighted", attempt_id)
        keyed = []
        for index, question in enumerate(candidates):
            usage = usage_counts.get(question.id, question.usage_count)
            weight = weight_fn(question, usage)
            u = 1.0 - rng.random()  # (0, 1]
            key = math.log(u) / weight if weight > 0 else -math.inf
            keyed.append((-key, index, question))
        keyed.sort(key=lambda item: (item[0], item[1]))
        return [question for _, _, question in keyed[:count]]
