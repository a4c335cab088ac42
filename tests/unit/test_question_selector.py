"""Unit tests for QuestionSelector."""

import pytest

from src.engines.assessment.question_pool import (
    Difficulty,
    Question,
    QuestionBank,
    QuestionPool,
    QuestionSelection,
    SelectionMode,
)
from src.engines.assessment.question_selector import QuestionSelector, inverse_usage_weight
from src.engines.errors import InsufficientQuestionsError, QuestionBankNotFoundError


def _selection(count, mode=SelectionMode.SEQUENTIAL, banks=("bank-a", "bank-b"), **filters):
    return QuestionSelection(
        question_bank_ids=list(banks),
        question_count=count,
        selection_mode=mode,
        **filters,
    )


class TestCandidates:
    """Bank lookup and question filtering."""

    def test_bank_order_dedup_and_inactive(self, question_pool):
        """q7 is inactive; q8 appears in both banks and keeps its first position."""
        candidates = QuestionSelector.candidates(question_pool, _selection(1))
        assert [q.id for q in candidates] == ["q1", "q2", "q3", "q4", "q5", "q6", "q8", "q9", "q10", "q11", "q12"]

    def test_tag_filter(self, question_pool):
        candidates = QuestionSelector.candidates(question_pool, _selection(1, filter_by_tags=["algebra"]))
        assert [q.id for q in candidates] == ["q1", "q3", "q5", "q9", "q11"]

    def test_difficulty_filter_accepts_aliases(self, question_pool):
        selection = QuestionSelection.model_validate({
            "question_bank_ids": ["bank-a"],
            "question_count": 1,
            "filter_by_difficulty": ["easy"],
        })
        assert selection.filter_by_difficulty == [Difficulty.BEGINNER]
        candidates = QuestionSelector.candidates(question_pool, selection)
        assert [q.id for q in candidates] == ["q3", "q6"]

    def test_missing_bank(self, question_pool):
        with pytest.raises(QuestionBankNotFoundError) as exc_info:
            QuestionSelector.select(question_pool, _selection(1, banks=("bank-a", "nope")), attempt_id="a1")
        assert exc_info.value.code == "INVALID_QUESTION_BANK"
        assert exc_info.value.bank_ids == ["nope"]

    def test_inactive_bank(self, question_pool):
        with pytest.raises(QuestionBankNotFoundError):
            QuestionSelector.select(question_pool, _selection(1, banks=("bank-retired",)), attempt_id="a1")


class TestSelect:
    """Selection modes and their determinism."""

    def test_insufficient_questions(self):
        pool = QuestionPool(
            banks=[QuestionBank(id="b", question_ids=[f"q{i}" for i in range(8)])],
            questions=[Question(id=f"q{i}", difficulty=Difficulty.BEGINNER) for i in range(8)],
        )
        with pytest.raises(InsufficientQuestionsError) as exc_info:
            QuestionSelector.select(pool, _selection(10, banks=("b",)), attempt_id="a1")
        assert exc_info.value.code == "INSUFFICIENT_QUESTIONS"
        assert exc_info.value.details() == {"available": 8, "required": 10}

    def test_no_questions(self, question_pool):
        with pytest.raises(InsufficientQuestionsError) as exc_info:
            QuestionSelector.select(question_pool, _selection(1, filter_by_tags=["calculus"]), attempt_id="a1")
        assert exc_info.value.code == "NO_QUESTIONS"

    def test_sequential_is_deterministic(self, question_pool):
        first = QuestionSelector.select(question_pool, _selection(4), attempt_id="a1")
        second = QuestionSelector.select(question_pool, _selection(4), attempt_id="a2")
        assert first.question_ids == second.question_ids == ["q1", "q2", "q3", "q4"]
        assert first.available == 11

    def test_random_reproducible_per_attempt(self, question_pool):
        selection = _selection(5, SelectionMode.RANDOM)
        first = QuestionSelector.select(question_pool, selection, attempt_id="attempt-1")
        replay = QuestionSelector.select(question_pool, selection, attempt_id="attempt-1")
        assert first.question_ids == replay.question_ids
        assert len(set(first.question_ids)) == 5

    def test_random_differs_across_attempts(self, question_pool):
        selection = _selection(5, SelectionMode.RANDOM)
        results = {
            tuple(QuestionSelector.select(question_pool, selection, attempt_id=f"attempt-{n}").question_ids)
            for n in range(10)
        }
        assert len(results) > 1
        assert all(len(r) == 5 for r in results)

    def test_weighted_reproducible_and_unique(self, question_pool):
        selection = _selection(6, SelectionMode.WEIGHTED)
        first = QuestionSelector.select(question_pool, selection, attempt_id="a1")
        replay = QuestionSelector.select(question_pool, selection, attempt_id="a1")
        assert first.question_ids == replay.question_ids
        assert len(set(first.question_ids)) == 6

    def test_weighted_prefers_unused_questions(self, question_pool):
        """Heavily used questions are drawn far less often than fresh ones."""
        usage = {f"q{i}": 1000 for i in range(1, 13) if i != 2}
        selection = _selection(1, SelectionMode.WEIGHTED)
        picks = [
            QuestionSelector.select(question_pool, selection, attempt_id=f"a{n}", usage_counts=usage).question_ids[0]
            for n in range(50)
        ]
        assert picks.count("q2") > 40

    def test_weighted_custom_weight(self, question_pool):
        only_q5 = lambda question, usage: 1.0 if question.id == "q5" else 0.0  # noqa: E731
        result = QuestionSelector.select(
            question_pool, _selection(1, SelectionMode.WEIGHTED), attempt_id="a1", weight_fn=only_q5
        )
        assert result.question_ids == ["q5"]

    def test_inverse_usage_weight(self):
        question = Question(id="q", difficulty=Difficulty.ADVANCED)
        assert inverse_usage_weight(question, None) == 1.0
        assert inverse_usage_weight(question, 0) == 1.0
        assert inverse_usage_weight(question, 3) == 0.25

    def test_check_publishable(self, question_pool):
        assert QuestionSelector.check_publishable(question_pool, _selection(11)) == 11
        with pytest.raises(InsufficientQuestionsError):
            QuestionSelector.check_publishable(question_pool, _selection(12))
