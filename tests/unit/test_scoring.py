# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for answer-key scoring."""

import pytest

from src.core.grading import (
    AnswerKeyItem,
    GradeBand,
    answers_match,
    normalize_answer,
    percent_half_up,
    score_answers,
)


def make_key(*answers) -> list[AnswerKeyItem]:
    """Build an answer key with ordinals 0..n-1."""
    return [AnswerKeyItem(ordinal_index=i, correct_answer=a) for i, a in enumerate(answers)]


class TestNormalization:
    """Tests for answer comparison."""

    def test_normalize_trims_and_lowercases(self) -> None:
        assert normalize_answer("  TRUE ") == "true"

    def test_normalize_stringifies(self) -> None:
        assert normalize_answer(2) == "2"

    @pytest.mark.parametrize(
        ("given", "expected"),
        [("B", "b"), (" 2", "2"), (2, "2"), ("TRUE", "true"), ("Lagos ", "lagos")],
    )
    def test_matching_answers(self, given, expected) -> None:
        assert answers_match(given, expected)

    def test_none_never_matches(self) -> None:
        assert not answers_match(None, "none")
        assert not answers_match("none", None)

    def test_different_answers(self) -> None:
        assert not answers_match("y", "x")


class TestPercentHalfUp:
    """Tests for percentage rounding."""

    @pytest.mark.parametrize(
        ("correct", "total", "expected"),
        [
            (3, 4, 75),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 rounds up
            (5, 8, 63),  # 62.5 rounds up
            (0, 5, 0),
            (5, 5, 100),
        ],
    )
    def test_rounding(self, correct: int, total: int, expected: int) -> None:
        assert percent_half_up(correct, total) == expected

    def test_empty_key_scores_zero(self) -> None:
        assert percent_half_up(0, 0) == 0


class TestScoreAnswers:
    """Tests for score_answers."""

    def test_reference_scenario(self) -> None:
        """Three of four tolerant matches is 75% and A1."""
        result = score_answers(make_key("b", "2", "true", "x"), ["B", " 2", "TRUE", "y"])

        assert result.correct_count == 3
        assert result.total_questions == 4
        assert result.score_percent == 75
        assert result.grade_band == GradeBand.A1

    def test_empty_key(self) -> None:
        """No questions scores 0 and F9 without dividing by zero."""
        result = score_answers([], ["a", "b"])

        assert result.correct_count == 0
        assert result.total_questions == 0
        assert result.score_percent == 0
        assert result.grade_band == GradeBand.F9

    def test_short_answer_list_counts_missing_as_wrong(self) -> None:
        result = score_answers(make_key("a", "b", "c", "d"), ["a"])

        assert result.correct_count == 1
        assert result.score_percent == 25

    def test_null_answers_are_wrong(self) -> None:
        result = score_answers(make_key("a", "b"), [None, "b"])

        assert result.correct_count == 1

    def test_missing_answer_list(self) -> None:
        result = score_answers(make_key("a", "b"), None)

        assert result.correct_count == 0
        assert result.grade_band == GradeBand.F9

    def test_extra_answers_are_ignored(self) -> None:
        result = score_answers(make_key("a"), ["a", "b", "c"])

        assert result.correct_count == 1
        assert result.score_percent == 100

    def test_answers_follow_ordinal_not_key_order(self) -> None:
        """Answers are indexed by ordinal, whatever order the key is in."""
        key = [
            AnswerKeyItem(ordinal_index=1, correct_answer="second"),
            AnswerKeyItem(ordinal_index=0, correct_answer="first"),
        ]
        result = score_answers(key, ["first", "second"])

        assert result.correct_count == 2

    def test_out_of_range_ordinal_is_wrong(self) -> None:
        key = [AnswerKeyItem(ordinal_index=5, correct_answer="a")]
        result = score_answers(key, ["a"])

        assert result.correct_count == 0

    def test_is_deterministic(self) -> None:
        key = make_key("a", "b", "c")
        answers = ["A", "x", "c "]

        assert score_answers(key, answers) == score_answers(key, answers)
