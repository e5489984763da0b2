# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tolerant answer-key scoring.

Scoring never fails on malformed answer arrays: a missing, null or
out-of-range answer is simply counted as incorrect.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from src.core.grading.bands import GradeBand, band_for


@dataclass(frozen=True)
class AnswerKeyItem:
    """One question of an answer key.

    Attributes:
        ordinal_index: 0-based position of the question, also the index
            of its answer in a submission.
        correct_answer: Expected answer token.
    """

    ordinal_index: int
    correct_answer: Any


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one answer set against a key."""

    correct_count: int
    total_questions: int
    score_percent: int
    grade_band: GradeBand


def normalize_answer(value: Any) -> str:
    """Stringify, trim and lowercase an answer token."""
    return str(value).strip().lower()


def answers_match(given: Any, expected: Any) -> bool:
    """Compare two answer tokens case-insensitively; ``None`` never matches."""
    if given is None or expected is None:
        return False
    return normalize_answer(given) == normalize_answer(expected)


def percent_half_up(correct: int, total: int) -> int:
    """Return ``round(100 * correct / total)`` with halves rounded up.

    An empty key scores 0 rather than dividing by zero.
    """
    if total <= 0:
        return 0
    ratio = Decimal(100 * correct) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def score_answers(key: Sequence[AnswerKeyItem], answers: Sequence[Any] | None) -> ScoreResult:
    """Score an answer set against an answer key.

    Args:
        key: Questions of the assessment, in any order.
        answers: Submitted tokens aligned to ``ordinal_index``.

    Returns:
        ScoreResult with the correct count, percentage and grade band.
    """
    answers = list(answers) if answers is not None else []
    correct = 0
    for item in key:
        index = item.ordinal_index
        if 0 <= index < len(answers) and answers_match(answers[index], item.correct_answer):
            correct += 1

    percent = percent_half_up(correct, len(key))
    return ScoreResult(
        correct_count=correct,
        total_questions=len(key),
        score_percent=percent,
        grade_band=band_for(percent),
    )
