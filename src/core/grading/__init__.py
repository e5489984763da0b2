# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure grading primitives shared by every scoring path.

- bands: Grade band lookup (A1..F9)
- scoring: Tolerant answer-key scoring with round-half-up percentages
"""

from src.core.grading.bands import GRADE_BANDS, GradeBand, band_for
from src.core.grading.scoring import (
    AnswerKeyItem,
    ScoreResult,
    answers_match,
    normalize_answer,
    percent_half_up,
    score_answers,
)

__all__ = [
    "GRADE_BANDS",
    "GradeBand",
    "band_for",
    "AnswerKeyItem",
    "ScoreResult",
    "answers_match",
    "normalize_answer",
    "percent_half_up",
    "score_answers",
]
