# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade band table.

Maps a percentage score to a WAEC-style grade band. The same table backs
both automatic assessment scoring and manual continuous-assessment plus
exam entry, so the two paths always agree.

| score    | band |
|----------|------|
| >= 75    | A1   |
| 70 - 74  | B2   |
| 65 - 69  | B3   |
| 60 - 64  | C4   |
| 55 - 59  | C5   |
| 50 - 54  | C6   |
| 45 - 49  | D7   |
| 40 - 44  | E8   |
| < 40     | F9   |

Example:
    >>> band_for(75)
    <GradeBand.A1: 'A1'>
    >>> band_for(39).value
    'F9'
"""

from enum import Enum


class GradeBand(str, Enum):
    """Discrete grade bands, best first."""

    A1 = "A1"
    B2 = "B2"
    B3 = "B3"
    C4 = "C4"
    C5 = "C5"
    C6 = "C6"
    D7 = "D7"
    E8 = "E8"
    F9 = "F9"


# (inclusive lower bound, band), highest threshold first
GRADE_BANDS: tuple[tuple[int, GradeBand], ...] = (
    (75, GradeBand.A1),
    (70, GradeBand.B2),
    (65, GradeBand.B3),
    (60, GradeBand.C4),
    (55, GradeBand.C5),
    (50, GradeBand.C6),
    (45, GradeBand.D7),
    (40, GradeBand.E8),
    (0, GradeBand.F9),
)

MIN_SCORE = 0
MAX_SCORE = 100


def band_for(score_percent: int) -> GradeBand:
    """Resolve the grade band for a percentage score.

    Args:
        score_percent: Integer score in [0, 100].

    Returns:
        The single band whose range contains the score.

    Raises:
        ValueError: If the score is outside [0, 100] or not an integer.
    """
    if isinstance(score_percent, bool) or not isinstance(score_percent, int):
        raise ValueError(f"Score must be an integer, got {score_percent!r}")
    if not MIN_SCORE <= score_percent <= MAX_SCORE:
        raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {score_percent}")

    for lower_bound, band in GRADE_BANDS:
        if score_percent >= lower_bound:
            return band

    # Unreachable: the last threshold is MIN_SCORE
    return GradeBand.F9
