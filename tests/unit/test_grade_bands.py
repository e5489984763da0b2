# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the grade band table."""

import pytest

from src.core.grading import GRADE_BANDS, GradeBand, band_for


class TestBandFor:
    """Tests for band_for."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (100, GradeBand.A1),
            (75, GradeBand.A1),
            (74, GradeBand.B2),
            (70, GradeBand.B2),
            (69, GradeBand.B3),
            (65, GradeBand.B3),
            (64, GradeBand.C4),
            (60, GradeBand.C4),
            (59, GradeBand.C5),
            (55, GradeBand.C5),
            (54, GradeBand.C6),
            (50, GradeBand.C6),
            (49, GradeBand.D7),
            (45, GradeBand.D7),
            (44, GradeBand.E8),
            (40, GradeBand.E8),
            (39, GradeBand.F9),
            (0, GradeBand.F9),
        ],
    )
    def test_boundaries(self, score: int, expected: GradeBand) -> None:
        """Lower bounds are inclusive."""
        assert band_for(score) == expected

    def test_total_over_valid_range(self) -> None:
        """Every integer in [0, 100] resolves to exactly one band."""
        for score in range(0, 101):
            matching = [
                band
                for index, (lower, band) in enumerate(GRADE_BANDS)
                if score >= lower and (index == 0 or score < GRADE_BANDS[index - 1][0])
            ]
            assert len(matching) == 1
            assert band_for(score) == matching[0]

    def test_bands_are_ordered_best_first(self) -> None:
        """Thresholds strictly decrease down to zero."""
        lowers = [lower for lower, _ in GRADE_BANDS]
        assert lowers == sorted(lowers, reverse=True)
        assert len(set(lowers)) == len(lowers)
        assert lowers[-1] == 0

    def test_band_is_string_valued(self) -> None:
        """Bands serialize as their code."""
        assert band_for(80).value == "A1"
        assert band_for(80) == "A1"

    @pytest.mark.parametrize("score", [-1, 101, 1000])
    def test_out_of_range_rejected(self, score: int) -> None:
        """Scores outside [0, 100] raise ValueError."""
        with pytest.raises(ValueError):
            band_for(score)

    @pytest.mark.parametrize("score", [75.0, "75", None, True])
    def test_non_integer_rejected(self, score) -> None:
        """Only real integers are accepted."""
        with pytest.raises(ValueError):
            band_for(score)
