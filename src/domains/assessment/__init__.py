# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment grading domain."""

from src.domains.assessment.service import ScoringEngine

__all__ = ["ScoringEngine"]
