# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment submission schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.datetime import ensure_utc


class SubmitAssessmentRequest(BaseModel):
    """A student's answers, index-aligned to question ordinals."""

    subject_id: str = Field(min_length=1, max_length=64, description="Submitting student")
    answers: list[Any] = Field(default_factory=list)


class GradeResult(BaseModel):
    """Outcome of grading one submission."""

    assessment_id: str
    subject_id: str
    correct_count: int
    total_questions: int
    score_percent: int
    grade_band: str


class SubmitAssessmentResponse(GradeResult):
    """Response for the submission endpoint."""

    success: bool = True


class SubmissionRecord(GradeResult):
    """A stored submission."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    answers: list[Any]
    submitted_at: datetime

    @field_validator("submitted_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
