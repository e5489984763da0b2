# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Manual term result schemas (continuous assessment plus exam)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.datetime import ensure_utc


class TermResultRequest(BaseModel):
    """Scores entered by a teacher for one student, subject and term."""

    student_id: str = Field(min_length=1, max_length=64)
    subject_id: str = Field(min_length=1, max_length=64)
    term: str = Field(min_length=1, max_length=50)
    ca_score: int
    exam_score: int


class TermResultRecord(BaseModel):
    """A stored term result."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    subject_id: str
    term: str
    ca_score: int
    exam_score: int
    total_score: int
    grade_band: str
    recorded_at: datetime

    @field_validator("recorded_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TermResultListResponse(BaseModel):
    """Response for listing a student's term results."""

    results: list[TermResultRecord]
    total: int
