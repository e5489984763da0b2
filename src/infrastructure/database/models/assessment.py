# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment models: answer-key questions, submissions and term results."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, UUIDPrimaryKeyMixin
from src.utils.datetime import utc_now


class Question(UUIDPrimaryKeyMixin, Base):
    """One answer-key item of an assessment.

    Questions are authored elsewhere and are immutable once the
    assessment accepts submissions.
    """

    __tablename__ = "questions"
    __table_args__ = (
        UniqueConstraint("assessment_id", "ordinal_index", name="uq_question_ordinal"),
    )

    assessment_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    ordinal_index: Mapped[int] = mapped_column(Integer, nullable=False)
    prompt: Mapped[str | None] = mapped_column(Text, nullable=True)
    correct_answer: Mapped[str] = mapped_column(String(500), nullable=False)


class Submission(UUIDPrimaryKeyMixin, Base):
    """One grading event; at most one per assessment and student."""

    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("assessment_id", "subject_id", name="uq_submission_once"),
    )

    assessment_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    answers: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    score_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    grade_band: Mapped[str] = mapped_column(String(4), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )


class TermResult(UUIDPrimaryKeyMixin, Base):
    """Manually entered continuous-assessment plus exam result."""

    __tablename__ = "term_results"
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", "term", name="uq_term_result"),
    )

    student_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[str] = mapped_column(String(64), nullable=False)
    term: Mapped[str] = mapped_column(String(50), nullable=False)
    ca_score: Mapped[int] = mapped_column(Integer, nullable=False)
    exam_score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    grade_band: Mapped[str] = mapped_column(String(4), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
