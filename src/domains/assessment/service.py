# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scoring engine for answer-key assessments.

Grading is one-shot per (assessment, student): an existing submission is
looked up before anything is computed, and the unique constraint on
``submissions`` settles concurrent races at commit time. The loser gets
AlreadySubmittedError and the stored row is never touched.

Example:
    >>> engine = ScoringEngine(db)
    >>> result = await engine.grade("quiz-1", "0001", ["B", " 2", "TRUE", "y"])
    >>> result.score_percent, result.grade_band
    (75, 'A1')
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.grading import AnswerKeyItem, score_answers
from src.domains.errors import (
    AlreadySubmittedError,
    CollaboratorUnavailableError,
    NotFoundError,
    ValidationError,
)
from src.infrastructure.database.models import Question, Submission
from src.models.assessment import GradeResult, SubmissionRecord

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Grades submissions and records them exactly once.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the scoring engine.

        Args:
            db: Async database session.
        """
        self._db = db

    async def grade(
        self,
        assessment_id: str,
        subject_id: str,
        answers: Sequence[Any] | None,
    ) -> GradeResult:
        """Grade and record a submission.

        Args:
            assessment_id: Assessment being answered.
            subject_id: Submitting student.
            answers: Answer tokens aligned to question ordinals.

        Returns:
            The computed grade.

        Raises:
            ValidationError: If an id is blank.
            AlreadySubmittedError: If the student already submitted.
            CollaboratorUnavailableError: If the store fails.
        """
        if not assessment_id or not assessment_id.strip():
            raise ValidationError("assessment_id is required", details={"field": "assessment_id"})
        if not subject_id or not subject_id.strip():
            raise ValidationError("subject_id is required", details={"field": "subject_id"})

        answers = list(answers) if answers is not None else []

        try:
            if await self._find(assessment_id, subject_id) is not None:
                raise self._already_submitted(assessment_id, subject_id)

            key = await self._answer_key(assessment_id)
            score = score_answers(key, answers)

            submission = Submission(
                assessment_id=assessment_id,
                subject_id=subject_id,
                answers=answers,
                correct_count=score.correct_count,
                total_questions=score.total_questions,
                score_percent=score.score_percent,
                grade_band=score.grade_band.value,
            )
            self._db.add(submission)
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            logger.info(
                "Concurrent submission lost the race: assessment=%s subject=%s",
                assessment_id,
                subject_id,
            )
            raise self._already_submitted(assessment_id, subject_id) from e
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error("Failed to record submission for %s: %s", assessment_id, str(e))
            raise CollaboratorUnavailableError(
                "Submission store unavailable",
                details={"assessment_id": assessment_id},
            ) from e

        logger.info(
            "Graded assessment %s for %s: %d/%d -> %d%% %s",
            assessment_id,
            subject_id,
            score.correct_count,
            score.total_questions,
            score.score_percent,
            score.grade_band.value,
        )

        return GradeResult(
            assessment_id=assessment_id,
            subject_id=subject_id,
            correct_count=score.correct_count,
            total_questions=score.total_questions,
            score_percent=score.score_percent,
            grade_band=score.grade_band.value,
        )

    async def get_submission(self, assessment_id: str, subject_id: str) -> SubmissionRecord:
        """Return the stored submission.

        Raises:
            NotFoundError: If the student has not submitted.
        """
        submission = await self._find(assessment_id, subject_id)
        if submission is None:
            raise NotFoundError(
                "Submission not found",
                details={"assessment_id": assessment_id, "subject_id": subject_id},
            )
        return SubmissionRecord.model_validate(submission)

    async def _find(self, assessment_id: str, subject_id: str) -> Submission | None:
        result = await self._db.execute(
            select(Submission).where(
                Submission.assessment_id == assessment_id,
                Submission.subject_id == subject_id,
            )
        )
        return result.scalar_one_or_none()

    async def _answer_key(self, assessment_id: str) -> list[AnswerKeyItem]:
        result = await self._db.execute(
            select(Question)
            .where(Question.assessment_id == assessment_id)
            .order_by(Question.ordinal_index)
        )
        return [
            AnswerKeyItem(ordinal_index=q.ordinal_index, correct_answer=q.correct_answer)
            for q in result.scalars()
        ]

    @staticmethod
    def _already_submitted(assessment_id: str, subject_id: str) -> AlreadySubmittedError:
        return AlreadySubmittedError(
            "Assessment already submitted",
            details={"assessment_id": assessment_id, "subject_id": subject_id},
        )
