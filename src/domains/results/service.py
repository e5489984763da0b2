# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Manual term result entry.

Teachers enter a continuous-assessment score and an exam score per
student, subject and term. The total is banded with the same table the
scoring engine uses, so both grading paths always agree.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import GradingSettings
from src.core.grading import band_for
from src.domains.errors import (
    AlreadySubmittedError,
    CollaboratorUnavailableError,
    ValidationError,
)
from src.infrastructure.database.models import TermResult
from src.models.results import TermResultRecord

logger = logging.getLogger(__name__)


class ResultEntryService:
    """Records and lists term results.

    Attributes:
        ca_max: Highest accepted continuous-assessment score.
        exam_max: Highest accepted exam score.
    """

    def __init__(self, db: AsyncSession, ca_max: int = 40, exam_max: int = 60) -> None:
        if ca_max < 0 or exam_max < 0 or ca_max + exam_max != 100:
            raise ValueError("ca_max and exam_max must be non-negative and sum to 100")
        self._db = db
        self.ca_max = ca_max
        self.exam_max = exam_max

    @classmethod
    def from_settings(cls, db: AsyncSession, settings: GradingSettings) -> "ResultEntryService":
        """Build the service with configured score bounds."""
        return cls(db, ca_max=settings.ca_max, exam_max=settings.exam_max)

    async def record_result(
        self,
        student_id: str,
        subject_id: str,
        term: str,
        ca_score: int,
        exam_score: int,
    ) -> TermResultRecord:
        """Record one term result.

        Raises:
            ValidationError: Blank ids or scores out of bounds.
            AlreadySubmittedError: A result exists for the same student,
                subject and term.
            CollaboratorUnavailableError: If the store fails.
        """
        for field, value in (("student_id", student_id), ("subject_id", subject_id), ("term", term)):
            if not value or not value.strip():
                raise ValidationError(f"{field} is required", details={"field": field})
        self._check_bound("ca_score", ca_score, self.ca_max)
        self._check_bound("exam_score", exam_score, self.exam_max)

        total = ca_score + exam_score
        result = TermResult(
            student_id=student_id,
            subject_id=subject_id,
            term=term,
            ca_score=ca_score,
            exam_score=exam_score,
            total_score=total,
            grade_band=band_for(total).value,
        )

        try:
            self._db.add(result)
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise AlreadySubmittedError(
                "Result already recorded for this term",
                details={"student_id": student_id, "subject_id": subject_id, "term": term},
            ) from e
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error("Failed to record term result: %s", str(e))
            raise CollaboratorUnavailableError("Result store unavailable") from e

        logger.info(
            "Recorded %s result for %s in %s: %d -> %s",
            term,
            student_id,
            subject_id,
            total,
            result.grade_band,
        )
        return TermResultRecord.model_validate(result)

    async def list_results(self, student_id: str, term: str | None = None) -> list[TermResultRecord]:
        """List a student's results, optionally for one term."""
        stmt = select(TermResult).where(TermResult.student_id == student_id)
        if term is not None:
            stmt = stmt.where(TermResult.term == term)
        stmt = stmt.order_by(TermResult.term, TermResult.subject_id)

        result = await self._db.execute(stmt)
        return [TermResultRecord.model_validate(row) for row in result.scalars()]

    @staticmethod
    def _check_bound(field: str, value: int, maximum: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
            raise ValidationError(
                f"{field} must be an integer between 0 and {maximum}",
                details={"field": field, "max": maximum},
            )
