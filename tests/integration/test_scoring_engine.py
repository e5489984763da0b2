# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the scoring engine (SQLite-backed)."""

import asyncio

import pytest
from sqlalchemy import func, select

from src.domains.assessment import ScoringEngine
from src.domains.errors import AlreadySubmittedError, NotFoundError, ValidationError
from src.infrastructure.database.models import Question, Submission

pytestmark = pytest.mark.integration


async def seed_questions(session, assessment_id: str, answers: list[str]) -> None:
    # Inserted out of order to check the key is sorted by ordinal
    for ordinal, answer in reversed(list(enumerate(answers))):
        session.add(
            Question(
                assessment_id=assessment_id,
                ordinal_index=ordinal,
                prompt=f"Question {ordinal + 1}",
                correct_answer=answer,
            )
        )
    await session.commit()


@pytest.fixture
async def quiz(db_sessionmaker) -> str:
    async with db_sessionmaker() as session:
        await seed_questions(session, "quiz-1", ["b", "2", "true", "x"])
    return "quiz-1"


class TestGrade:
    """Tests for ScoringEngine.grade."""

    async def test_grades_and_records(self, db_session, quiz) -> None:
        """Test answers are compared per ordinal and the result is stored."""
        engine = ScoringEngine(db_session)

        result = await engine.grade(quiz, "0001", ["B", " 2", "TRUE", "y"])

        assert result.correct_count == 3
        assert result.total_questions == 4
        assert result.score_percent == 75
        assert result.grade_band == "A1"

        stored = await db_session.scalar(select(Submission))
        assert stored.subject_id == "0001"
        assert stored.answers == ["B", " 2", "TRUE", "y"]
        assert stored.score_percent == 75

    async def test_short_answer_list(self, db_session, quiz) -> None:
        """Test missing answers count as incorrect."""
        engine = ScoringEngine(db_session)

        result = await engine.grade(quiz, "0002", ["b"])

        assert result.correct_count == 1
        assert result.score_percent == 25
        assert result.grade_band == "F9"

    async def test_extra_answers_ignored(self, db_session, quiz) -> None:
        """Test answers beyond the key are not scored."""
        engine = ScoringEngine(db_session)

        result = await engine.grade(quiz, "0003", ["b", "2", "true", "x", "extra", "more"])

        assert result.correct_count == 4
        assert result.score_percent == 100

    async def test_no_answers(self, db_session, quiz) -> None:
        """Test a missing answer list scores zero."""
        engine = ScoringEngine(db_session)

        result = await engine.grade(quiz, "0004", None)

        assert result.correct_count == 0
        assert result.score_percent == 0
        assert result.grade_band == "F9"

    async def test_empty_assessment(self, db_session) -> None:
        """Test an assessment without questions scores zero."""
        engine = ScoringEngine(db_session)

        result = await engine.grade("empty-quiz", "0001", ["a"])

        assert result.total_questions == 0
        assert result.score_percent == 0
        assert result.grade_band == "F9"

    async def test_second_submission_rejected(self, db_session, quiz) -> None:
        """Test grading is one-shot and the first record is kept."""
        engine = ScoringEngine(db_session)
        await engine.grade(quiz, "0001", ["b", "2", "true", "x"])

        with pytest.raises(AlreadySubmittedError) as exc_info:
            await engine.grade(quiz, "0001", ["a", "a", "a", "a"])

        assert exc_info.value.details == {"assessment_id": quiz, "subject_id": "0001"}
        stored = await db_session.scalar(select(Submission))
        assert stored.score_percent == 100

    async def test_concurrent_submissions_record_once(self, db_sessionmaker, quiz) -> None:
        """Test racing submissions for the same student store one row."""

        async def submit(answers: list[str]):
            async with db_sessionmaker() as session:
                try:
                    return await ScoringEngine(session).grade(quiz, "0001", answers)
                except AlreadySubmittedError as e:
                    return e

        outcomes = await asyncio.gather(
            *(submit(["b", "2", "true", "x"]) for _ in range(4))
        )

        errors = [o for o in outcomes if isinstance(o, AlreadySubmittedError)]
        assert len(errors) == 3

        async with db_sessionmaker() as session:
            stored = await session.scalar(select(func.count()).select_from(Submission))
        assert stored == 1

    async def test_other_students_unaffected(self, db_session, quiz) -> None:
        """Test the one-shot guard is per student."""
        engine = ScoringEngine(db_session)

        await engine.grade(quiz, "0001", ["b"])
        result = await engine.grade(quiz, "0002", ["b", "2"])

        assert result.correct_count == 2

    @pytest.mark.parametrize(
        ("assessment_id", "subject_id", "field"),
        [("", "0001", "assessment_id"), ("quiz-1", "  ", "subject_id")],
    )
    async def test_blank_ids(self, db_session, assessment_id, subject_id, field) -> None:
        """Test blank ids are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            await ScoringEngine(db_session).grade(assessment_id, subject_id, ["b"])

        assert exc_info.value.details == {"field": field}


class TestGetSubmission:
    """Tests for ScoringEngine.get_submission."""

    async def test_returns_record(self, db_session, quiz) -> None:
        """Test the stored submission is returned."""
        engine = ScoringEngine(db_session)
        await engine.grade(quiz, "0001", ["b", "2"])

        record = await engine.get_submission(quiz, "0001")

        assert record.answers == ["b", "2"]
        assert record.score_percent == 50
        assert record.grade_band == "C6"
        assert record.submitted_at.tzinfo is not None

    async def test_missing_submission(self, db_session) -> None:
        """Test a missing submission raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await ScoringEngine(db_session).get_submission("quiz-1", "0009")
