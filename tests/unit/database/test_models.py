# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests table definitions, constraints and column defaults.
"""

from sqlalchemy import CheckConstraint, UniqueConstraint

from src.infrastructure.database.models import (
    Base,
    CreatedAtMixin,
    Question,
    RoleCode,
    SequenceCounter,
    Student,
    Submission,
    Teacher,
    TeacherSubject,
    TermResult,
    UserRole,
    new_uuid,
)


def unique_constraint_columns(model) -> set[tuple[str, ...]]:
    return {
        tuple(column.name for column in constraint.columns)
        for constraint in model.__table__.constraints
        if isinstance(constraint, UniqueConstraint)
    }


class TestBase:
    """Test base model functionality."""

    def test_base_registers_all_tables(self):
        """Verify importing the models package registers every table."""
        assert set(Base.metadata.tables) == {
            "teachers",
            "students",
            "user_roles",
            "teacher_subjects",
            "sequence_counters",
            "questions",
            "submissions",
            "term_results",
        }

    def test_created_at_mixin(self):
        """Verify CreatedAtMixin adds created_at."""
        assert hasattr(CreatedAtMixin, "created_at")
        assert "created_at" in Student.__table__.columns

    def test_new_uuid_is_unique_string(self):
        """Verify generated primary keys are distinct UUID strings."""
        first, second = new_uuid(), new_uuid()

        assert isinstance(first, str)
        assert len(first) == 36
        assert first != second


class TestAccountModels:
    """Test account tables."""

    def test_role_codes(self):
        """Verify role codes match the stored integers."""
        assert RoleCode.ADMIN == 1
        assert RoleCode.TEACHER == 2
        assert RoleCode.STUDENT == 3

    def test_identifiers_unique_per_table(self):
        """Verify teacher and student identifiers are unique within each table."""
        assert Teacher.__table__.c.identifier.unique is True
        assert Student.__table__.c.identifier.unique is True

    def test_credential_ref_is_unique(self):
        """Verify one role link per credential."""
        assert UserRole.__table__.c.credential_ref.unique is True

    def test_teacher_subject_unique_pair(self):
        """Verify a subject is assigned to a teacher at most once."""
        assert ("teacher_id", "subject_id") in unique_constraint_columns(TeacherSubject)

    def test_teacher_subject_cascades(self):
        """Verify subject rows are removed with their teacher."""
        foreign_key = next(iter(TeacherSubject.__table__.c.teacher_id.foreign_keys))

        assert foreign_key.column.table.name == "teachers"
        assert foreign_key.ondelete == "CASCADE"


class TestSequenceCounter:
    """Test sequence counter table."""

    def test_space_is_primary_key(self):
        """Verify one counter row per space."""
        assert [column.name for column in SequenceCounter.__table__.primary_key] == ["space"]

    def test_last_issued_non_negative(self):
        """Verify the counter cannot go negative."""
        checks = [
            constraint
            for constraint in SequenceCounter.__table__.constraints
            if isinstance(constraint, CheckConstraint)
        ]

        assert any("last_issued >= 0" in str(check.sqltext) for check in checks)


class TestAssessmentModels:
    """Test assessment tables."""

    def test_question_ordinal_unique_per_assessment(self):
        """Verify answer-key ordinals do not repeat within an assessment."""
        assert ("assessment_id", "ordinal_index") in unique_constraint_columns(Question)

    def test_submission_once_per_student(self):
        """Verify a student submits an assessment at most once."""
        assert ("assessment_id", "subject_id") in unique_constraint_columns(Submission)

    def test_term_result_once_per_term(self):
        """Verify one term result per student, subject and term."""
        assert ("student_id", "subject_id", "term") in unique_constraint_columns(TermResult)

    def test_submission_answers_default(self):
        """Verify answers default to an empty list."""
        assert Submission.__table__.c.answers.default.arg is list
