# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial school portal schema.

Creates:
- teachers, students: profile rows with per-space unique identifiers
- user_roles: credential to profile links
- teacher_subjects: subject assignments
- sequence_counters: durable allocator counters
- questions, submissions: answer keys and one-shot submissions
- term_results: manual continuous-assessment plus exam entries

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-06-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create all portal tables."""

    # =========================================================================
    # ACCOUNTS
    # =========================================================================
    op.create_table(
        "teachers",
        _id_column(),
        sa.Column("identifier", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("surname", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("class_assignment", sa.String(50), nullable=True),
        _timestamp_column("created_at"),
    )
    op.create_index("ix_teachers_identifier", "teachers", ["identifier"], unique=True)

    op.create_table(
        "students",
        _id_column(),
        sa.Column("identifier", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("class_level", sa.String(50), nullable=False),
        _timestamp_column("created_at"),
    )
    op.create_index("ix_students_identifier", "students", ["identifier"], unique=True)

    op.create_table(
        "user_roles",
        _id_column(),
        sa.Column("credential_ref", sa.String(64), nullable=False, unique=True),
        sa.Column("role_code", sa.Integer, nullable=False),
        sa.Column("profile_id", sa.String(36), nullable=False),
        sa.Column("identifier", sa.String(64), nullable=False),
        _timestamp_column("created_at"),
    )
    op.create_index("ix_user_roles_profile_id", "user_roles", ["profile_id"])

    op.create_table(
        "teacher_subjects",
        _id_column(),
        sa.Column(
            "teacher_id",
            sa.String(36),
            sa.ForeignKey("teachers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("subject_id", sa.String(64), nullable=False),
        _timestamp_column("created_at"),
        sa.UniqueConstraint("teacher_id", "subject_id", name="uq_teacher_subject"),
    )

    # =========================================================================
    # SEQUENCES
    # =========================================================================
    op.create_table(
        "sequence_counters",
        sa.Column("space", sa.String(50), primary_key=True),
        sa.Column("last_issued", sa.Integer, nullable=False, server_default="0"),
        _timestamp_column("updated_at"),
        sa.CheckConstraint("last_issued >= 0", name="ck_sequence_last_issued"),
    )

    # =========================================================================
    # ASSESSMENTS
    # =========================================================================
    op.create_table(
        "questions",
        _id_column(),
        sa.Column("assessment_id", sa.String(64), nullable=False),
        sa.Column("ordinal_index", sa.Integer, nullable=False),
        sa.Column("prompt", sa.Text, nullable=True),
        sa.Column("correct_answer", sa.String(500), nullable=False),
        sa.UniqueConstraint("assessment_id", "ordinal_index", name="uq_question_ordinal"),
    )
    op.create_index("ix_questions_assessment_id", "questions", ["assessment_id"])

    op.create_table(
        "submissions",
        _id_column(),
        sa.Column("assessment_id", sa.String(64), nullable=False),
        sa.Column("subject_id", sa.String(64), nullable=False),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("correct_count", sa.Integer, nullable=False),
        sa.Column("total_questions", sa.Integer, nullable=False),
        sa.Column("score_percent", sa.Integer, nullable=False),
        sa.Column("grade_band", sa.String(4), nullable=False),
        _timestamp_column("submitted_at"),
        sa.UniqueConstraint("assessment_id", "subject_id", name="uq_submission_once"),
    )
    op.create_index("ix_submissions_assessment_id", "submissions", ["assessment_id"])
    op.create_index("ix_submissions_subject_id", "submissions", ["subject_id"])

    op.create_table(
        "term_results",
        _id_column(),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("subject_id", sa.String(64), nullable=False),
        sa.Column("term", sa.String(50), nullable=False),
        sa.Column("ca_score", sa.Integer, nullable=False),
        sa.Column("exam_score", sa.Integer, nullable=False),
        sa.Column("total_score", sa.Integer, nullable=False),
        sa.Column("grade_band", sa.String(4), nullable=False),
        _timestamp_column("recorded_at"),
        sa.UniqueConstraint("student_id", "subject_id", "term", name="uq_term_result"),
    )
    op.create_index("ix_term_results_student_id", "term_results", ["student_id"])


def downgrade() -> None:
    """Drop all portal tables."""
    op.drop_table("term_results")
    op.drop_table("submissions")
    op.drop_table("questions")
    op.drop_table("sequence_counters")
    op.drop_table("teacher_subjects")
    op.drop_table("user_roles")
    op.drop_table("students")
    op.drop_table("teachers")
