# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account models: profile rows, role links and subject assignments.

Teacher and student identifiers live in separate tables and are unique
only within their own table, so the two identifier spaces may overlap.
"""

from enum import IntEnum

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class RoleCode(IntEnum):
    """Numeric role codes stored on role-link rows."""

    ADMIN = 1
    TEACHER = 2
    STUDENT = 3


class Teacher(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Teacher profile row."""

    __tablename__ = "teachers"

    identifier: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    surname: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    class_assignment: Mapped[str | None] = mapped_column(String(50), nullable=True)


class Student(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Student profile row."""

    __tablename__ = "students"

    identifier: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    class_level: Mapped[str] = mapped_column(String(50), nullable=False)


class UserRole(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Links an identity-provider credential to a profile row."""

    __tablename__ = "user_roles"

    credential_ref: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    role_code: Mapped[int] = mapped_column(Integer, nullable=False)
    profile_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    identifier: Mapped[str] = mapped_column(String(64), nullable=False)


class TeacherSubject(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """Assigns a subject to a teacher."""

    __tablename__ = "teacher_subjects"
    __table_args__ = (UniqueConstraint("teacher_id", "subject_id", name="uq_teacher_subject"),)

    teacher_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("teachers.id", ondelete="CASCADE"),
        nullable=False,
    )
    subject_id: Mapped[str] = mapped_column(String(64), nullable=False)
