# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the school portal store.

Importing this package registers every table on ``Base.metadata``.
"""

from src.infrastructure.database.models.account import (
    RoleCode,
    Student,
    Teacher,
    TeacherSubject,
    UserRole,
)
from src.infrastructure.database.models.assessment import Question, Submission, TermResult
from src.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    UUIDPrimaryKeyMixin,
    new_uuid,
)
from src.infrastructure.database.models.sequence import SequenceCounter

__all__ = [
    "Base",
    "CreatedAtMixin",
    "UUIDPrimaryKeyMixin",
    "new_uuid",
    # Accounts
    "RoleCode",
    "Teacher",
    "Student",
    "UserRole",
    "TeacherSubject",
    # Sequences
    "SequenceCounter",
    # Assessments
    "Question",
    "Submission",
    "TermResult",
]
