# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account provisioning domain.

Creates teacher and student accounts across the identity provider and the
relational store as one compensated unit of work.
"""

from src.domains.provisioning.policies import (
    PasswordPolicy,
    TeacherHandlePolicy,
    extract_surname,
)
from src.domains.provisioning.service import AccountProvisioner

__all__ = [
    "AccountProvisioner",
    "PasswordPolicy",
    "TeacherHandlePolicy",
    "extract_surname",
]
