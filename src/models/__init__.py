# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response schemas shared by services and routes."""

from src.models.assessment import (
    GradeResult,
    SubmissionRecord,
    SubmitAssessmentRequest,
    SubmitAssessmentResponse,
)
from src.models.auth import LoginRequest, LoginResult
from src.models.common import ErrorBody, ErrorResponse
from src.models.provisioning import (
    ProvisionedAccount,
    ProvisionResponse,
    StudentProvisionRequest,
    TeacherProvisionRequest,
)
from src.models.results import (
    TermResultListResponse,
    TermResultRecord,
    TermResultRequest,
)

__all__ = [
    "ErrorBody",
    "ErrorResponse",
    "TeacherProvisionRequest",
    "StudentProvisionRequest",
    "ProvisionedAccount",
    "ProvisionResponse",
    "SubmitAssessmentRequest",
    "SubmitAssessmentResponse",
    "GradeResult",
    "SubmissionRecord",
    "TermResultRequest",
    "TermResultRecord",
    "TermResultListResponse",
    "LoginRequest",
    "LoginResult",
]
