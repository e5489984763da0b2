# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account provisioning API endpoints.

This module provides endpoints for school administrators:
- POST /teachers - Provision a teacher account
- POST /students - Provision a student account

Both return the new login identifier and the initial password. The
password is shown once and is not retrievable afterwards.

Example:
    POST /api/v1/admin/students
    Body:
        {"name": "Ada Obi", "classLevel": "JSS1"}
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from src.api.dependencies import get_account_provisioner
from src.api.middleware import admin_limit, limiter
from src.domains.provisioning import AccountProvisioner
from src.models.common import ErrorResponse
from src.models.provisioning import (
    ProvisionResponse,
    StudentProvisionRequest,
    TeacherProvisionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    409: {"description": "Identifier already taken", "model": ErrorResponse},
    422: {"description": "Missing required field", "model": ErrorResponse},
    500: {"description": "Partial account left behind", "model": ErrorResponse},
    503: {"description": "Collaborator unavailable", "model": ErrorResponse},
}


@router.post(
    "/teachers",
    response_model=ProvisionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision teacher account",
    responses=_ERROR_RESPONSES,
)
@limiter.limit(admin_limit)
async def create_teacher(
    request: Request,
    data: TeacherProvisionRequest,
    provisioner: AccountProvisioner = Depends(get_account_provisioner),
) -> ProvisionResponse:
    """Provision a teacher with a surname-based login handle.

    Args:
        request: HTTP request (used for rate limiting).
        data: Teacher profile fields.
        provisioner: Account provisioner.

    Returns:
        The handle and initial password of the new teacher.
    """
    account = await provisioner.provision_teacher(data)
    return ProvisionResponse.from_account(account)


@router.post(
    "/students",
    response_model=ProvisionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision student account",
    responses={
        **_ERROR_RESPONSES,
        503: {"description": "Collaborator unavailable or allocation exhausted", "model": ErrorResponse},
    },
)
@limiter.limit(admin_limit)
async def create_student(
    request: Request,
    data: StudentProvisionRequest,
    provisioner: AccountProvisioner = Depends(get_account_provisioner),
) -> ProvisionResponse:
    """Provision a student with the next sequential identifier.

    Args:
        request: HTTP request (used for rate limiting).
        data: Student profile fields.
        provisioner: Account provisioner.

    Returns:
        The identifier and initial password of the new student.
    """
    account = await provisioner.provision_student(data)
    return ProvisionResponse.from_account(account)
