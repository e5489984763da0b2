# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

- POST /login - Password sign-in for every role

Teachers sign in with their handle (``okafor417``), students with their
identifier (``0001``). A full email address is accepted as well.
"""

import logging

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_auth_service
from src.api.middleware import limiter, login_limit
from src.domains.auth import AuthService
from src.models.auth import LoginRequest, LoginResult
from src.models.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResult,
    summary="Sign in",
    responses={
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        503: {"description": "Identity provider unavailable", "model": ErrorResponse},
    },
)
@limiter.limit(login_limit)
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResult:
    """Sign in through the identity provider.

    Args:
        request: HTTP request (used for rate limiting).
        data: Login handle and password.
        auth_service: Login service.

    Returns:
        Session tokens and the user record.
    """
    return await auth_service.login(data.login_handle, data.password)
