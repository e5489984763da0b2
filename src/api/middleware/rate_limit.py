# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Limits are keyed by client IP. Sign-in and account provisioning get
their own tighter limits on top of the default.

Example:
    @router.post("/login")
    @limiter.limit(login_limit)
    async def login(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.core.config import get_settings

logger = logging.getLogger(__name__)


def login_limit() -> str:
    """Current sign-in rate limit string."""
    return f"{get_settings().rate_limit.login_per_minute}/minute"


def admin_limit() -> str:
    """Current provisioning rate limit string."""
    return f"{get_settings().rate_limit.admin_per_minute}/minute"


settings = get_settings()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit.requests_per_minute}/minute"],
    storage_uri=settings.rate_limit.storage_uri,
    enabled=settings.rate_limit.enabled,
)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> JSONResponse:
    """Return 429 in the standard error envelope."""
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_remote_address(request),
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": {
                "kind": "RateLimited",
                "message": "Too many requests. Please try again later.",
            },
        },
        headers={"Retry-After": "60"},
    )
