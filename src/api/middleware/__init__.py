# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    limiter: slowapi Limiter shared by all routes.
    rate_limit_exceeded_handler: 429 handler using the error envelope.
    RequestContextMiddleware: binds a request id to log events.
"""

from src.api.middleware.rate_limit import (
    admin_limit,
    limiter,
    login_limit,
    rate_limit_exceeded_handler,
)
from src.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "limiter",
    "login_limit",
    "admin_limit",
    "rate_limit_exceeded_handler",
    "RequestContextMiddleware",
]
