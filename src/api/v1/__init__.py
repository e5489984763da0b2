# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    admin: Teacher and student account provisioning.
    assessments: Assessment submission and grading.
    results: Manual term result entry.
    auth: Password sign-in.
"""

from fastapi import APIRouter

from src.api.v1 import admin, assessments, auth, results

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
router.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
router.include_router(results.router, prefix="/results", tags=["Results"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

__all__ = ["router"]
