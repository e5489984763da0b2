# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Dependencies are used to:
- Get request-scoped database sessions
- Get the identity provider client
- Build domain service instances

Tests replace ``get_db`` and ``get_identity_provider`` through
``app.dependency_overrides``.

Example:
    @router.post("/students")
    async def create_student(
        provisioner: AccountProvisioner = Depends(get_account_provisioner),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config import Settings, get_settings
from src.domains.assessment import ScoringEngine
from src.domains.auth import AuthService
from src.domains.provisioning import AccountProvisioner
from src.domains.results import ResultEntryService
from src.domains.sequence import SequenceAllocator
from src.infrastructure.database import get_session, get_sessionmaker
from src.infrastructure.identity import IdentityProvider, SupabaseIdentityProvider

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a request-scoped database session.

    Yields:
        AsyncSession bound to the application engine.
    """
    async with get_session() as session:
        yield session


def get_db_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the session factory used for short-lived allocator sessions."""
    return get_sessionmaker()


@lru_cache(maxsize=1)
def _default_identity_provider() -> SupabaseIdentityProvider:
    return SupabaseIdentityProvider.from_settings(get_settings().identity)


def get_identity_provider() -> IdentityProvider:
    """Get the identity provider client."""
    return _default_identity_provider()


def get_sequence_allocator(
    sessionmaker: async_sessionmaker[AsyncSession] = Depends(get_db_sessionmaker),
    settings: Settings = Depends(get_settings),
) -> SequenceAllocator:
    """Get a sequence allocator."""
    return SequenceAllocator(
        sessionmaker,
        max_retries=settings.allocator.max_retries,
        retry_backoff=settings.allocator.retry_backoff_seconds,
    )


def get_account_provisioner(
    db: AsyncSession = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
    allocator: SequenceAllocator = Depends(get_sequence_allocator),
    settings: Settings = Depends(get_settings),
) -> AccountProvisioner:
    """Get an account provisioner for the current request."""
    return AccountProvisioner.from_settings(db, identity, allocator, settings)


def get_scoring_engine(db: AsyncSession = Depends(get_db)) -> ScoringEngine:
    """Get a scoring engine for the current request."""
    return ScoringEngine(db)


def get_result_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ResultEntryService:
    """Get a term result service for the current request."""
    return ResultEntryService.from_settings(db, settings.grading)


def get_auth_service(
    identity: IdentityProvider = Depends(get_identity_provider),
) -> AuthService:
    """Get the login service."""
    return AuthService(identity)
