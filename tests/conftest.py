# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests (SQLite-backed)
"""

import os
from typing import Any
from uuid import uuid4

import pytest

# Must be set before the API package builds its rate limiter
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from src.core.config import clear_settings_cache  # noqa: E402
from src.infrastructure.identity import (  # noqa: E402
    AuthenticationFailedError,
    DuplicateHandleError,
)


# =============================================================================
# Identity Provider Fake
# =============================================================================


class FakeIdentityProvider:
    """In-memory identity provider.

    Failures are injected by setting ``fail_create``, ``fail_delete`` or
    ``fail_sign_in`` to an exception instance. Handles listed in
    ``taken_handles`` are rejected as duplicates.
    """

    def __init__(self) -> None:
        self.credentials: dict[str, dict[str, Any]] = {}
        self.taken_handles: set[str] = set()
        self.create_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.fail_create: Exception | None = None
        self.fail_delete: Exception | None = None
        self.fail_sign_in: Exception | None = None

    async def create_credential(
        self,
        login_handle: str,
        password: str,
        metadata: dict[str, Any],
    ) -> str:
        self.create_calls.append(login_handle)
        if self.fail_create is not None:
            raise self.fail_create
        if login_handle in self.taken_handles or login_handle in self.handles():
            raise DuplicateHandleError("A user with this email address has already been registered", 422)

        ref = str(uuid4())
        self.credentials[ref] = {
            "handle": login_handle,
            "password": password,
            "metadata": dict(metadata),
        }
        return ref

    async def delete_credential(self, credential_ref: str) -> None:
        self.delete_calls.append(credential_ref)
        if self.fail_delete is not None:
            raise self.fail_delete
        self.credentials.pop(credential_ref, None)

    async def sign_in(self, login_handle: str, password: str) -> dict[str, Any]:
        if self.fail_sign_in is not None:
            raise self.fail_sign_in
        for ref, credential in self.credentials.items():
            if credential["handle"] == login_handle and credential["password"] == password:
                return {
                    "access_token": f"access-{ref}",
                    "refresh_token": f"refresh-{ref}",
                    "expires_in": 3600,
                    "user": {"id": ref, "user_metadata": credential["metadata"]},
                }
        raise AuthenticationFailedError("Invalid login credentials", 400)

    def handles(self) -> list[str]:
        """Handles of all live credentials."""
        return sorted(credential["handle"] for credential in self.credentials.values())


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    """Provide a fresh in-memory identity provider."""
    return FakeIdentityProvider()


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Ensure every test starts from freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses SQLite)"
    )
