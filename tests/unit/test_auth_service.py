# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the login pass-through."""

import pytest

from src.domains.auth import AuthService
from src.domains.errors import (
    CollaboratorUnavailableError,
    InvalidCredentialsError,
    ValidationError,
)
from src.infrastructure.identity import ProviderUnavailableError


@pytest.fixture
async def auth_service(identity_provider) -> AuthService:
    await identity_provider.create_credential("0001", "student", {"role": "student"})
    return AuthService(identity_provider)


class TestLogin:
    """Tests for AuthService.login."""

    async def test_successful_login(self, auth_service: AuthService) -> None:
        """Test a valid handle and password return a session."""
        result = await auth_service.login("0001", "student")

        assert result.success is True
        assert result.access_token.startswith("access-")
        assert result.refresh_token.startswith("refresh-")
        assert result.expires_in == 3600
        assert result.user["user_metadata"] == {"role": "student"}

    async def test_handle_is_trimmed(self, auth_service: AuthService) -> None:
        """Test surrounding whitespace in the handle is ignored."""
        result = await auth_service.login("  0001 ", "student")

        assert result.access_token is not None

    async def test_wrong_password(self, auth_service: AuthService) -> None:
        """Test a rejected password maps to InvalidCredentialsError."""
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("0001", "teacher")

    @pytest.mark.parametrize(
        ("handle", "password", "field"),
        [
            ("", "student", "login_handle"),
            ("   ", "student", "login_handle"),
            ("0001", "", "password"),
        ],
    )
    async def test_blank_fields(
        self, auth_service: AuthService, handle: str, password: str, field: str
    ) -> None:
        """Test blank fields are rejected before calling the provider."""
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.login(handle, password)

        assert exc_info.value.details == {"field": field}

    async def test_provider_unavailable(self, auth_service: AuthService, identity_provider) -> None:
        """Test provider outages map to CollaboratorUnavailableError."""
        identity_provider.fail_sign_in = ProviderUnavailableError("down", 503)

        with pytest.raises(CollaboratorUnavailableError):
            await auth_service.login("0001", "student")
