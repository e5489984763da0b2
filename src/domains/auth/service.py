# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Login pass-through to the identity provider.

Passwords are never checked or stored locally; the identity provider
issues the session and this service only translates its failures into
domain errors.

Example:
    >>> auth_service = AuthService(identity)
    >>> session = await auth_service.login("okafor417", "teacher")
"""

import logging

from src.domains.errors import (
    CollaboratorUnavailableError,
    InvalidCredentialsError,
    ValidationError,
)
from src.infrastructure.identity import (
    AuthenticationFailedError,
    IdentityProvider,
    IdentityProviderError,
)
from src.models.auth import LoginResult

logger = logging.getLogger(__name__)


class AuthService:
    """Signs users in through the identity provider.

    Attributes:
        _identity: Identity provider client.
    """

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity

    async def login(self, login_handle: str, password: str) -> LoginResult:
        """Sign in with a login handle (or email) and password.

        Raises:
            ValidationError: If either field is blank.
            InvalidCredentialsError: If the provider rejects the credentials.
            CollaboratorUnavailableError: If the provider is unreachable.
        """
        if not login_handle or not login_handle.strip():
            raise ValidationError("login_handle is required", details={"field": "login_handle"})
        if not password:
            raise ValidationError("password is required", details={"field": "password"})

        login_handle = login_handle.strip()
        try:
            session = await self._identity.sign_in(login_handle, password)
        except AuthenticationFailedError as e:
            logger.info("Sign-in rejected for %s", login_handle)
            raise InvalidCredentialsError("Invalid login credentials") from e
        except IdentityProviderError as e:
            logger.error("Sign-in failed for %s: %s", login_handle, str(e))
            raise CollaboratorUnavailableError("Identity provider unavailable") from e

        logger.info("Signed in %s", login_handle)
        return LoginResult(
            access_token=session.get("access_token"),
            refresh_token=session.get("refresh_token"),
            expires_in=session.get("expires_in"),
            user=session.get("user") or {},
        )
